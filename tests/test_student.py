# tests/test_student.py

import pytest

from models.student import Student


def test_student_to_dict(sample_student):
    data = sample_student.to_dict()

    assert data == {"id": "s001", "name": "Alice Mbah"}


def test_student_from_dict():
    student = Student.from_dict({"id": "s001", "name": "  Alice Mbah "})

    assert student.id == "s001"
    assert student.name == "Alice Mbah"


def test_student_to_str(sample_student):
    assert sample_student.__str__() == "STUDENT: name: Alice Mbah, id: s001"


def test_student_rejects_blank_name():
    with pytest.raises(ValueError):
        Student("s001", "   ")


def test_student_rejects_non_string_name():
    with pytest.raises(TypeError):
        Student("s001", 42)
