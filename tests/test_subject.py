# tests/test_subject.py

import pytest

from models.subject import Subject


def test_subject_to_dict(sample_subject):
    assert sample_subject.to_dict() == {
        "id": "sub001",
        "name": "Math",
        "total": 20.0,
        "coefficient": 4.0,
        "teacher": "Mr. Fon",
    }


def test_subject_from_dict_without_optional_fields():
    subject = Subject.from_dict({"id": "sub002", "name": "Eng", "total": "20"})

    assert subject.total == 20.0
    assert subject.coefficient is None
    assert subject.teacher == ""
    assert subject.coefficient_or(1.0) == 1.0


@pytest.mark.parametrize("total", [0, -5, float("inf")])
def test_subject_rejects_invalid_total(total):
    with pytest.raises(ValueError):
        Subject("sub001", "Math", total)


def test_subject_rejects_non_numeric_total():
    with pytest.raises(TypeError):
        Subject("sub001", "Math", "twenty")


def test_subject_coefficient_validation():
    assert Subject.validate_coefficient_input("") is None
    assert Subject.validate_coefficient_input("3") == 3.0

    with pytest.raises(ValueError):
        Subject.validate_coefficient_input(0)


def test_subject_rejects_blank_name():
    with pytest.raises(ValueError):
        Subject("sub001", " ", 20)
