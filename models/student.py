# models/student.py

"""
Represents a student enrolled in the class register.

Stores an opaque unique ID and a display name. The student's marks and comments live in
separate `MarkRecord` and `CommentRecord` objects that share the student's lifecycle: they
are created on enrolment and deleted together with the student.

Includes functionality for:
- Validating and normalizing the display name
- Serializing to and from JSON-compatible dictionaries
"""

from __future__ import annotations

from typing import Any


class Student:

    def __init__(self, id: str, name: str):
        self._id: str = id
        # name uses property setter for validation
        self.name = name

    # === properties ===

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        self._name = Student.validate_name_input(name)

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "name": self._name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Student:
        return cls(
            id=data["id"],
            name=data["name"],
        )

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"Student({self._id}, {self._name})"

    def __str__(self) -> str:
        return f"STUDENT: name: {self._name}, id: {self._id}"

    # === data validators ===

    @staticmethod
    def validate_name_input(name: Any) -> str:
        """
        Validates and normalizes a Student display name.

        Args:
            name (Any): The input value to validate.

        Returns:
            The name with surrounding whitespace removed.

        Raises:
            TypeError: If the input is not a string.
            ValueError: If the name is blank.
        """
        if not isinstance(name, str):
            raise TypeError("Student name must be a string.")

        name = name.strip()

        if not name:
            raise ValueError("Student name cannot be blank.")

        return name
