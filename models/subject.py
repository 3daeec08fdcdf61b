# models/subject.py

"""
Represents a subject taught to the class.

Each `Subject` has a display name that is unique within the register, a maximum achievable
score (`total`), and optional report metadata: a coefficient used for weighted report
totals and the name of the teaching staff member.

Key behaviors:
- `total`: A positive, finite number. Every stored mark for the subject must lie in `[0, total]`.
- `coefficient`: A positive number or None. None means the configured default applies.
- `to_dict()` / `from_dict()`: Used for serialization and persistence.

Notes:
- Marks are keyed by subject name, so renaming a subject must be mirrored in every
  `MarkRecord`. The `ClassRegister` handles this.
"""

from __future__ import annotations

import math
from typing import Any


class Subject:

    def __init__(
        self,
        id: str,
        name: str,
        total: float,
        coefficient: float | None = None,
        teacher: str | None = None,
    ):
        self._id = id
        # name, total, and coefficient use setter methods for validation
        self.name = name
        self.total = total
        self.coefficient = coefficient
        self._teacher = teacher.strip() if teacher else ""

    # === properties ===

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @name.setter
    def name(self, name: str) -> None:
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Subject name cannot be blank.")

        self._name = name.strip()

    @property
    def total(self) -> float:
        return self._total

    @total.setter
    def total(self, total: Any) -> None:
        self._total = Subject.validate_total_input(total)

    @property
    def coefficient(self) -> float | None:
        return self._coefficient

    @coefficient.setter
    def coefficient(self, coefficient: Any) -> None:
        self._coefficient = Subject.validate_coefficient_input(coefficient)

    @property
    def teacher(self) -> str:
        return self._teacher

    @teacher.setter
    def teacher(self, teacher: str | None) -> None:
        self._teacher = teacher.strip() if teacher else ""

    def coefficient_or(self, default: float) -> float:
        return self._coefficient if self._coefficient is not None else default

    # === persistence and import ===

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "name": self._name,
            "total": self._total,
            "coefficient": self._coefficient,
            "teacher": self._teacher,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Subject:
        return cls(
            id=data["id"],
            name=data["name"],
            total=data["total"],
            coefficient=data.get("coefficient"),
            teacher=data.get("teacher"),
        )

    # === dunder methods ===

    def __repr__(self) -> str:
        return f"Subject({self._id}, {self._name}, {self._total}, {self._coefficient})"

    def __str__(self) -> str:
        return f"SUBJECT: name: {self._name}, total: {self._total}, id: {self._id}"

    # === data validators ===

    @staticmethod
    def validate_total_input(total: Any) -> float:
        """
        Validates and normalizes a `Subject` maximum score.

        Args:
            total (Any): The input value to validate.

        Returns:
            The normalized total (float).

        Raises:
            TypeError: If the input cannot be cast to float.
            ValueError: If the input is non-finite or not greater than zero.
        """
        try:
            total = float(total)

        except (TypeError, ValueError):
            raise TypeError("Subject total must be a number.") from None

        if not math.isfinite(total):
            raise ValueError("Subject total must be a finite number.")

        if total <= 0:
            raise ValueError("Subject total must be greater than zero.")

        return total

    @staticmethod
    def validate_coefficient_input(coefficient: Any) -> float | None:
        """
        Validates and normalizes a `Subject` coefficient.

        Accepts None (and the empty string) as "use the default", otherwise the value
        must be a finite number greater than zero.

        Raises:
            TypeError: If the input is not None and cannot be cast to float.
            ValueError: If the input is non-finite or not greater than zero.
        """
        if coefficient is None or coefficient == "":
            return None

        try:
            coefficient = float(coefficient)

        except (TypeError, ValueError):
            raise TypeError("Coefficient must be a number or None.") from None

        if not math.isfinite(coefficient) or coefficient <= 0:
            raise ValueError("Coefficient must be a finite number greater than zero.")

        return coefficient
