# models/mark_record.py

"""
Holds one student's marks for the whole year.

A `MarkRecord` has six sequence slots. Each slot maps a subject name to either a numeric
score or the empty-mark sentinel (""), which means "not yet entered" and is distinct from
a score of zero.

Includes functionality for:
- Validating raw mark input against a subject's maximum score
- Reading marks with the empty sentinel for missing entries
- Stripping or renaming a subject key across all six sequences
- Serializing to and from JSON-compatible dictionaries (the persisted shape uses the
  sequence identifiers as top-level keys, e.g. `{"firstSequence": {"Math": 18}}`)

Notes:
- Validation lives in `validate_mark_input()`; `set_mark()` always validates.
"""

from __future__ import annotations

import math
from typing import Any

from core.config import EMPTY_MARK
from models.periods import Sequence

MarkValue = float | str


class MarkRecord:

    def __init__(self, student_id: str, sequences: dict[Sequence, dict[str, MarkValue]] | None = None):
        self._student_id = student_id
        self._sequences: dict[Sequence, dict[str, MarkValue]] = {
            sequence: {} for sequence in Sequence
        }

        for sequence, marks in (sequences or {}).items():
            self._sequences[Sequence.parse(sequence)] = dict(marks)

    # === properties ===

    @property
    def student_id(self) -> str:
        return self._student_id

    # === data accessors ===

    def marks_for(self, sequence: Sequence) -> dict[str, MarkValue]:
        return self._sequences[sequence].copy()

    def get_mark(self, sequence: Sequence, subject_name: str) -> MarkValue:
        return self._sequences[sequence].get(subject_name, EMPTY_MARK)

    def numeric_mark(self, sequence: Sequence, subject_name: str) -> float:
        """Returns the mark as a number, treating a missing or empty entry as zero."""
        mark = self.get_mark(sequence, subject_name)
        return 0.0 if mark == EMPTY_MARK else float(mark)

    def has_mark(self, sequence: Sequence, subject_name: str) -> bool:
        return self.get_mark(sequence, subject_name) != EMPTY_MARK

    def has_entries(self, sequence: Sequence) -> bool:
        return any(mark != EMPTY_MARK for mark in self._sequences[sequence].values())

    # === data manipulators ===

    def set_mark(self, sequence: Sequence, subject_name: str, raw_value: Any, max_total: float) -> MarkValue:
        """
        Validates and stores a mark in a single sequence slot.

        Args:
            sequence (Sequence): The sequence slot to update. Other slots are untouched.
            subject_name (str): The subject key.
            raw_value (Any): A number, a numeric string, or the empty-mark sentinel.
            max_total (float): The subject's maximum achievable score.

        Returns:
            The stored value.

        Raises:
            TypeError, ValueError: Propagated from `validate_mark_input()`; nothing is stored.
        """
        value = MarkRecord.validate_mark_input(raw_value, max_total)
        self._sequences[sequence][subject_name] = value
        return value

    def remove_subject(self, subject_name: str) -> bool:
        removed = False

        for marks in self._sequences.values():
            if marks.pop(subject_name, None) is not None:
                removed = True

        return removed

    def rename_subject(self, old_name: str, new_name: str) -> None:
        for marks in self._sequences.values():
            if old_name in marks:
                marks[new_name] = marks.pop(old_name)

    # === persistence and import ===

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"id": self._student_id}

        for sequence, marks in self._sequences.items():
            data[sequence.value] = dict(marks)

        return data

    @classmethod
    def from_dict(cls, data: dict, student_id: str | None = None) -> MarkRecord:
        sequences = {
            sequence: dict(data.get(sequence.value) or {}) for sequence in Sequence
        }

        return cls(student_id or data["id"], sequences)

    # === dunder methods ===

    def __repr__(self) -> str:
        counts = ", ".join(
            f"{s.number}:{sum(1 for m in marks.values() if m != EMPTY_MARK)}"
            for s, marks in self._sequences.items()
        )
        return f"MarkRecord({self._student_id}, {counts})"

    # === data validators ===

    @staticmethod
    def validate_mark_input(raw_value: Any, max_total: float) -> MarkValue:
        """
        Validates and normalizes a raw mark entry.

        Accepts the empty-mark sentinel unconditionally, otherwise:
            - Casts to float (numeric strings are accepted).
            - Ensures the number is finite.
            - Ensures it lies within `[0, max_total]`.

        Args:
            raw_value (Any): The input value to validate.
            max_total (float): The subject's maximum achievable score.

        Returns:
            The empty-mark sentinel, or the normalized mark (float).

        Raises:
            TypeError: If the input cannot be cast to float.
            ValueError: If the input is non-finite, negative, or greater than `max_total`.
        """
        if raw_value is None or (isinstance(raw_value, str) and raw_value.strip() == EMPTY_MARK):
            return EMPTY_MARK

        if isinstance(raw_value, bool):
            raise TypeError("Invalid input. Mark must be a number.")

        try:
            mark = float(raw_value)

        except (TypeError, ValueError):
            raise TypeError("Invalid input. Mark must be a number.") from None

        if not math.isfinite(mark):
            raise ValueError("Invalid input. Mark must be a finite number.")

        if mark < 0:
            raise ValueError("Invalid input. Mark cannot be less than zero.")

        if mark > max_total:
            raise ValueError(f"Invalid input. Mark cannot exceed the subject total of {max_total:g}.")

        return mark
