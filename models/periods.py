# models/periods.py

"""
Grading periods of the school year.

A year has six sequences. Consecutive pairs form the three terms, and the fixed mapping is
{1, 2} -> first term, {3, 4} -> second term, {5, 6} -> third term. Enum values are the
identifiers used as keys in persisted mark and comment records.
"""

from __future__ import annotations

from enum import Enum


class Sequence(str, Enum):
    FIRST = "firstSequence"
    SECOND = "secondSequence"
    THIRD = "thirdSequence"
    FOURTH = "fourthSequence"
    FIFTH = "fifthSequence"
    SIXTH = "sixthSequence"

    @property
    def number(self) -> int:
        return list(Sequence).index(self) + 1

    @property
    def term(self) -> Term:
        return list(Term)[(self.number - 1) // 2]

    @property
    def label(self) -> str:
        return f"Sequence {self.number}"

    @classmethod
    def parse(cls, value: str | Sequence) -> Sequence:
        """
        Resolves a sequence from its identifier ("thirdSequence") or its number ("3").

        Raises:
            ValueError: If the value matches no sequence.
        """
        if isinstance(value, Sequence):
            return value

        text = str(value).strip()

        if text.isdigit() and 1 <= int(text) <= len(cls):
            return list(cls)[int(text) - 1]

        return cls(text)


class Term(str, Enum):
    FIRST = "firstTerm"
    SECOND = "secondTerm"
    THIRD = "thirdTerm"

    @property
    def number(self) -> int:
        return list(Term).index(self) + 1

    @property
    def sequences(self) -> tuple[Sequence, Sequence]:
        ordered = list(Sequence)
        start = (self.number - 1) * 2
        return ordered[start], ordered[start + 1]

    @property
    def label(self) -> str:
        return ("First", "Second", "Third")[self.number - 1] + " Term"


class ResultView(str, Enum):
    SEQUENCE = "sequence"
    FIRST_TERM = "firstTerm"
    SECOND_TERM = "secondTerm"
    THIRD_TERM = "thirdTerm"
    ANNUAL = "annual"

    @property
    def term(self) -> Term | None:
        try:
            return Term(self.value)
        except ValueError:
            return None

    @property
    def is_report_view(self) -> bool:
        return self is not ResultView.SEQUENCE
