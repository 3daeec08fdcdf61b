# models/results.py

"""
Derived, ephemeral result types produced by the aggregator.

Nothing here is persisted as a first-class entity. A `ResultSet` bundles the ranked rows of
one calculation with its `ClassStatistics`; a `ResultsSession` holds the latest result set
for each period and is replaced set-by-set, never merged.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Generic, Iterator, TypeVar

from models.periods import Sequence, Term


@dataclass(frozen=True)
class SequenceResult:
    student_id: str
    student: str
    total_marks: float
    total_possible: float
    average: float
    rank: int = 0

    @property
    def ranking_value(self) -> float:
        return self.average


@dataclass(frozen=True)
class TermResult(SequenceResult):
    pass


@dataclass(frozen=True)
class AnnualResult:
    student_id: str
    student: str
    first_term_average: float
    second_term_average: float
    third_term_average: float
    final_average: float
    rank: int = 0

    @property
    def ranking_value(self) -> float:
        return self.final_average

    @property
    def average(self) -> float:
        return self.final_average


@dataclass(frozen=True)
class ClassStatistics:
    class_average: float
    pass_percentage: float
    class_size: int


RowType = TypeVar("RowType", SequenceResult, TermResult, AnnualResult)


@dataclass(frozen=True)
class ResultSet(Generic[RowType]):
    """
    Ranked rows of one calculation plus the class-level statistics.

    Attributes:
        period (str): "firstSequence" ... "sixthSequence", "firstTerm" ... "thirdTerm", or "annual".
        rows (tuple): Rows sorted by ranking value, descending; `rows[i].rank == i + 1`.
        statistics (ClassStatistics): Class average and pass percentage.
    """

    period: str
    rows: tuple[RowType, ...]
    statistics: ClassStatistics

    def find(self, student_id: str) -> RowType | None:
        return next((row for row in self.rows if row.student_id == student_id), None)

    def find_by_name(self, name: str) -> RowType | None:
        return next((row for row in self.rows if row.student == name), None)

    def top(self) -> RowType | None:
        return self.rows[0] if self.rows else None

    def to_dict(self) -> dict:
        return {
            "period": self.period,
            "rows": [asdict(row) for row in self.rows],
            "statistics": asdict(self.statistics),
        }

    def __iter__(self) -> Iterator[RowType]:
        return iter(self.rows)

    def __len__(self) -> int:
        return len(self.rows)


@dataclass
class ResultsSession:
    """
    The latest result set per period for one register session.

    Callers replace whole sets with `replace_*`; a skipped calculation simply does not call
    them, which leaves the previous value in place.
    """

    sequences: dict[Sequence, ResultSet[SequenceResult]] = field(default_factory=dict)
    terms: dict[Term, ResultSet[TermResult]] = field(default_factory=dict)
    annual: ResultSet[AnnualResult] | None = None

    def replace_sequence(self, sequence: Sequence, result_set: ResultSet[SequenceResult]) -> None:
        self.sequences[sequence] = result_set

    def replace_term(self, term: Term, result_set: ResultSet[TermResult]) -> None:
        self.terms[term] = result_set

    def replace_annual(self, result_set: ResultSet[AnnualResult]) -> None:
        self.annual = result_set

    def for_view(self, view: str) -> ResultSet | None:
        view = getattr(view, "value", view)

        if view == "annual":
            return self.annual

        try:
            return self.terms.get(Term(view))
        except ValueError:
            pass

        try:
            return self.sequences.get(Sequence(view))
        except ValueError:
            return None

    def clear(self) -> None:
        self.sequences.clear()
        self.terms.clear()
        self.annual = None

    def quick_stats(self) -> dict:
        """Denormalized class statistics per period, cached for a fast initial render."""
        summary = {}

        for sequence, result_set in self.sequences.items():
            summary[sequence.value] = asdict(result_set.statistics)

        for term, result_set in self.terms.items():
            summary[term.value] = asdict(result_set.statistics)

        if self.annual is not None:
            summary["annual"] = asdict(self.annual.statistics)

        return summary
