# models/aggregator.py

"""
Pure functions that turn raw marks into ranked sequence, term, and annual results.

Every function reads its inputs and returns a new value; none of them touch register state.
A calculation that lacks the data it needs returns None ("skipped") and the caller keeps
whatever result set it held before.

Normalization:
    Every average is placed on a 0-20 scale: `average = total_marks / total_possible * 20`,
    so subjects with different raw totals contribute in proportion to their totals.

Ranking:
    Rows are sorted by average, descending, with Python's stable sort. Ranks are the 1-based
    positions in that order. Tied averages receive consecutive ranks in roster order; there
    is no shared rank.

Statistics:
    Class average is the arithmetic mean of all row averages. Pass percentage is the share
    of rows whose average is at or above the passing mark.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Mapping, Sequence as SequenceOf

from core.config import PASSING_MARK, SCALE
from models.mark_record import MarkRecord
from models.periods import Sequence, Term
from models.results import (
    AnnualResult,
    ClassStatistics,
    ResultSet,
    RowType,
    SequenceResult,
    TermResult,
)
from models.student import Student
from models.subject import Subject

logger = logging.getLogger(__name__)


# === shared helpers ===


def rank_rows(rows: list[RowType]) -> tuple[RowType, ...]:
    ordered = sorted(rows, key=lambda row: row.ranking_value, reverse=True)

    return tuple(dataclasses.replace(row, rank=i) for i, row in enumerate(ordered, 1))


def class_statistics(
    averages: SequenceOf[float], passing_mark: float = PASSING_MARK
) -> ClassStatistics:
    """
    Computes class average and pass percentage for a list of averages.

    Raises:
        ValueError: If `averages` is empty.
    """
    if not averages:
        raise ValueError("Cannot compute class statistics without any results.")

    class_size = len(averages)
    passed = sum(1 for average in averages if average >= passing_mark)

    return ClassStatistics(
        class_average=sum(averages) / class_size,
        pass_percentage=passed / class_size * 100,
        class_size=class_size,
    )


def _score_students(
    students: SequenceOf[Student],
    subjects: SequenceOf[Subject],
    mark_records: Mapping[str, MarkRecord],
    sequences: tuple[Sequence, ...],
    row_type: type[SequenceResult],
    period: str,
    passing_mark: float,
    scale: float,
) -> ResultSet | None:
    if not students or not subjects:
        logger.debug(
            "Skipping %s: %d students, %d subjects", period, len(students), len(subjects)
        )
        return None

    total_possible = sum(subject.total for subject in subjects) * len(sequences)

    if total_possible <= 0:
        logger.debug("Skipping %s: total possible marks is zero", period)
        return None

    rows = []

    for student in students:
        record = mark_records.get(student.id)
        total_marks = 0.0

        if record is not None:
            for subject in subjects:
                total_marks += sum(record.numeric_mark(s, subject.name) for s in sequences)

        rows.append(
            row_type(
                student_id=student.id,
                student=student.name,
                total_marks=total_marks,
                total_possible=total_possible,
                average=total_marks / total_possible * scale,
            )
        )

    ranked = rank_rows(rows)
    statistics = class_statistics([row.average for row in rows], passing_mark)

    return ResultSet(period=period, rows=ranked, statistics=statistics)


# === sequence, term, and annual results ===


def compute_sequence_results(
    students: SequenceOf[Student],
    subjects: SequenceOf[Subject],
    mark_records: Mapping[str, MarkRecord],
    sequence: Sequence,
    passing_mark: float = PASSING_MARK,
    scale: float = SCALE,
) -> ResultSet[SequenceResult] | None:
    """
    Ranks every student on one sequence.

    Args:
        students: The roster, in roster order (used for tie order).
        subjects: The subjects counted in the totals.
        mark_records: Mark records keyed by student ID. Missing records count as all zeros.
        sequence: The sequence to score.
        passing_mark: Threshold for the pass percentage.
        scale: Upper bound of the normalized scale.

    Returns:
        The ranked result set, or None when there are no students or no subjects.

    Notes:
        - Missing and empty entries count as zero.
    """
    return _score_students(
        students,
        subjects,
        mark_records,
        (sequence,),
        SequenceResult,
        sequence.value,
        passing_mark,
        scale,
    )


def term_has_data(
    students: SequenceOf[Student],
    mark_records: Mapping[str, MarkRecord],
    term: Term,
) -> bool:
    """True if some student has at least one entered mark in each of the term's sequences."""
    first, second = term.sequences

    for student in students:
        record = mark_records.get(student.id)

        if record is not None and record.has_entries(first) and record.has_entries(second):
            return True

    return False


def compute_term_results(
    students: SequenceOf[Student],
    subjects: SequenceOf[Subject],
    mark_records: Mapping[str, MarkRecord],
    term: Term,
    passing_mark: float = PASSING_MARK,
    scale: float = SCALE,
) -> ResultSet[TermResult] | None:
    """
    Ranks every student on a term, i.e. the sum of its two sequences.

    Returns:
        The ranked result set, or None when the term has no usable data (see
        `term_has_data()`), or there are no students or no subjects.
    """
    if not term_has_data(students, mark_records, term):
        logger.debug("Skipping %s: a component sequence has no entries", term.value)
        return None

    return _score_students(
        students,
        subjects,
        mark_records,
        term.sequences,
        TermResult,
        term.value,
        passing_mark,
        scale,
    )


def compute_annual_results(
    term_results: Mapping[Term, ResultSet[TermResult]],
    students: SequenceOf[Student],
    passing_mark: float = PASSING_MARK,
) -> ResultSet[AnnualResult] | None:
    """
    Ranks every student on the mean of their three term averages.

    Term rows are joined by student ID, not by position, since each term set is sorted
    by its own ranking.

    Args:
        term_results: Result sets keyed by term. All three must exist and be non-empty.
        students: The roster, in roster order.
        passing_mark: Threshold for the pass percentage.

    Returns:
        The ranked result set, or None if any term set is missing or empty, or the roster
        is empty.

    Notes:
        - A student missing from a term set gets 0 for that term, and a warning is logged.
    """
    if not students or any(not term_results.get(term) for term in Term):
        logger.debug("Skipping annual results: not every term has been calculated")
        return None

    rows = []

    for student in students:
        term_averages = []

        for term in Term:
            row = term_results[term].find(student.id)

            if row is None:
                logger.warning(
                    "No %s result for student %s (%s); counting it as 0",
                    term.value,
                    student.name,
                    student.id,
                )
                term_averages.append(0.0)
            else:
                term_averages.append(row.average)

        first, second, third = term_averages

        rows.append(
            AnnualResult(
                student_id=student.id,
                student=student.name,
                first_term_average=first,
                second_term_average=second,
                third_term_average=third,
                final_average=(first + second + third) / 3,
            )
        )

    ranked = rank_rows(rows)
    statistics = class_statistics([row.final_average for row in rows], passing_mark)

    return ResultSet(period="annual", rows=ranked, statistics=statistics)


# === annotations ===


def mark_completion(
    students: SequenceOf[Student],
    subjects: SequenceOf[Subject],
    mark_records: Mapping[str, MarkRecord],
    sequence: Sequence,
) -> tuple[int, int]:
    """Returns (entered, expected) mark counts for a sequence."""
    expected = len(students) * len(subjects)
    entered = 0

    for student in students:
        record = mark_records.get(student.id)

        if record is None:
            continue

        entered += sum(1 for subject in subjects if record.has_mark(sequence, subject.name))

    return entered, expected


def performance_band(average: float | None, scale: float = SCALE) -> str:
    """Bands an average by its share of `scale`: 15/20 and up is excellent, 10/20 and up average."""
    if average is None:
        return ""

    if average >= scale * 0.75:
        return "excellent"

    if average >= scale * 0.5:
        return "average"

    return "poor"


def class_insight(pass_percentage: float | None) -> str:
    if pass_percentage is not None and pass_percentage >= 80:
        return "Excellent class performance! Most students are excelling."

    if pass_percentage is not None and pass_percentage >= 60:
        return "Good class performance with room for improvement."

    return "Class needs additional support to improve overall performance."
