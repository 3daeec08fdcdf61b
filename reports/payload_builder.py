# reports/payload_builder.py

"""
Builds the flat, per-student report payload handed to an external document renderer.

The payload has three parts:
    - studentData: identity plus optional student and school header fields.
    - subjectsData: one row per subject with the component marks and the subject average.
    - termData: totals, position, average, and class statistics for the chosen view.

Display policy:
    Every displayed average, total, and percentage goes through `truncate2`, which cuts to
    two decimals without rounding (13.996 -> "13.99").

Fallback:
    Position and average come from the precomputed result row for the student when one
    exists. Otherwise they are recomputed locally as a coefficient-weighted mean of the
    per-subject averages, and position is left empty.
"""

from __future__ import annotations

from typing import Any

from core.config import DEFAULT_COEFFICIENT, EMPTY_MARK, SCALE
from core.formatters import truncate2
from models.aggregator import performance_band
from models.comment_record import CommentRecord
from models.mark_record import MarkRecord, MarkValue
from models.periods import ResultView, Sequence, Term
from models.results import ResultsSession
from models.student import Student
from models.subject import Subject

STUDENT_FIELDS = (
    "matricule",
    "dateOfBirth",
    "placeOfBirth",
    "className",
    "branchOfStudy",
    "option",
    "studentPhotoUrl",
)

SCHOOL_FIELDS = ("schoolName", "poBox", "telephone", "logoUrl")

TERM_FIELDS = (
    "termTitleFr",
    "teacherComment",
    "principalComment",
    "mention",
    "performanceFactors",
)

DEFAULT_TITLES = {
    ResultView.FIRST_TERM: "FIRST TERM REPORT CARD",
    ResultView.SECOND_TERM: "SECOND TERM REPORT CARD",
    ResultView.THIRD_TERM: "THIRD TERM REPORT CARD",
    ResultView.ANNUAL: "ANNUAL REPORT CARD",
}


# === per-subject helpers ===


def subject_average(
    mark_record: MarkRecord | None,
    subject_name: str,
    sequences: tuple[Sequence, ...],
) -> MarkValue:
    """
    Averages a subject over the sequences that have an entered mark.

    Absent sequences are excluded from the mean rather than counted as zero. Returns the
    empty-mark sentinel when no sequence has a mark.
    """
    if mark_record is None:
        return EMPTY_MARK

    present = [
        float(mark_record.get_mark(s, subject_name))
        for s in sequences
        if mark_record.has_mark(s, subject_name)
    ]

    if not present:
        return EMPTY_MARK

    return sum(present) / len(present)


def _subject_meta(extra_metadata: dict, subject_name: str) -> dict:
    for meta in extra_metadata.get("subjectsMeta") or []:
        if meta.get("name") == subject_name:
            return meta

    return {}


def _coefficient(meta: dict, subject: Subject, default: float) -> float:
    value = meta.get("coefficient")

    try:
        value = float(value)

    except (TypeError, ValueError):
        return subject.coefficient_or(default)

    return value if value > 0 else subject.coefficient_or(default)


def _build_subject_rows(
    subjects: list[Subject],
    mark_record: MarkRecord | None,
    view: ResultView,
    extra_metadata: dict,
    default_coefficient: float,
    scale: float = SCALE,
) -> list[dict]:
    rows = []
    term = view.term
    sequences = term.sequences if term is not None else tuple(Sequence)

    for subject in subjects:
        meta = _subject_meta(extra_metadata, subject.name)
        average = subject_average(mark_record, subject.name, sequences)

        if term is not None and mark_record is not None:
            first, second = (mark_record.get_mark(s, subject.name) for s in sequences)
        else:
            first, second = EMPTY_MARK, EMPTY_MARK

        normalized = None if average == EMPTY_MARK else average / subject.total * scale

        row = {
            "name": subject.name,
            "teacher": meta.get("teacher") or subject.teacher,
            "coefficient": _coefficient(meta, subject, default_coefficient),
            "seq1": first,
            "seq2": second,
            "average": truncate2(average),
            "performance": meta.get("performance") or performance_band(normalized, scale),
            "remark": meta.get("remark") or "",
            # kept numeric for the weighted fallback, removed before returning
            "_average": average,
            "_normalized": normalized,
        }

        if term is None:
            for t in Term:
                row[f"term{t.number}"] = truncate2(
                    subject_average(mark_record, subject.name, t.sequences)
                )

        rows.append(row)

    return rows


def weighted_totals(subject_rows: list[dict]) -> tuple[MarkValue, MarkValue]:
    """
    Computes a coefficient-weighted total and average from built subject rows.

    The total weights raw subject averages. The average weights each subject average
    normalized to the configured scale, so it is comparable with aggregated results.

    Returns:
        (total, average), both the empty-mark sentinel when no subject has an average.
    """
    total = 0.0
    weighted_sum = 0.0
    coefficient_sum = 0.0

    for row in subject_rows:
        if row["_average"] == EMPTY_MARK:
            continue

        total += row["_average"] * row["coefficient"]
        weighted_sum += row["_normalized"] * row["coefficient"]
        coefficient_sum += row["coefficient"]

    if coefficient_sum == 0:
        return EMPTY_MARK, EMPTY_MARK

    return total, weighted_sum / coefficient_sum


# === payload ===


def build_payload(
    student: Student,
    subjects: list[Subject],
    mark_record: MarkRecord | None,
    comment_record: CommentRecord | None,
    results: ResultsSession,
    view: ResultView | str,
    extra_metadata: dict | None = None,
    class_size: int | None = None,
    default_coefficient: float = DEFAULT_COEFFICIENT,
    scale: float = SCALE,
) -> dict[str, Any]:
    """
    Assembles the denormalized report payload for one student.

    Args:
        student (Student): The student the report is for.
        subjects (list[Subject]): Subjects in display order.
        mark_record (MarkRecord | None): The student's marks.
        comment_record (CommentRecord | None): The student's sequence comments.
        results (ResultsSession): The latest calculated result sets.
        view (ResultView | str): "firstTerm", "secondTerm", "thirdTerm", or "annual".
        extra_metadata (dict | None): Template data (student, school, and term fields, and
            "subjectsMeta" rows with teacher, coefficient, performance, and remark).
        class_size (int | None): Used when no result set exists for the view.
        default_coefficient (float): Coefficient for subjects with none configured.
        scale (float): Scale that subject averages are normalized to for the fallback average
            and performance bands.

    Returns:
        dict: `{"studentData": {...}, "subjectsData": [...], "termData": {...}}`.

    Raises:
        ValueError: If `view` is not a report view.
    """
    view = ResultView(view)

    if not view.is_report_view:
        raise ValueError(f"'{view.value}' is not a report view.")

    extra_metadata = extra_metadata or {}

    subject_rows = _build_subject_rows(
        subjects, mark_record, view, extra_metadata, default_coefficient, scale
    )
    weighted_total, weighted_average = weighted_totals(subject_rows)

    for row in subject_rows:
        del row["_average"]
        del row["_normalized"]

    result_set = results.for_view(view)
    result_row = result_set.find(student.id) if result_set is not None else None

    if result_row is not None:
        total_marks = getattr(result_row, "total_marks", weighted_total)
        position: int | str = result_row.rank
        average = result_row.average
    else:
        total_marks = weighted_total
        position = EMPTY_MARK
        average = weighted_average

    if result_set is not None:
        statistics = result_set.statistics
        size: int | str = statistics.class_size
        class_average = truncate2(statistics.class_average)
        pass_percentage = truncate2(statistics.pass_percentage)
    else:
        size = class_size if class_size is not None else EMPTY_MARK
        class_average = EMPTY_MARK
        pass_percentage = EMPTY_MARK

    sequences = view.term.sequences if view.term is not None else tuple(Sequence)

    term_data: dict[str, Any] = {
        "title": extra_metadata.get("termTitleEn") or DEFAULT_TITLES[view],
        "view": view.value,
        "totalMarks": truncate2(total_marks),
        "position": position,
        "average": truncate2(average),
        "classSize": size,
        "classAverage": class_average,
        "passPercentage": pass_percentage,
        "fromResults": result_row is not None,
        "comments": comment_record.comments_for(sequences) if comment_record else {},
    }

    for key in TERM_FIELDS:
        term_data[key] = extra_metadata.get(key, "")

    if view is ResultView.ANNUAL and result_row is not None:
        term_data["firstTermAverage"] = truncate2(result_row.first_term_average)
        term_data["secondTermAverage"] = truncate2(result_row.second_term_average)
        term_data["thirdTermAverage"] = truncate2(result_row.third_term_average)

    student_data: dict[str, Any] = {"id": student.id, "name": student.name}

    for key in STUDENT_FIELDS:
        student_data[key] = extra_metadata.get(key, "")

    for key in SCHOOL_FIELDS:
        student_data[key] = extra_metadata.get(key, "")

    return {
        "studentData": student_data,
        "subjectsData": subject_rows,
        "termData": term_data,
    }
