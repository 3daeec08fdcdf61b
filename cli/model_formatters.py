# cli/model_formatters.py

# anything that renders domain objects or performs ClassRegister read-only operations
from textwrap import dedent

import core.formatters as formatters
from core.utils import short_id
from models.aggregator import class_insight, performance_band
from models.class_register import ClassRegister
from models.periods import ResultView, Sequence
from models.results import ClassStatistics, ResultSet
from models.student import Student
from models.subject import Subject

# === student formatters ===


def format_student_oneline(student: Student) -> str:
    return f"{student.name:<24} | {short_id(student.id)}"


# === subject formatters ===


def format_subject_oneline(subject: Subject) -> str:
    coefficient = f"coef {subject.coefficient:g}" if subject.coefficient else "coef --"
    teacher = f" | {subject.teacher}" if subject.teacher else ""

    return f"{subject.name:<20} | /{subject.total:<5g} | {coefficient}{teacher}"


def format_subject_multiline(subject: Subject, register: ClassRegister) -> str:
    coefficient = (
        f"{subject.coefficient:g}"
        if subject.coefficient
        else f"{register.config.default_coefficient:g} (default)"
    )

    return dedent(
        f"""\
        Subject:
        ... Name: {subject.name}
        ... Total: {subject.total:g}
        ... Coefficient: {coefficient}
        ... Teacher: {subject.teacher or '[NONE]'}"""
    )


# === mark formatters ===


def format_student_marks(student: Student, register: ClassRegister, sequence: Sequence) -> str:
    record = register.mark_record_for(student)
    marks = ", ".join(
        f"{subject.name}: {formatters.format_mark(record.get_mark(sequence, subject.name))}"
        for subject in register.subjects
    )

    return f"{student.name:<24} | {marks or '[NO SUBJECTS]'}"


def format_completion(register: ClassRegister, sequence: Sequence) -> str:
    entered, expected = register.mark_completion(sequence)

    return f"{sequence.label}: {entered} of {expected} marks entered"


# === result formatters ===


def format_view_label(view: ResultView) -> str:
    return "Annual" if view is ResultView.ANNUAL else view.term.label


def format_result_row(row) -> str:
    average = formatters.truncate2(row.average)

    return f"#{row.rank:<3} {row.student:<24} | {average:>6} / 20 | {performance_band(row.average)}"


def format_statistics(statistics: ClassStatistics) -> str:
    return dedent(
        f"""\
        ... Class size: {statistics.class_size}
        ... Class average: {formatters.truncate2(statistics.class_average)}
        ... Pass percentage: {formatters.format_percentage(statistics.pass_percentage)}
        ... {class_insight(statistics.pass_percentage)}"""
    )


def format_result_set(title: str, result_set: ResultSet) -> str:
    lines = [formatters.format_banner_text(title)]
    lines.extend(format_result_row(row) for row in result_set)
    lines.append(format_statistics(result_set.statistics))

    return "\n".join(lines)
