# tests/test_payload_builder.py

import pytest

from core.config import EngineConfig
from core.response import ErrorCode
from models.class_register import ClassRegister
from models.mark_record import MarkRecord
from models.periods import ResultView, Sequence, Term
from reports.payload_builder import subject_average, weighted_totals

SECOND_SEQUENCE_MARKS = [(16, 12), (12, 10), (7, 4)]


@pytest.fixture
def first_term_register(sample_register):
    for index, (math, eng) in enumerate(SECOND_SEQUENCE_MARKS):
        sample_register.set_mark(index, "Math", math, sequence=Sequence.SECOND)
        sample_register.set_mark(index, "Eng", eng, sequence=Sequence.SECOND)

    sample_register.calculate_sequence(Sequence.SECOND)
    return sample_register


@pytest.fixture
def annual_register(empty_register):
    register = empty_register
    register.add_student("Alice Mbah")
    register.add_student("Bruno Tchana")
    register.add_subject("Math", 20, coefficient=3)
    register.add_subject("Eng", 20)

    alice_marks = {Term.FIRST: 16, Term.SECOND: 12, Term.THIRD: 8}

    for term, mark in alice_marks.items():
        for sequence in term.sequences:
            for subject in ("Math", "Eng"):
                register.set_mark(0, subject, mark, sequence=sequence)
                register.set_mark(1, subject, 10, sequence=sequence)

    register.calculate_terms()
    return register


# === helpers ===


def test_subject_average_ignores_missing_sequences():
    record = MarkRecord("s1")
    record.set_mark(Sequence.FIRST, "Math", 14, 20)

    assert subject_average(record, "Math", Term.FIRST.sequences) == 14.0
    assert subject_average(record, "Eng", Term.FIRST.sequences) == ""
    assert subject_average(None, "Math", Term.FIRST.sequences) == ""


def test_weighted_totals_skip_empty_rows():
    rows = [
        {"_average": 18.0, "_normalized": 18.0, "coefficient": 4.0},
        {"_average": 14.0, "_normalized": 14.0, "coefficient": 2.0},
        {"_average": "", "_normalized": None, "coefficient": 5.0},
    ]

    total, average = weighted_totals(rows)

    assert total == 100.0
    assert average == pytest.approx(16.6666667)
    assert weighted_totals([]) == ("", "")


# === term payloads ===


def test_term_payload_uses_calculated_results(first_term_register):
    response = first_term_register.build_report_payload(0, "firstTerm")
    payload = response.data["payload"]
    term_data = payload["termData"]

    assert response.success
    assert term_data["fromResults"]
    assert term_data["position"] == 1
    assert term_data["average"] == "15.00"
    assert term_data["totalMarks"] == "60.00"
    assert term_data["classSize"] == 3
    assert term_data["classAverage"] == "10.00"
    assert term_data["passPercentage"] == "66.66"
    assert term_data["title"] == "FIRST TERM REPORT CARD"


def test_term_payload_subject_rows(first_term_register):
    payload = first_term_register.build_report_payload(0, ResultView.FIRST_TERM).data["payload"]
    math, eng = payload["subjectsData"]

    assert math["name"] == "Math"
    assert math["teacher"] == "Mr. Fon"
    assert math["coefficient"] == 4.0
    assert (math["seq1"], math["seq2"]) == (18.0, 16.0)
    assert math["average"] == "17.00"
    assert math["performance"] == "excellent"

    assert eng["average"] == "13.00"
    assert eng["performance"] == "average"
    assert "_average" not in eng


def test_term_payload_falls_back_to_weighted_totals(sample_register):
    payload = sample_register.build_report_payload(0, "firstTerm").data["payload"]
    term_data = payload["termData"]

    assert not term_data["fromResults"]
    assert term_data["position"] == ""
    assert term_data["totalMarks"] == "100.00"
    # 100 / 6 = 16.666..., truncated rather than rounded
    assert term_data["average"] == "16.66"
    assert term_data["classSize"] == 3
    assert term_data["classAverage"] == ""


def test_fallback_average_uses_configured_scale(store, timer_factory):
    register = ClassRegister.create(store, EngineConfig(scale=100), timer_factory).data["register"]
    register.add_student("Alice Mbah")
    register.add_subject("Math", 20, coefficient=4)
    register.add_subject("Eng", 20, coefficient=2)
    register.set_mark(0, "Math", 18, sequence=Sequence.FIRST)
    register.set_mark(0, "Eng", 14, sequence=Sequence.FIRST)

    payload = register.build_report_payload(0, "firstTerm").data["payload"]
    math, eng = payload["subjectsData"]

    assert payload["termData"]["totalMarks"] == "100.00"
    # (90 * 4 + 70 * 2) / 6
    assert payload["termData"]["average"] == "83.33"
    assert (math["performance"], eng["performance"]) == ("excellent", "average")


def test_payload_metadata_fields(first_term_register):
    metadata = {
        "schoolName": "Lycée Bilingue",
        "matricule": "LB-0042",
        "termTitleEn": "FIRST TERM REPORT",
        "principalComment": "Promoted",
        "subjectsMeta": [{"name": "Eng", "coefficient": 3, "remark": "Fluent"}],
    }

    response = first_term_register.build_report_payload(0, "firstTerm", metadata)
    payload = response.data["payload"]

    assert payload["studentData"]["name"] == "Alice Mbah"
    assert payload["studentData"]["matricule"] == "LB-0042"
    assert payload["studentData"]["dateOfBirth"] == ""
    assert payload["studentData"]["schoolName"] == "Lycée Bilingue"
    assert payload["studentData"]["poBox"] == ""
    assert "school" not in payload["studentData"]
    assert payload["termData"]["title"] == "FIRST TERM REPORT"
    assert payload["termData"]["principalComment"] == "Promoted"

    eng = payload["subjectsData"][1]
    assert eng["coefficient"] == 3.0
    assert eng["remark"] == "Fluent"


def test_payload_includes_term_comments(first_term_register):
    first_term_register.set_comment(0, Sequence.SECOND, "Steady progress")
    first_term_register.set_comment(0, Sequence.THIRD, "Not in this term")

    payload = first_term_register.build_report_payload(0, "firstTerm").data["payload"]

    assert payload["termData"]["comments"] == {"secondSequence": "Steady progress"}


def test_payload_rejects_sequence_view(sample_register):
    response = sample_register.build_report_payload(0, "sequence")

    assert response.error is ErrorCode.INVALID_INPUT


def test_payload_rejects_unknown_student(sample_register):
    response = sample_register.build_report_payload(5, "firstTerm")

    assert response.error is ErrorCode.NOT_FOUND


# === annual payloads ===


def test_annual_payload(annual_register):
    payload = annual_register.build_report_payload(0, "annual").data["payload"]
    term_data = payload["termData"]
    math = payload["subjectsData"][0]

    assert term_data["fromResults"]
    assert term_data["average"] == "12.00"
    assert term_data["firstTermAverage"] == "16.00"
    assert term_data["secondTermAverage"] == "12.00"
    assert term_data["thirdTermAverage"] == "8.00"
    assert term_data["position"] == 1

    assert (math["seq1"], math["seq2"]) == ("", "")
    assert math["average"] == "12.00"
    assert (math["term1"], math["term2"], math["term3"]) == ("16.00", "12.00", "8.00")


def test_build_all_report_payloads(annual_register):
    response = annual_register.build_all_report_payloads(ResultView.ANNUAL)
    payloads = response.data["payloads"]

    assert [p["studentData"]["name"] for p in payloads] == ["Alice Mbah", "Bruno Tchana"]
    assert payloads[1]["termData"]["average"] == "10.00"
    assert payloads[1]["termData"]["position"] == 2
