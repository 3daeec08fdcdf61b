# tests/test_formatters.py

import pytest

from core.formatters import format_banner_text, format_mark, format_percentage, truncate2


def test_truncate2_cuts_instead_of_rounding():
    assert truncate2(13.9969) == "13.99"
    assert round(13.9969, 2) == 14.00


def test_truncate2_keeps_negative_zero_sign():
    assert truncate2(-0.005) == "-0.00"


@pytest.mark.parametrize(
    "value, expected",
    [
        (16, "16.00"),
        (9.0, "9.00"),
        (9.833333333, "9.83"),
        (33.33333333, "33.33"),
        ("12.5", "12.50"),
        (0.3, "0.30"),
        (-1.239, "-1.23"),
    ],
)
def test_truncate2_values(value, expected):
    assert truncate2(value) == expected


@pytest.mark.parametrize("value", [None, "", "abc", float("nan"), float("inf")])
def test_truncate2_returns_empty_for_missing_or_invalid(value):
    assert truncate2(value) == ""


def test_format_percentage():
    assert format_percentage(33.3333) == "33.33 %"
    assert format_percentage(None) == "N/A"


def test_format_mark():
    assert format_mark(18.0) == "18"
    assert format_mark(12.5) == "12.5"
    assert format_mark("") == "--"


def test_format_banner_text():
    banner = format_banner_text("Results", width=10)
    lines = banner.split("\n")

    assert lines[0] == "=" * 10
    assert lines[1].strip() == "Results"
    assert lines[2] == "=" * 10
