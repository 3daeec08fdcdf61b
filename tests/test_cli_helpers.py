# tests/test_cli_helpers.py

import os

import pytest

import cli.menu_helpers as helpers
from cli.menu_helpers import MenuSignal
from cli.menus.results_menu import report_file_name
from cli.path_utils import sanitize_name


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("  Form 5 Science ", "Form_5_Science"),
        ("A/B C", "A_B_C"),
        ("..\\..\\etc", ".._.._etc"),
        ("2025/2026", "2025_2026"),
    ],
)
def test_sanitize_name_yields_single_path_component(raw, expected):
    sanitized = sanitize_name(raw)

    assert sanitized == expected
    assert os.sep not in sanitized


def test_report_file_name_stays_inside_target_dir(tmp_path):
    file_name = report_file_name("../../Evil/Name", "abcdef123456")
    path = os.path.join(tmp_path, file_name)

    assert file_name == ".._.._Evil_Name_abcdef12.json"
    assert os.path.dirname(path) == str(tmp_path)


def test_blank_input_signals_cancel_or_none(monkeypatch):
    monkeypatch.setattr("builtins.input", lambda _: "   ")

    assert helpers.prompt_user_input_or_cancel("Name:") is MenuSignal.CANCEL
    assert helpers.prompt_user_input_or_none("Name:") is None


def test_menu_signals():
    assert {signal.name for signal in MenuSignal} == {"CANCEL", "EXIT"}
