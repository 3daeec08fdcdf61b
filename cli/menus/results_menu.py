# cli/menus/results_menu.py

"""
Results and Reports menu for the Term Register CLI.

Calculating a sequence also attempts its term and the annual results; any level without enough data is
skipped and keeps its previous results. Report payloads are written as JSON files for an external renderer.
"""

import json
import os
from typing import cast

import cli.menu_helpers as helpers
import cli.model_formatters as model_formatters
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from cli.path_utils import sanitize_name
from core.utils import short_id
from models.class_register import ClassRegister
from models.periods import Sequence, Term


def run(register: ClassRegister) -> None:
    """
    Top-level loop with dispatch for the Results and Reports menu.

    Raises:
        RuntimeError: If the menu response is unrecognized.
    """
    title = formatters.format_banner_text("Results and Reports")
    options = [
        ("Calculate Sequence", calculate_sequence),
        ("Calculate All Terms", calculate_terms),
        ("View Results", view_results),
        ("View Class Summary", view_quick_stats),
        ("Export Report Payloads", export_report_payloads),
    ]
    zero_option = "Return to Register Manager menu"

    while True:
        menu_response = helpers.display_menu(title, options, zero_option)

        if menu_response is MenuSignal.EXIT:
            break

        elif callable(menu_response):
            menu_response(register)

        else:
            raise RuntimeError(f"Unexpected MenuResponse received: {menu_response}")

    helpers.returning_to("Register Manager menu")


# === calculations ===


def calculate_sequence(register: ClassRegister) -> None:
    sequence = helpers.prompt_sequence(register.selected_sequence)

    if sequence is None:
        helpers.returning_without_changes()
        return

    register_response = register.calculate_sequence(sequence)

    if not register_response.success:
        helpers.display_response_failure(register_response)
        return

    display_calculation(register_response.data)


def calculate_terms(register: ClassRegister) -> None:
    register_response = register.calculate_terms()

    if not register_response.success:
        helpers.display_response_failure(register_response)
        return

    display_calculation(register_response.data)


def display_calculation(data: dict) -> None:
    print("\nCalculation complete.")

    for label in data.get("skipped", []):
        print(f"... Skipped {label}: not enough marks entered.")


# === views ===


def view_results(register: ClassRegister) -> None:
    results = register.results
    views = [(s.label, results.sequences.get(s)) for s in Sequence]
    views += [(t.label, results.terms.get(t)) for t in Term]
    views.append(("Annual", results.annual))

    available = [(label, result_set) for label, result_set in views if result_set is not None]

    if not available:
        print("\nNo results have been calculated yet.")
        return

    index = helpers.prompt_index_from_list(available, "Calculated Results", lambda x: x[0])

    if index is None:
        helpers.returning_without_changes()
        return

    label, result_set = available[index]
    print(f"\n{model_formatters.format_result_set(label, result_set)}")


def view_quick_stats(register: ClassRegister) -> None:
    banner = formatters.format_banner_text("Class Summary")
    print(f"\n{banner}")

    quick_stats = register.quick_stats

    if not quick_stats:
        print("No results have been calculated yet.")
        return

    for period, stats in quick_stats.items():
        average = formatters.truncate2(stats.get("class_average"))
        passed = formatters.format_percentage(stats.get("pass_percentage"))
        print(f"{period:<16} | average {average:>6} | pass {passed}")


# === reports ===


def export_report_payloads(register: ClassRegister) -> None:
    """
    Builds report payloads for every student and writes one JSON file per student.

    Notes:
        - Files are written to `<dir>/<view>/<student name>_<short id>.json`.
        - Optional school and template fields are read from a JSON metadata file if one is given.
    """
    view = helpers.prompt_report_view()

    if view is None:
        helpers.returning_without_changes()
        return

    metadata = {}
    metadata_path = helpers.prompt_user_input_or_none(
        "Enter path to a report metadata JSON file (leave blank to skip):"
    )

    if metadata_path is not None:
        try:
            with open(os.path.expanduser(metadata_path), "r", encoding="utf-8") as f:
                metadata = json.load(f)

        except (OSError, json.JSONDecodeError) as e:
            print(f"\nCould not read metadata file: {e}")
            return

    register_response = register.build_all_report_payloads(view, metadata)

    if not register_response.success:
        helpers.display_response_failure(register_response)
        return

    out_dir = helpers.prompt_user_input_or_cancel(
        "Enter the directory to write the reports to (leave blank to cancel):"
    )

    if out_dir is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return

    target = os.path.join(os.path.expanduser(cast(str, out_dir)), view.value)
    os.makedirs(target, exist_ok=True)

    payloads = register_response.data["payloads"]

    for payload in payloads:
        student = payload["studentData"]
        file_name = report_file_name(student["name"], student["id"])

        with open(os.path.join(target, file_name), "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, sort_keys=True)

    print(f"\n{len(payloads)} report payloads written to {target}.")


def report_file_name(student_name: str, student_id: str) -> str:
    return f"{sanitize_name(student_name)}_{sanitize_name(short_id(student_id))}.json"
