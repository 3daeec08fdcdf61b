# cli/menus/subjects_menu.py

"""
Manage Subjects menu for the Term Register CLI.

Subjects carry a maximum score (total), an optional coefficient for weighted report totals,
and an optional teacher name. Renaming a subject carries its marks over; removing it strips
its marks from every student.
"""

from collections.abc import Callable
from typing import cast

import cli.menu_helpers as helpers
import cli.model_formatters as model_formatters
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from models.class_register import ClassRegister


def run(register: ClassRegister) -> None:
    """
    Top-level loop with dispatch for the Manage Subjects menu.

    Raises:
        RuntimeError: If the menu response is unrecognized.
    """
    title = formatters.format_banner_text("Manage Subjects")
    options = [
        ("Add Subject", add_subject),
        ("Edit Subject", edit_subject),
        ("Remove Subject", remove_subject),
        ("View Subjects", view_subjects),
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


# === add subject ===


def add_subject(register: ClassRegister) -> None:
    while True:
        name = helpers.prompt_user_input_or_cancel(
            "Enter the subject name (leave blank to cancel):"
        )

        if name is MenuSignal.CANCEL:
            break
        name = cast(str, name)

        total = helpers.prompt_user_input("Enter the maximum score (e.g. 20):")
        coefficient = helpers.prompt_user_input_or_none(
            "Enter the coefficient (leave blank to use the default):"
        )
        teacher = helpers.prompt_user_input_or_none(
            "Enter the teacher's name (leave blank to skip):"
        )

        register_response = register.add_subject(name, total, coefficient, teacher)

        if not register_response.success:
            helpers.display_response_failure(register_response)
            print(f"\n{name} was not added.")

        else:
            print(f"\n{register_response.detail}")

        if not helpers.confirm_action("Would you like to continue adding new subjects?"):
            break

    helpers.returning_to("Manage Subjects menu")


# === edit subject ===


def get_editable_fields() -> list[tuple[str, Callable[[int, ClassRegister], None]]]:
    return [
        ("Name", edit_name_and_confirm),
        ("Total", edit_total_and_confirm),
        ("Coefficient", edit_coefficient_and_confirm),
        ("Teacher", edit_teacher_and_confirm),
    ]


def edit_subject(register: ClassRegister) -> None:
    index = helpers.prompt_subject_index(register)

    if index is None:
        helpers.returning_without_changes()
        return

    title = formatters.format_banner_text("Editable Fields")
    options = [
        (label, lambda fn=fn: fn(index, register)) for label, fn in get_editable_fields()
    ]

    while True:
        print(f"\n{model_formatters.format_subject_multiline(register.subject_at(index), register)}")

        menu_response = helpers.display_menu(title, options, "Finish editing")

        if menu_response is MenuSignal.EXIT:
            break

        elif callable(menu_response):
            menu_response()

        else:
            raise RuntimeError(f"Unexpected MenuResponse received: {menu_response}")


def _prompt_and_update(register: ClassRegister, index: int, field: str, prompt: str) -> None:
    value = helpers.prompt_user_input_or_cancel(f"{prompt} (leave blank to cancel):")

    if value is MenuSignal.CANCEL or not helpers.confirm_make_change():
        helpers.returning_without_changes()
        return

    register_response = register.update_subject(index, **{field: value})

    if not register_response.success:
        helpers.display_response_failure(register_response)
        return

    print(f"\n{register_response.detail}")


def edit_name_and_confirm(index: int, register: ClassRegister) -> None:
    _prompt_and_update(register, index, "name", "Enter the new subject name")


def edit_total_and_confirm(index: int, register: ClassRegister) -> None:
    _prompt_and_update(register, index, "total", "Enter the new maximum score")


def edit_coefficient_and_confirm(index: int, register: ClassRegister) -> None:
    _prompt_and_update(register, index, "coefficient", "Enter the new coefficient")


def edit_teacher_and_confirm(index: int, register: ClassRegister) -> None:
    _prompt_and_update(register, index, "teacher", "Enter the teacher's name")


# === remove subject ===


def remove_subject(register: ClassRegister) -> None:
    index = helpers.prompt_subject_index(register)

    if index is None:
        helpers.returning_without_changes()
        return

    subject = register.subject_at(index)

    helpers.caution_banner()
    print(f"Removing {subject.name} also deletes its marks for every student.")

    if not helpers.confirm_action("Are you sure you want to remove this subject?"):
        helpers.returning_without_changes()
        return

    register_response = register.remove_subject(index)

    if not register_response.success:
        helpers.display_response_failure(register_response)
        return

    print(f"\n{register_response.detail}")


# === view subjects ===


def view_subjects(register: ClassRegister) -> None:
    banner = formatters.format_banner_text("Subjects")
    print(f"\n{banner}")

    if not register.subjects:
        print("There are no subjects in this register.")
        return

    helpers.display_results(register.subjects, True, model_formatters.format_subject_oneline)
