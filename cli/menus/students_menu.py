# cli/menus/students_menu.py

"""
Manage Students menu for the Term Register CLI.

This module defines the interface for managing the class roster, including:
- Adding new students
- Renaming students
- Removing students together with their marks and comments
- Viewing the roster

All operations are routed through the `ClassRegister` API; roster changes are written immediately.
"""

from typing import cast

import cli.menu_helpers as helpers
import cli.model_formatters as model_formatters
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from models.class_register import ClassRegister


def run(register: ClassRegister) -> None:
    """
    Top-level loop with dispatch for the Manage Students menu.

    Raises:
        RuntimeError: If the menu response is unrecognized.
    """
    title = formatters.format_banner_text("Manage Students")
    options = [
        ("Add Student", add_student),
        ("Rename Student", rename_student),
        ("Remove Student", remove_student),
        ("View Students", view_students),
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


# === add student ===


def add_student(register: ClassRegister) -> None:
    while True:
        name = helpers.prompt_user_input_or_cancel(
            "Enter the student's full name (leave blank to cancel):"
        )

        if name is MenuSignal.CANCEL:
            break
        name = cast(str, name)

        register_response = register.add_student(name)

        if not register_response.success:
            helpers.display_response_failure(register_response)
            print(f"\n{name} was not added.")

        else:
            print(f"\n{register_response.detail}")

        if not helpers.confirm_action("Would you like to continue adding new students?"):
            break

    helpers.returning_to("Manage Students menu")


# === edit student ===


def rename_student(register: ClassRegister) -> None:
    index = helpers.prompt_student_index(register)

    if index is None:
        helpers.returning_without_changes()
        return

    student = register.student_at(index)

    name = helpers.prompt_user_input_or_cancel(
        f"Current name: {student.name}\nEnter the new name (leave blank to cancel):"
    )

    if name is MenuSignal.CANCEL or not helpers.confirm_make_change():
        helpers.returning_without_changes()
        return

    register_response = register.rename_student(index, cast(str, name))

    if not register_response.success:
        helpers.display_response_failure(register_response)
        return

    print(f"\n{register_response.detail}")


# === remove student ===


def remove_student(register: ClassRegister) -> None:
    index = helpers.prompt_student_index(register)

    if index is None:
        helpers.returning_without_changes()
        return

    student = register.student_at(index)

    helpers.caution_banner()
    print(f"Removing {student.name} also deletes all of their marks and comments.")

    if not helpers.confirm_action("Are you sure you want to remove this student?"):
        helpers.returning_without_changes()
        return

    register_response = register.remove_student(index)

    if not register_response.success:
        helpers.display_response_failure(register_response)
        return

    print(f"\n{register_response.detail}")


# === view students ===


def view_students(register: ClassRegister) -> None:
    banner = formatters.format_banner_text("Students")
    print(f"\n{banner}")

    if not register.students:
        print("There are no students in this register.")
        return

    helpers.display_results(register.students, True, model_formatters.format_student_oneline)
