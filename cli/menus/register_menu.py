# cli/menus/register_menu.py

"""
Register Manager menu for the Term Register CLI.

Provides calls to the top-level menus for managing Students, Subjects, Marks and Comments, and Results and Reports.
"""

import cli.menu_helpers as helpers
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from cli.menus import marks_menu, results_menu, students_menu, subjects_menu
from models.class_register import ClassRegister


def run(register: ClassRegister) -> None:
    """
    Top-level loop with dispatch for the Register Manager menu.

    Args:
        register (ClassRegister): The active register.

    Raises:
        RuntimeError: If the menu response is unrecognized.

    Notes:
        - Pending mark and comment writes are flushed before returning to the Start Menu.
    """
    title = formatters.format_banner_text("Register Manager")
    options = [
        ("Manage Students", lambda: students_menu.run(register)),
        ("Manage Subjects", lambda: subjects_menu.run(register)),
        ("Enter Marks and Comments", lambda: marks_menu.run(register)),
        ("Results and Reports", lambda: results_menu.run(register)),
        ("Reset Register", lambda: reset_register(register)),
    ]
    zero_option = "Return to Start Menu"

    try:
        while True:
            menu_response = helpers.display_menu(title, options, zero_option)

            if menu_response is MenuSignal.EXIT:
                break

            elif callable(menu_response):
                menu_response()

            else:
                raise RuntimeError(f"Unexpected MenuResponse received: {menu_response}")

    finally:
        register.flush()

    helpers.returning_to("Start Menu")


def reset_register(register: ClassRegister) -> None:
    helpers.caution_banner()
    print("Resetting deletes every student, subject, mark, and comment in this register.")

    if not helpers.confirm_action("Are you sure you want to reset the register?"):
        helpers.returning_without_changes()
        return

    register_response = register.reset()

    if not register_response.success:
        helpers.display_response_failure(register_response)
        return

    print(f"\n{register_response.detail}")
