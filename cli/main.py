# cli/main.py

"""
Start Menu for the Term Register CLI.

Provides functions for creating or loading a class register stored in a directory of JSON documents.
"""

import logging
import os
from textwrap import dedent
from typing import cast

import cli.menu_helpers as helpers
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from cli.menus import register_menu
from cli.path_utils import dir_is_empty, resolve_save_dir
from core.config import LOG_LEVEL_ENV_VAR
from core.persistence import JsonDirectoryStore
from models.class_register import ClassRegister

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    level_name = os.environ.get(LOG_LEVEL_ENV_VAR, "WARNING").upper()
    level = getattr(logging, level_name, None)

    if not isinstance(level, int):
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def run_cli() -> None:
    """
    Top-level loop with dispatch for the Start menu.

    Raises:
        RuntimeError: If the menu response is unrecognized.
    """
    configure_logging()

    title = formatters.format_banner_text("TERM REGISTER")
    options = [
        ("Create a new Register", create_register),
        ("Load an existing Register", load_register),
    ]
    zero_option = "Exit Program"

    while True:
        menu_response = helpers.display_menu(title, options, zero_option)

        if menu_response is MenuSignal.EXIT:
            exit_program()

        elif callable(menu_response):
            register = menu_response()

            if register is not None:
                with register:
                    register_menu.run(register)

        else:
            raise RuntimeError(f"Unexpected MenuResponse received: {menu_response}")


def create_register() -> ClassRegister | None:
    """
    Prompts the user to create a new register by collecting class name, school year, and optional save directory.

    Returns:
        ClassRegister: A new register if successfully created.
        None: If the user cancels during input or if creation fails.

    Notes:
        - If the save directory input is left blank, the register is stored in `~/Documents/TermRegisters/<year>/<class>`.
        - If the resolved directory exists and is not empty, the user must explicitly confirm before continuing.
    """
    while True:
        name = helpers.prompt_user_input_or_cancel(
            "Enter the class name (e.g. Form 5 Science, leave blank to cancel):"
        )

        if name is MenuSignal.CANCEL:
            return None
        name = cast(str, name)

        year = helpers.prompt_user_input_or_cancel(
            "Enter the school year (e.g. 2025-2026, leave blank to cancel):"
        )

        if year is MenuSignal.CANCEL:
            return None
        year = cast(str, year)

        dir_input = helpers.prompt_user_input_or_none(
            "Enter directory to save the Register (leave blank to use default):"
        )

        dir_path = resolve_save_dir(name, year, dir_input)

        if os.path.exists(dir_path) and not dir_is_empty(dir_path):
            warning_banner = formatters.format_banner_text("WARNING!")
            print(f"\n{warning_banner}")
            print(
                dedent(
                    """\
                    The selected directory is not empty and may contain existing data.
                    Creating a Register here will clear its student and subject lists."""
                )
            )

            if not helpers.confirm_action("\nDo you wish to continue?"):
                continue

        print("\nCreating Register ...")

        register_response = ClassRegister.create(JsonDirectoryStore(dir_path))

        if not register_response.success:
            helpers.display_response_failure(register_response)
            continue

        print("... Register created successfully.")

        return register_response.data["register"]


def load_register() -> ClassRegister | None:
    """
    Prompts the user to load a register from a specified directory path.

    Returns:
        ClassRegister: A register if loading succeeds.
        None: If the user cancels or if loading fails.
    """
    while True:
        dir_path = helpers.prompt_user_input_or_cancel(
            "Enter path to Register directory (leave blank to cancel):"
        )

        if dir_path is MenuSignal.CANCEL:
            return None
        dir_path = cast(str, dir_path)

        dir_path = os.path.abspath(os.path.expanduser(dir_path))

        if not os.path.isdir(dir_path):
            print(f"\nDirectory not found: {dir_path}. Please try again.")
            continue

        print("\nLoading Register ...")

        register_response = ClassRegister.load(JsonDirectoryStore(dir_path))

        if not register_response.success:
            helpers.display_response_failure(register_response)
            continue

        print("... Register loaded successfully.")

        return register_response.data["register"]


def exit_program():
    """
    Displays an exit banner and terminates the CLI program.

    Raises:
        SystemExit: Always raised to immediately terminate execution.
    """
    exit_banner = formatters.format_banner_text("Exiting Program")
    print(f"\n{exit_banner}\n")

    raise SystemExit


if __name__ == "__main__":
    run_cli()
