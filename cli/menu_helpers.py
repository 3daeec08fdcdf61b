# cli/menu_helpers.py

"""
Helper functions for CLI menus and user interaction in the Term Register application.

This module provides utilities for:
- Displaying interactive menus and result lists
- Prompting for and validating user input
- Selecting students, subjects, sequences, and report views
- Displaying standard system messages and error feedback

These functions are shared across all menu modules to maintain consistent behavior and reduce duplication.
"""

from enum import Enum
from typing import Any, Callable, Iterable, TypeVar

import cli.model_formatters as model_formatters
import core.formatters as formatters
from core.response import Response
from models.class_register import ClassRegister
from models.periods import ResultView, Sequence

T = TypeVar("T")


class MenuSignal(Enum):
    CANCEL = "CANCEL"
    EXIT = "EXIT"


# === display methods ===


def display_menu(
    title: str,
    options: list[tuple[str, Callable[..., Any]]],
    zero_option: str = "Return",
) -> MenuSignal | Callable[..., Any]:
    """
    Displays a numbered CLI menu and returns the selected action.

    Args:
        title (str): The heading displayed above the menu options.
        options (list[tuple[str, Callable[..., Any]]]): A list of (label, action) pairs to present.
        zero_option (str, optional): The label for the "cancel" or "exit" option. Defaults to "Return".

    Returns:
        MenuSignal.EXIT if the user selects the zero option.
        Callable[..., Any]: The function associated with the selected menu item.

    Notes:
        - Menu selection is repeated until a valid choice is made.
        - User input is matched by menu index, not by label.
    """
    while True:
        print(f"\n{title}")

        for i, (label, _) in enumerate(options, 1):
            print(f"{i}. {label}")

        print(f"0. {zero_option}")

        choice = prompt_user_input("\nSelect an option: ")

        if choice == "0":
            return MenuSignal.EXIT

        try:
            # casts choice to int and adjusts for zero-index, retrieves action from tuple
            return options[int(choice) - 1][1]

        except (ValueError, IndexError):
            print("Invalid selection. Please try again.")


def display_results(
    results: Iterable[Any],
    show_index: bool = False,
    formatter: Callable[[Any], str] = lambda x: str(x),
) -> None:
    for i, result in enumerate(results, 1):
        prefix = f"{i:>2}. " if show_index else ""
        print(f"{prefix}{formatter(result)}")


# === prompts and confirmations ===


def confirm_action(prompt: str) -> bool:
    while True:
        choice = prompt_user_input(f"{prompt} (y/n): ").lower()

        if choice == "y" or choice == "yes":
            return True

        elif choice == "n" or choice == "no":
            return False

        else:
            print("Invalid selection. Please try again.")


def confirm_make_change() -> bool:
    return confirm_action("Do you want to make this change?")


def prompt_user_input(prompt: str) -> str:
    return input(f"\n{prompt}\n  >> ").strip()


def prompt_user_input_or_cancel(prompt: str) -> str | MenuSignal:
    response = prompt_user_input(prompt)
    return MenuSignal.CANCEL if response == "" else response


def prompt_user_input_or_none(prompt: str) -> str | None:
    response = prompt_user_input(prompt)
    return None if response == "" else response


# === finder and select methods ===

# --- abstractions ---


def prompt_index_from_list(
    list_data: list[T],
    list_description: str,
    formatter: Callable[[T], str] = lambda x: str(x),
) -> int | None:
    """
    Prompts the user to pick an item from a list and returns its position.

    Args:
        list_data (list[T]): The items to choose from, in display order.
        list_description (str): A short description used in prompts and headings (e.g. "students").
        formatter (Callable[[T], str], optional): Converts each item to a display string.

    Returns:
        int: The zero-based index of the selected item.
        None: If the list is empty or the user cancels with "0".

    Notes:
        - Items are shown in their stored order, since register operations address students and subjects by position.
    """
    if not list_data:
        print(f"\nThere are no {list_description.lower()}.")
        return None

    while True:
        print(f"\n{formatters.format_banner_text(list_description)}")

        display_results(list_data, True, formatter)

        choice = prompt_user_input("Select an option (0 to cancel):")

        if choice == "0":
            return None

        try:
            index = int(choice) - 1

            if not 0 <= index < len(list_data):
                raise IndexError(index)

            return index

        except (ValueError, IndexError):
            print("\nInvalid selection. Please try again.")


# --- register selections ---


def prompt_student_index(register: ClassRegister) -> int | None:
    return prompt_index_from_list(
        register.students, "Students", model_formatters.format_student_oneline
    )


def prompt_subject_index(register: ClassRegister) -> int | None:
    return prompt_index_from_list(
        register.subjects, "Subjects", model_formatters.format_subject_oneline
    )


def prompt_sequence(default: Sequence | None = None) -> Sequence | None:
    sequences = list(Sequence)
    label = "Sequences" if default is None else f"Sequences (current: {default.label})"
    index = prompt_index_from_list(sequences, label, lambda s: s.label)

    return None if index is None else sequences[index]


def prompt_report_view() -> ResultView | None:
    views = [view for view in ResultView if view.is_report_view]
    index = prompt_index_from_list(views, "Report Views", model_formatters.format_view_label)

    return None if index is None else views[index]


# === standard messages ===


def returning_without_changes() -> None:
    print("\nReturning without changes.")


def returning_to(destination: str) -> None:
    print(f"\nReturning to {destination}.")


def caution_banner() -> None:
    caution_banner = formatters.format_banner_text("CAUTION!")
    print(f"\n{caution_banner}")


def display_response_failure(response: Response, debug: bool = False) -> None:
    """
    Displays a formatted error message based on a failed `Response`.

    Args:
        response (Response): The response object to inspect.
        debug (bool, optional): If True, prints the trace field when present. Defaults to False.

    Notes:
        - Does nothing if the response was successful.
        - Enum error codes are printed by label; string errors are printed as-is.
    """
    if response.success:
        return

    print(f"\n[ERROR: {response.error_label}] {response.detail}")

    if debug and response.trace:
        print(f"\nDebug Trace: {response.trace}")
