# cli/menus/marks_menu.py

"""
Enter Marks and Comments menu for the Term Register CLI.

Marks are entered for the selected sequence, one student at a time, subject by subject. Each accepted
mark updates the in-memory record immediately; the write to disk is deferred and coalesced, so a run of
entries for the same student is saved once input pauses.
"""

import cli.menu_helpers as helpers
import cli.model_formatters as model_formatters
import core.formatters as formatters
from cli.menu_helpers import MenuSignal
from models.class_register import ClassRegister


def run(register: ClassRegister) -> None:
    """
    Top-level loop with dispatch for the Enter Marks and Comments menu.

    Raises:
        RuntimeError: If the menu response is unrecognized.

    Notes:
        - The finally block flushes pending writes before returning.
    """
    options = [
        ("Select Sequence", select_sequence),
        ("Enter Marks for a Student", enter_marks_for_student),
        ("Enter Marks for the Whole Class", enter_marks_for_class),
        ("Enter Comment", enter_comment),
        ("View Marks", view_marks),
    ]
    zero_option = "Return to Register Manager menu"

    try:
        while True:
            title = formatters.format_banner_text(
                f"Marks - {register.selected_sequence.label}"
            )
            menu_response = helpers.display_menu(title, options, zero_option)

            if menu_response is MenuSignal.EXIT:
                break

            elif callable(menu_response):
                menu_response(register)

            else:
                raise RuntimeError(f"Unexpected MenuResponse received: {menu_response}")

    finally:
        register.flush()

    helpers.returning_to("Register Manager menu")


def select_sequence(register: ClassRegister) -> None:
    sequence = helpers.prompt_sequence(register.selected_sequence)

    if sequence is None:
        helpers.returning_without_changes()
        return

    register.selected_sequence = sequence
    print(f"\nNow entering marks for {sequence.label}.")


# === mark entry ===


def enter_marks_for_student(register: ClassRegister) -> None:
    index = helpers.prompt_student_index(register)

    if index is None:
        helpers.returning_without_changes()
        return

    prompt_marks(register, index)


def enter_marks_for_class(register: ClassRegister) -> None:
    for index in range(len(register.students)):
        if not prompt_marks(register, index):
            break

    print(f"\n{model_formatters.format_completion(register, register.selected_sequence)}")


def prompt_marks(register: ClassRegister, index: int) -> bool:
    """
    Prompts for every subject mark of one student in the selected sequence.

    Returns:
        False if the user cancelled with "q", True otherwise.

    Notes:
        - A blank entry keeps the current mark; "-" clears it.
        - Invalid marks are reported and prompted again.
    """
    if not register.subjects:
        print("\nThere are no subjects in this register.")
        return False

    student = register.student_at(index)
    record = register.mark_record_for(student)
    sequence = register.selected_sequence

    print(f"\n{formatters.format_banner_text(student.name)}")

    for subject in register.subjects:
        while True:
            current = formatters.format_mark(record.get_mark(sequence, subject.name))
            raw = helpers.prompt_user_input(
                f"{subject.name} (/{subject.total:g}) [current: {current}] "
                "(blank to keep, '-' to clear, 'q' to stop):"
            )

            if raw == "":
                break

            if raw.lower() == "q":
                return False

            register_response = register.set_mark(index, subject.name, "" if raw == "-" else raw)

            if register_response.success:
                break

            helpers.display_response_failure(register_response)

    return True


# === comments ===


def enter_comment(register: ClassRegister) -> None:
    index = helpers.prompt_student_index(register)

    if index is None:
        helpers.returning_without_changes()
        return

    sequence = register.selected_sequence
    student = register.student_at(index)
    current = register.comment_record_for(student).get_comment(sequence)

    text = helpers.prompt_user_input_or_cancel(
        f"Current comment: {current or '[NONE]'}\n"
        f"Enter the {sequence.label} comment for {student.name} (leave blank to cancel):"
    )

    if text is MenuSignal.CANCEL:
        helpers.returning_without_changes()
        return

    register_response = register.set_comment(index, sequence, text)

    if not register_response.success:
        helpers.display_response_failure(register_response)
        return

    print(f"\n{register_response.detail}")


# === view marks ===


def view_marks(register: ClassRegister) -> None:
    sequence = register.selected_sequence
    banner = formatters.format_banner_text(f"Marks - {sequence.label}")
    print(f"\n{banner}")

    if not register.students:
        print("There are no students in this register.")
        return

    helpers.display_results(
        register.students,
        True,
        lambda student: model_formatters.format_student_marks(student, register, sequence),
    )

    print(f"\n{model_formatters.format_completion(register, sequence)}")
