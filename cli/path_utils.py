# cli/path_utils.py

import os

# characters that would split a name into extra path components
SEPARATORS = {" ", "/", "\\", "\0", os.sep} | ({os.altsep} if os.altsep else set())


def sanitize_name(name: str) -> str:
    """
    Sanitizes a class name, school year, or student name for use as a single path component.

    Args:
        name (str): The input string to sanitize.

    Returns:
        A string with leading and trailing whitespace removed and internal spaces and path
        separators replaced with underscores.
    """
    sanitized = name.strip()

    for separator in SEPARATORS:
        sanitized = sanitized.replace(separator, "_")

    return sanitized


def get_save_dir(class_name: str, school_year: str, user_input: str | None) -> str:
    """
    Resolves a save directory path for a new register based on user input or default location.

    Returns:
        A path string. If user input is provided, it is expanded and returned directly.
        Otherwise, defaults to: `~/Documents/TermRegisters/<school_year>/<class_name>`.
    """
    if user_input is not None:
        return os.path.expanduser(user_input.strip())
    else:
        documents = os.path.join(os.path.expanduser("~"), "Documents")
        return os.path.join(documents, "TermRegisters", school_year, class_name)


def resolve_save_dir(class_name: str, school_year: str, dir_input: str | None) -> str:
    """
    Produces and ensures a valid save directory path for a new register.

    Notes:
        - Sanitizes the class name and school year.
        - Creates the directory path on disk (including parent directories) if it does not exist.
    """
    save_dir = get_save_dir(sanitize_name(class_name), sanitize_name(school_year), dir_input)

    os.makedirs(save_dir, exist_ok=True)

    return save_dir


def dir_is_empty(dir_path: str) -> bool:
    return os.path.isdir(dir_path) and not os.listdir(dir_path)
