# core/utils.py

"""
Program-wide identifier helpers.
"""

import uuid


def generate_uuid() -> str:
    return str(uuid.uuid4())


def short_id(record_id: str, length: int = 8) -> str:
    """Leading characters of an ID, for display and file names."""
    return record_id[:length]
