# core/response.py

"""
Outcome objects returned by every ClassRegister operation.

Register methods never raise for bad input or store failures; they return a `Response`
whose `error` says what went wrong and whose `data` carries the result on success. The
CLI menus only ever branch on `success` and hand failures to `display_response_failure()`.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from enum import Enum


class ErrorCode(Enum):
    """Failure categories, each paired with the HTTP-style status it defaults to."""

    # student, subject, sequence, or term does not exist
    NOT_FOUND = ("NOT_FOUND", 404)

    # a stored document lacks a key the model needs
    MISSING_REQUIRED_FIELD = ("MISSING_REQUIRED_FIELD", 400)

    # unknown result view or sequence identifier
    INVALID_INPUT = ("INVALID_INPUT", 400)

    # mark, name, total, or coefficient fails its own checks
    INVALID_FIELD_VALUE = ("INVALID_FIELD_VALUE", 400)

    # the value is fine alone but conflicts with the register, e.g. a duplicate subject
    VALIDATION_FAILED = ("VALIDATION_FAILED", 409)

    # the document store rejected a write; memory was left unchanged
    PERSISTENCE_FAILED = ("PERSISTENCE_FAILED", 503)

    INTERNAL_ERROR = ("INTERNAL_ERROR", 500)

    def __init__(self, label: str, status_code: int):
        self.label = label
        self.status_code = status_code


@dataclass(frozen=True)
class Response:
    """
    Result of a register operation.

    Attributes:
        success (bool): Whether the operation took effect.
        detail (str | None): Human-readable message for the CLI.
        error (ErrorCode | str | None): Failure category; None on success.
        status_code (int | None): HTTP-style code, derived from `error` when not given.
        data (dict): Operation-specific payload, e.g. "register", "record", "payloads".
        trace (str | None): Formatted traceback for unexpected exceptions.
    """

    success: bool
    detail: str | None = None
    error: ErrorCode | str | None = None
    status_code: int | None = None
    data: dict = field(default_factory=dict)
    trace: str | None = None

    # === public classmethods ===

    @classmethod
    def succeed(
        cls,
        detail: str | None = None,
        status_code: int | None = 200,
        data: dict | None = None,
    ) -> Response:
        return cls(True, detail, None, status_code, data or {})

    @classmethod
    def fail(
        cls,
        detail: str | None = None,
        error: ErrorCode | str | None = None,
        status_code: int | None = None,
        data: dict | None = None,
    ) -> Response:
        if status_code is None:
            status_code = error.status_code if isinstance(error, ErrorCode) else 400

        return cls(False, detail, error, status_code, data or {})

    @classmethod
    def from_exception(cls, e: Exception) -> Response:
        """Wraps an unexpected exception as an INTERNAL_ERROR failure with its traceback."""
        return cls(
            False,
            f"Unexpected error: {e}",
            ErrorCode.INTERNAL_ERROR,
            ErrorCode.INTERNAL_ERROR.status_code,
            trace="".join(traceback.format_exception(type(e), e, e.__traceback__)),
        )

    # === properties ===

    @property
    def error_label(self) -> str:
        if isinstance(self.error, Enum):
            return self.error.label

        return self.error or ""

    # === dunder methods ===

    def __str__(self) -> str:
        if self.success:
            return f"Success: {self.detail or ''}"

        return f"Error: {self.error_label}"
