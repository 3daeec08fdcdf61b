# tests/test_response.py

import dataclasses

import pytest

from core.response import ErrorCode, Response


def test_response_succeed_defaults():
    response = Response.succeed(detail="done", data={"count": 2})

    assert response.success
    assert response.error is None
    assert response.status_code == 200
    assert response.data == {"count": 2}
    assert str(response) == "Success: done"


@pytest.mark.parametrize(
    "error, status_code",
    [
        (ErrorCode.NOT_FOUND, 404),
        (ErrorCode.INVALID_FIELD_VALUE, 400),
        (ErrorCode.VALIDATION_FAILED, 409),
        (ErrorCode.PERSISTENCE_FAILED, 503),
    ],
)
def test_fail_derives_status_from_error_code(error, status_code):
    response = Response.fail(detail="nope", error=error)

    assert not response.success
    assert response.status_code == status_code
    assert response.data == {}
    assert str(response) == f"Error: {error.label}"


def test_fail_keeps_explicit_status_and_plain_string_errors():
    response = Response.fail(detail="teapot", error="CUSTOM", status_code=418)

    assert response.status_code == 418
    assert response.error_label == "CUSTOM"


def test_response_is_immutable():
    response = Response.succeed()

    with pytest.raises(dataclasses.FrozenInstanceError):
        response.success = False


def test_response_from_exception_keeps_trace():
    try:
        raise RuntimeError("boom")
    except RuntimeError as e:
        response = Response.from_exception(e)

    assert response.error is ErrorCode.INTERNAL_ERROR
    assert response.status_code == 500
    assert "RuntimeError: boom" in response.trace
