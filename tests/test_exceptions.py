import asyncio
import json

import pytest

from ledgerliveapi.utils.exceptions import (
    DisconnectedError,
    ErrorCategory,
    NotConnectedError,
    NotImplementedOperationError,
    RpcError,
    TransportError,
    ValidationError,
    classify_exception,
    sanitize_error_message,
)


def test_error_string_and_dict():
    error = NotConnectedError("account.list")

    assert str(error) == "[NOT_CONNECTED] Ledger Live API not connected"
    assert error.to_dict() == {
        "error": "NOT_CONNECTED",
        "message": "Ledger Live API not connected",
        "category": "recoverable",
        "details": {"method": "account.list"},
    }


def test_not_implemented_message():
    error = NotImplementedOperationError("list_apps", "device.apps")

    assert error.message == "Function is not implemented yet"
    assert error.category is ErrorCategory.FATAL


@pytest.mark.parametrize(
    "rpc_code,category",
    [
        (-32601, ErrorCategory.NOT_FOUND),
        (-32602, ErrorCategory.VALIDATION),
        (-32603, ErrorCategory.FATAL),
        (-32000, ErrorCategory.RECOVERABLE),
    ],
)
def test_rpc_error_category(rpc_code, category):
    error = RpcError(rpc_code, "boom", data={"k": 1}, method="account.request")

    assert error.category is category
    assert error.rpc_code == rpc_code
    assert error.details == {"rpc_code": rpc_code, "data": {"k": 1}, "method": "account.request"}


@pytest.mark.parametrize(
    "exc,expected",
    [
        (TransportError("lost"), ("TRANSPORT_ERROR", ErrorCategory.RETRYABLE, True)),
        (DisconnectedError("account.list"), ("DISCONNECTED", ErrorCategory.RETRYABLE, True)),
        (ValidationError("bad", field="method"), ("VALIDATION_ERROR", ErrorCategory.VALIDATION, False)),
        (asyncio.TimeoutError(), ("TIMEOUT", ErrorCategory.RETRYABLE, True)),
        (ConnectionRefusedError(), ("CONNECTION_ERROR", ErrorCategory.RETRYABLE, True)),
        (json.JSONDecodeError("x", "doc", 0), ("JSON_PARSE_ERROR", ErrorCategory.PROTOCOL, False)),
        (ValueError("x"), ("INVALID_VALUE", ErrorCategory.VALIDATION, False)),
        (KeyError("x"), ("MISSING_KEY", ErrorCategory.VALIDATION, False)),
        (RuntimeError("network unreachable"), ("CONNECTION_ERROR", ErrorCategory.RETRYABLE, True)),
        (RuntimeError("x"), ("INTERNAL_ERROR", ErrorCategory.FATAL, False)),
    ],
)
def test_classify_exception(exc, expected):
    assert classify_exception(exc) == expected


def test_disconnected_reason_is_kept():
    error = DisconnectedError("account.list", reason="reconnected")

    assert error.details == {"method": "account.list", "reason": "reconnected"}
    assert "reconnected" in error.message


def test_sanitize_redacts_secrets():
    key = "0x" + "ab" * 32
    message = f"seed=abandon token: xyz Bearer abc.def key {key}"

    sanitized = sanitize_error_message(message)

    assert "abandon" not in sanitized
    assert "xyz" not in sanitized
    assert "abc.def" not in sanitized
    assert key not in sanitized
    assert sanitize_error_message("User denied") == "User denied"
