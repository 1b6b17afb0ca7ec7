"""
Exception hierarchy and error handling utilities for ledgerliveapi.

Provides:
- Custom exception classes with error codes
- Error categorization (recoverable, retryable, fatal)
- Safe error message formatting (no sensitive data leak)
"""

from __future__ import annotations

import asyncio
import json
import re
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Error categories for classification."""
    RECOVERABLE = "recoverable"
    RETRYABLE = "retryable"
    FATAL = "fatal"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    PERMISSION = "permission"
    PROTOCOL = "protocol"


class LedgerLiveApiError(Exception):
    """Base exception for all ledgerliveapi errors."""

    def __init__(
        self,
        message: str,
        code: str = "UNKNOWN_ERROR",
        category: ErrorCategory = ErrorCategory.FATAL,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class ValidationError(LedgerLiveApiError):
    """Input validation error."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", category=ErrorCategory.VALIDATION, details=details)


class NotConnectedError(LedgerLiveApiError):
    """A call was attempted while no session is bound to the transport."""

    def __init__(self, method: str | None = None):
        super().__init__(
            "Ledger Live API not connected",
            code="NOT_CONNECTED",
            category=ErrorCategory.RECOVERABLE,
            details={"method": method} if method else {},
        )


class AlreadyConnectedError(LedgerLiveApiError):
    """connect() was called on a live session under the reject policy."""

    def __init__(self):
        super().__init__(
            "Ledger Live API already connected",
            code="ALREADY_CONNECTED",
            category=ErrorCategory.RECOVERABLE,
        )


class DisconnectedError(LedgerLiveApiError):
    """An in-flight call was abandoned because its session was torn down."""

    def __init__(self, method: str | None = None, reason: str = "disconnected"):
        super().__init__(
            f"Ledger Live API {reason} before a response was received",
            code="DISCONNECTED",
            category=ErrorCategory.RETRYABLE,
            details={"method": method, "reason": reason},
        )


class TransportError(LedgerLiveApiError):
    """The underlying transport failed to deliver a message or was lost."""

    def __init__(self, message: str, method: str | None = None):
        details = {"method": method} if method else {}
        super().__init__(
            f"Transport error: {message}",
            code="TRANSPORT_ERROR",
            category=ErrorCategory.RETRYABLE,
            details=details,
        )


class RpcError(LedgerLiveApiError):
    """The host answered a request with a JSON-RPC error object."""

    def __init__(self, rpc_code: int, message: str, data: Any = None, method: str | None = None):
        super().__init__(
            message,
            code="RPC_ERROR",
            category=_category_for_rpc_code(rpc_code),
            details={"rpc_code": rpc_code, "data": data, "method": method},
        )
        self.rpc_code = rpc_code
        self.data = data


class NotImplementedOperationError(LedgerLiveApiError):
    """The operation is part of the public contract but not available yet."""

    def __init__(self, operation: str, method: str):
        super().__init__(
            "Function is not implemented yet",
            code="NOT_IMPLEMENTED",
            category=ErrorCategory.FATAL,
            details={"operation": operation, "method": method},
        )


class ProtocolViolationError(LedgerLiveApiError):
    """Wire data does not match the expected shape or closed value set."""

    def __init__(self, message: str, value: Any = None):
        super().__init__(
            message,
            code="PROTOCOL_VIOLATION",
            category=ErrorCategory.PROTOCOL,
            details={"value": value} if value is not None else {},
        )


def _category_for_rpc_code(rpc_code: int) -> ErrorCategory:
    if rpc_code == -32601:
        return ErrorCategory.NOT_FOUND
    if rpc_code in (-32600, -32602, -32700):
        return ErrorCategory.VALIDATION
    if rpc_code == -32603:
        return ErrorCategory.FATAL
    return ErrorCategory.RECOVERABLE


_SENSITIVE_PATTERNS = [
    re.compile(r"(api[_-]?key|token|secret|password|auth|seed|mnemonic)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"bearer\s+[a-zA-Z0-9\-._~+/]+=*", re.IGNORECASE),
    re.compile(r"0x[a-fA-F0-9]{64}"),
    re.compile(r"[a-zA-Z0-9]{64,}"),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove sensitive information from error messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def classify_exception(exc: Exception) -> tuple[str, ErrorCategory, bool]:
    """
    Classify an exception and return (error_code, category, should_retry).

    Returns:
        Tuple of (error_code, category, should_retry)
    """
    if isinstance(exc, LedgerLiveApiError):
        return exc.code, exc.category, exc.category == ErrorCategory.RETRYABLE

    if isinstance(exc, asyncio.TimeoutError):
        return "TIMEOUT", ErrorCategory.RETRYABLE, True

    if isinstance(exc, ConnectionError):
        return "CONNECTION_ERROR", ErrorCategory.RETRYABLE, True

    if isinstance(exc, json.JSONDecodeError):
        return "JSON_PARSE_ERROR", ErrorCategory.PROTOCOL, False

    if isinstance(exc, ValueError):
        return "INVALID_VALUE", ErrorCategory.VALIDATION, False

    if isinstance(exc, KeyError):
        return "MISSING_KEY", ErrorCategory.VALIDATION, False

    if isinstance(exc, TypeError):
        return "TYPE_ERROR", ErrorCategory.VALIDATION, False

    exc_str = str(exc).lower()
    if "timeout" in exc_str or "timed out" in exc_str:
        return "TIMEOUT", ErrorCategory.RETRYABLE, True

    if "connection" in exc_str or "network" in exc_str:
        return "CONNECTION_ERROR", ErrorCategory.RETRYABLE, True

    return "INTERNAL_ERROR", ErrorCategory.FATAL, False
