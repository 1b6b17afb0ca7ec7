"""Utility functions for ledgerliveapi."""

from ledgerliveapi.utils.exceptions import (
    LedgerLiveApiError,
    ValidationError,
    NotConnectedError,
    AlreadyConnectedError,
    DisconnectedError,
    TransportError,
    RpcError,
    NotImplementedOperationError,
    ProtocolViolationError,
    ErrorCategory,
    classify_exception,
    sanitize_error_message,
)

__all__ = [
    "LedgerLiveApiError",
    "ValidationError",
    "NotConnectedError",
    "AlreadyConnectedError",
    "DisconnectedError",
    "TransportError",
    "RpcError",
    "NotImplementedOperationError",
    "ProtocolViolationError",
    "ErrorCategory",
    "classify_exception",
    "sanitize_error_message",
]
