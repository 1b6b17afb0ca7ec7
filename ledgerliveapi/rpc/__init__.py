"""JSON-RPC correlation layer."""

from ledgerliveapi.rpc.bridge import RpcBridge
from ledgerliveapi.rpc.protocol import (
    ErrorCode,
    InboundMethod,
    OutboundMethod,
    RpcErrorObject,
    RpcRequest,
    RpcResponse,
    parse_message,
)
from ledgerliveapi.rpc.session import PendingCall, Session

__all__ = [
    "RpcBridge",
    "Session",
    "PendingCall",
    "ErrorCode",
    "InboundMethod",
    "OutboundMethod",
    "RpcErrorObject",
    "RpcRequest",
    "RpcResponse",
    "parse_message",
]
