"""Message transports for the RPC bridge."""

from ledgerliveapi.transport.base import CloseHandler, MessageHandler, Transport
from ledgerliveapi.transport.memory import InMemoryTransport
from ledgerliveapi.transport.websocket import WebSocketTransport

__all__ = [
    "Transport",
    "MessageHandler",
    "CloseHandler",
    "InMemoryTransport",
    "WebSocketTransport",
]
