"""In-process transport for embedders that already own a message channel."""

from __future__ import annotations

from typing import Any

from ledgerliveapi.transport.base import CloseHandler, MessageHandler
from ledgerliveapi.utils.exceptions import TransportError


class InMemoryTransport:
    """Transport whose outbound side is an async callable.

    Every sent payload is recorded in ``sent`` and handed to ``host`` when one
    is set. Inbound payloads are pushed with :meth:`deliver`.
    """

    def __init__(self, host: MessageHandler | None = None):
        self.host = host
        self.on_message: MessageHandler | None = None
        self.on_close: CloseHandler | None = None
        self.sent: list[Any] = []
        self.connected = False

    @classmethod
    def pair(cls) -> tuple["InMemoryTransport", "InMemoryTransport"]:
        """Two endpoints wired back to back: what one sends the other receives."""
        left = cls()
        right = cls()
        left.host = right.deliver
        right.host = left.deliver
        return left, right

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    async def send(self, payload: Any) -> None:
        if not self.connected:
            raise TransportError("transport is not connected")
        self.sent.append(payload)
        if self.host is not None:
            await self.host(payload)

    async def deliver(self, payload: Any) -> None:
        """Feed one inbound payload to the installed message handler."""
        if self.on_message is None:
            raise TransportError("no message handler installed")
        await self.on_message(payload)

    async def fail(self, exc: Exception | None = None) -> None:
        """Simulate loss of the underlying channel."""
        self.connected = False
        if self.on_close is not None:
            await self.on_close(exc)
