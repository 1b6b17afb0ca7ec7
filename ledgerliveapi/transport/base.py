"""Transport contract consumed by the RPC bridge."""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol, runtime_checkable

MessageHandler = Callable[[Any], Awaitable[None]]
CloseHandler = Callable[[Exception | None], Awaitable[None]]


@runtime_checkable
class Transport(Protocol):
    """Bidirectional message channel.

    ``on_message`` is installed by the bridge and must be awaited for every
    decoded inbound payload. ``on_close`` is optional; a transport that can
    detect channel loss should await it once with the causing exception (or
    ``None`` on a clean remote close).
    """

    on_message: MessageHandler | None

    async def connect(self) -> None:
        ...

    async def disconnect(self) -> None:
        ...

    async def send(self, payload: Any) -> None:
        ...
