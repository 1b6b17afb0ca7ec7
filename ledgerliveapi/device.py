"""Device bridge capability handed to ``bridge_app``/``bridge_dashboard`` callers."""

from __future__ import annotations

from typing import Awaitable, Callable, Protocol, TypeVar, runtime_checkable

from loguru import logger

T = TypeVar("T")


@runtime_checkable
class DeviceBridge(Protocol):
    """Open APDU channel to an application (or the dashboard) on a device."""

    async def exchange(self, apdu: bytes) -> bytes:
        """Send one command APDU and return the raw response including status word."""
        ...

    async def close(self) -> None:
        ...


DeviceBridgeHandler = Callable[[DeviceBridge], Awaitable[T]]


async def use_device_bridge(bridge: DeviceBridge, handler: DeviceBridgeHandler[T]) -> T:
    """Run ``handler`` with ``bridge`` open and close the bridge afterwards.

    The bridge is closed whether the handler returns or raises; the handler's
    exception propagates unchanged.
    """
    try:
        return await handler(bridge)
    finally:
        try:
            await bridge.close()
        except Exception as e:
            logger.warning(f"Failed to close device bridge: {e}")
