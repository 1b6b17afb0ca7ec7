"""WebSocket transport: one JSON document per text frame."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import websockets
from loguru import logger

from ledgerliveapi.config.schema import TransportConfig
from ledgerliveapi.transport.base import CloseHandler, MessageHandler
from ledgerliveapi.utils.exceptions import TransportError


class WebSocketTransport:
    """Client-side WebSocket channel to a Ledger Live host."""

    def __init__(self, url: str, open_timeout: float = 10.0):
        self.url = url
        self.open_timeout = open_timeout
        self.on_message: MessageHandler | None = None
        self.on_close: CloseHandler | None = None

        self._ws: Any | None = None
        self._reader: asyncio.Task | None = None

    @classmethod
    def from_config(cls, config: TransportConfig) -> "WebSocketTransport":
        return cls(config.url, open_timeout=config.open_timeout)

    @property
    def connected(self) -> bool:
        return self._ws is not None

    async def connect(self) -> None:
        if self._ws is not None:
            logger.warning("WebSocket transport is already connected")
            return
        logger.info(f"Connecting to Ledger Live host: {self.url}")
        try:
            ws = await websockets.connect(self.url, open_timeout=self.open_timeout)
        except Exception as e:
            raise TransportError(f"cannot connect to {self.url}: {e}") from e
        self._ws = ws
        self._reader = asyncio.create_task(self._read_loop(ws))

    async def disconnect(self) -> None:
        ws, self._ws = self._ws, None
        reader, self._reader = self._reader, None
        if ws is not None:
            await ws.close()
        if reader is not None:
            reader.cancel()
            await asyncio.gather(reader, return_exceptions=True)
        logger.info("WebSocket transport disconnected")

    async def send(self, payload: Any) -> None:
        ws = self._ws
        if ws is None:
            raise TransportError("websocket is not connected")
        try:
            await ws.send(json.dumps(payload, ensure_ascii=False))
        except Exception as e:
            raise TransportError(str(e)) from e

    async def _read_loop(self, ws: Any) -> None:
        error: Exception | None = None
        try:
            async for raw in ws:
                await self._handle_frame(raw)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"WebSocket receive error: {e}")
            error = e

        # A deliberate disconnect() has already cleared _ws.
        if self._ws is not ws:
            return
        self._ws = None
        self._reader = None
        if self.on_close is not None:
            await self.on_close(error)

    async def _handle_frame(self, raw: str | bytes) -> None:
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Dropping non-JSON frame: {e}")
            return
        if self.on_message is None:
            logger.warning("Dropping frame: no message handler installed")
            return
        try:
            await self.on_message(payload)
        except Exception as e:
            logger.error(f"Message handler failed: {e}")
