"""Connection lifecycle and the single ``invoke`` primitive used by the facade."""

from __future__ import annotations

import itertools
from enum import Enum
from typing import Any, Mapping

from ledgerliveapi.config.schema import BridgeConfig
from ledgerliveapi.logger import CallLogger, Logger
from ledgerliveapi.rpc.protocol import InboundMethod, OutboundMethod
from ledgerliveapi.rpc.session import InboundHandler, Session
from ledgerliveapi.transport.base import Transport
from ledgerliveapi.utils.exceptions import (
    AlreadyConnectedError,
    DisconnectedError,
    NotConnectedError,
    TransportError,
    ValidationError,
)


def _method_name(method: OutboundMethod | str) -> str:
    try:
        return OutboundMethod(method).value
    except ValueError:
        raise ValidationError(f"unknown method: {method}", field="method") from None


class RpcBridge:
    """Owns at most one :class:`Session` bound to ``transport``.

    The session exists between ``connect()`` and ``disconnect()`` (or an
    unexpected transport close). Without it every ``invoke()`` fails fast with
    :class:`NotConnectedError`.
    """

    def __init__(
        self,
        transport: Transport,
        logger: CallLogger | None = None,
        config: BridgeConfig | None = None,
        handlers: Mapping[Enum, InboundHandler] | None = None,
        methods: type[Enum] = InboundMethod,
    ):
        self.transport = transport
        self.logger = logger or Logger()
        self.config = config or BridgeConfig()
        self._handlers = dict(handlers or {})
        self._methods = methods
        # Shared across sessions so a late response to a replaced session cannot match a new call.
        self._ids = itertools.count(1)
        self._session: Session | None = None

    @property
    def connected(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> Session | None:
        return self._session

    async def connect(self) -> None:
        """Bind a fresh session to the transport and open it."""
        previous = self._session
        if previous is not None:
            if self.config.reconnect_policy == "reject":
                self.logger.error("already connected", self.transport)
                raise AlreadyConnectedError()
            rejected = previous.close(lambda method: DisconnectedError(method, reason="reconnected"))
            self.logger.warn("replacing live session", rejected)

        session = Session(self.transport, self.logger, self._handlers, ids=self._ids, methods=self._methods)
        self.transport.on_message = session.dispatch
        if hasattr(self.transport, "on_close"):
            self.transport.on_close = self._close_handler(session)
        self._session = session

        try:
            await self.transport.connect()
        except Exception as e:
            self._session = None
            session.close()
            self.logger.error("connect failed", self.transport, str(e))
            if isinstance(e, TransportError):
                raise
            raise TransportError(str(e)) from e
        self.logger.log("connected", self.transport)

    async def disconnect(self) -> None:
        """Drop the session, reject its pending calls, then close the transport."""
        session, self._session = self._session, None
        if session is not None:
            rejected = session.close()
            if rejected:
                self.logger.warn("rejected pending calls on disconnect", rejected)
        await self.transport.disconnect()
        self.logger.log("disconnected", self.transport)

    async def invoke(self, method: OutboundMethod | str, params: Any = None) -> Any:
        """Call ``method`` on the host and return the raw result payload."""
        name = _method_name(method)
        session = self._session
        if session is None:
            self.logger.error("not connected", name)
            raise NotConnectedError(name)

        self.logger.log(f"request - {name}", params)
        try:
            result = await session.request(name, params)
        except Exception as e:
            self.logger.warn(f"error - {name}", params, str(e))
            raise
        self.logger.log(f"response - {name}", params)
        return result

    def _close_handler(self, session: Session):
        async def on_close(exc: Exception | None) -> None:
            # A stale binding from a replaced session must not tear down the live one.
            if self._session is not session:
                return
            self._session = None
            reason = str(exc) if exc is not None else "connection closed by host"
            rejected = session.close(lambda method: TransportError(reason, method=method))
            self.logger.error("transport closed", reason, rejected)

        return on_close
