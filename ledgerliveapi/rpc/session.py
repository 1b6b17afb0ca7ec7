"""Request/response correlation over one transport connection."""

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Iterator, Mapping

from ledgerliveapi.logger import CallLogger
from ledgerliveapi.rpc.protocol import (
    ErrorCode,
    InboundMethod,
    RpcRequest,
    RpcResponse,
    error_response,
    parse_message,
    resolve_inbound_method,
)
from ledgerliveapi.transport.base import Transport
from ledgerliveapi.utils.exceptions import (
    DisconnectedError,
    LedgerLiveApiError,
    ProtocolViolationError,
    RpcError,
    TransportError,
    classify_exception,
    sanitize_error_message,
)

InboundHandler = Callable[[Any], Awaitable[Any]]
ErrorFactory = Callable[[str], Exception]


@dataclass
class PendingCall:
    call_id: int
    method: str
    params: Any
    future: asyncio.Future[Any]


class Session:
    """Tracks in-flight calls for one transport binding and routes inbound messages.

    Outbound calls get monotonically increasing integer ids, drawn from ``ids``
    when the owner shares one counter across sessions. Responses are matched
    strictly by id, so they may arrive in any order. Inbound requests
    are answered from ``handlers``; names outside ``methods`` (the closed
    :class:`InboundMethod` set by default) get a ``Method not found`` error
    response.
    """

    def __init__(
        self,
        transport: Transport,
        logger: CallLogger,
        handlers: Mapping[Enum, InboundHandler] | None = None,
        ids: Iterator[int] | None = None,
        methods: type[Enum] = InboundMethod,
    ):
        self.transport = transport
        self.logger = logger
        self._methods = methods
        self._handlers: dict[Any, InboundHandler] = dict(handlers or {})
        self._ids = ids if ids is not None else itertools.count(1)
        self._pending: dict[int, PendingCall] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    async def request(self, method: str, params: Any = None) -> Any:
        """Send one request and wait for the response carrying its id."""
        if self._closed:
            raise DisconnectedError(method)
        call_id = next(self._ids)
        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        # Registered before sending: the response may arrive while send() is still running.
        self._pending[call_id] = PendingCall(call_id=call_id, method=method, params=params, future=future)
        envelope = RpcRequest(id=call_id, method=method, params=params).to_wire()
        try:
            try:
                await self.transport.send(envelope)
            except TransportError:
                raise
            except Exception as e:
                raise TransportError(str(e), method=method) from e
            return await future
        finally:
            self._pending.pop(call_id, None)

    async def dispatch(self, payload: Any) -> None:
        """Handle one inbound payload (single message or batch). Never raises."""
        if isinstance(payload, list):
            if not payload:
                await self._reply(error_response(None, ErrorCode.INVALID_REQUEST, "Invalid Request").to_wire())
                return
            replies = []
            for item in payload:
                response = await self._dispatch_one(item)
                if response is not None:
                    replies.append(response.to_wire())
            if replies:
                await self._reply(replies)
            return

        response = await self._dispatch_one(payload)
        if response is not None:
            await self._reply(response.to_wire())

    def close(self, make_error: ErrorFactory | None = None) -> int:
        """Reject every pending call and refuse new ones. Returns the number rejected."""
        self._closed = True
        make_error = make_error or (lambda method: DisconnectedError(method))
        pending = list(self._pending.values())
        self._pending.clear()
        for call in pending:
            if not call.future.done():
                call.future.set_exception(make_error(call.method))
        return len(pending)

    async def _dispatch_one(self, payload: Any) -> RpcResponse | None:
        try:
            message = parse_message(payload)
        except ProtocolViolationError as e:
            self.logger.warn(f"dropping malformed message - {e.message}", payload)
            if isinstance(payload, dict) and "method" in payload:
                request_id = payload.get("id")
                # An id that cannot be read is answered as null.
                if isinstance(request_id, bool) or not isinstance(request_id, (int, str)):
                    request_id = None
                return error_response(request_id, ErrorCode.INVALID_REQUEST, "Invalid Request")
            return None

        if isinstance(message, RpcResponse):
            self._settle(message)
            return None
        return await self._serve(message)

    def _settle(self, response: RpcResponse) -> None:
        request_id = response.id
        known = isinstance(request_id, int) and not isinstance(request_id, bool)
        call = self._pending.pop(request_id, None) if known else None
        if call is None:
            self.logger.warn("dropping response for unknown call", response.id)
            return
        if call.future.done():
            return
        if response.error is not None:
            call.future.set_exception(
                RpcError(response.error.code, response.error.message, response.error.data, method=call.method)
            )
        else:
            call.future.set_result(response.result)

    async def _serve(self, request: RpcRequest) -> RpcResponse | None:
        try:
            method = resolve_inbound_method(request.method, self._methods)
            handler = self._handlers.get(method) if method is not None else None
        except Exception as e:
            self.logger.error(f"inbound lookup failed - {request.method}", str(e))
            handler = None
        if handler is None:
            self.logger.warn(f"inbound method not found - {request.method}", request.params)
            if request.is_notification:
                return None
            return error_response(request.id, ErrorCode.METHOD_NOT_FOUND, "Method not found")

        try:
            result = await handler(request.params)
        except RpcError as e:
            self.logger.warn(f"inbound error - {request.method}", e.rpc_code, e.message)
            response = error_response(request.id, e.rpc_code, e.message, e.data)
        except Exception as e:
            code, category, _ = classify_exception(e)
            message = e.message if isinstance(e, LedgerLiveApiError) else sanitize_error_message(str(e))
            self.logger.error(f"inbound handler failed - {request.method}", code, message)
            response = error_response(
                request.id,
                ErrorCode.INTERNAL_ERROR,
                message,
                {"error_code": code, "category": category.value},
            )
        else:
            response = RpcResponse(id=request.id, result=result)

        if request.is_notification:
            return None
        return response

    async def _reply(self, wire: Any) -> None:
        try:
            await self.transport.send(wire)
        except Exception as e:
            self.logger.warn("failed to send response", sanitize_error_message(str(e)))
