"""JSON-RPC 2.0 envelope definitions and the closed method sets per direction."""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, StrictInt, StrictStr, ValidationError as PydanticValidationError

from ledgerliveapi.utils.exceptions import ProtocolViolationError

JSONRPC_VERSION = "2.0"

# Strict so that a JSON boolean is never read as id 0 or 1.
RequestId = Union[StrictInt, StrictStr, None]


class ErrorCode(IntEnum):
    """Reserved JSON-RPC 2.0 error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class OutboundMethod(str, Enum):
    """Methods this client may call on the Ledger Live host."""

    ACCOUNT_REQUEST = "account.request"
    ACCOUNT_LIST = "account.list"
    ACCOUNT_RECEIVE = "account.receive"
    ACCOUNT_SYNCHRONIZE = "account.synchronize"
    CURRENCY_LIST = "currency.list"
    TRANSACTION_SIGN = "transaction.sign"
    TRANSACTION_BROADCAST = "transaction.broadcast"
    TRANSACTION_ESTIMATE_FEES = "transaction.estimateFees"
    EXCHANGE_INIT = "exchange.init"
    EXCHANGE_COMPLETE = "exchange.complete"
    DEVICE_INFO = "device.info"
    DEVICE_APPS = "device.apps"
    DEVICE_OPEN = "device.open"
    DEVICE_EXCHANGE = "device.exchange"
    DEVICE_CLOSE = "device.close"


class InboundMethod(str, Enum):
    """Methods the host may call on this client. None are served yet."""


class RpcErrorObject(BaseModel):
    code: int
    message: str
    data: Any = None


class RpcRequest(BaseModel):
    """Request or notification (a notification carries no ``id`` member)."""

    model_config = ConfigDict(extra="ignore")

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId = None
    method: str
    params: Any = None

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {"jsonrpc": self.jsonrpc, "method": self.method}
        if self.params is not None:
            wire["params"] = self.params
        if not self.is_notification:
            wire["id"] = self.id
        return wire


class RpcResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    jsonrpc: Literal["2.0"] = JSONRPC_VERSION
    id: RequestId = None
    result: Any = None
    error: RpcErrorObject | None = None

    def to_wire(self) -> dict[str, Any]:
        wire: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            wire["error"] = self.error.model_dump(exclude_none=True)
        else:
            wire["result"] = self.result
        return wire


def error_response(request_id: RequestId, code: int, message: str, data: Any = None) -> RpcResponse:
    return RpcResponse(id=request_id, error=RpcErrorObject(code=int(code), message=message, data=data))


def parse_message(payload: Any) -> RpcRequest | RpcResponse:
    """Classify one decoded JSON object as a request or a response."""
    if not isinstance(payload, dict):
        raise ProtocolViolationError("JSON-RPC message must be an object", value=payload)
    try:
        if "method" in payload:
            return RpcRequest.model_validate(payload)
        if "result" in payload or "error" in payload:
            return RpcResponse.model_validate(payload)
    except PydanticValidationError as e:
        raise ProtocolViolationError(f"malformed JSON-RPC message: {e.errors()[0]['msg']}", value=payload) from e
    raise ProtocolViolationError("message is neither a request nor a response", value=payload)


def resolve_inbound_method(name: str, methods: type[Enum] = InboundMethod) -> Enum | None:
    """Validate an inbound method name against a closed inbound set."""
    # Calling an Enum without members raises TypeError, so look the value up directly.
    return methods._value2member_map_.get(name)
