"""Ledger Live API client: JSON-RPC bridge between an embedded app and Ledger Live."""

__version__ = "0.1.0"

__all__ = [
    # Facade
    "LedgerLiveApi",
    # Domain
    "Account",
    "ApplicationDetails",
    "Currency",
    "DeviceDetails",
    "DeviceModel",
    "EcdsaSignature",
    "EstimatedFees",
    "ExchangePayload",
    "ExchangeType",
    "FeesLevel",
    "ListCurrenciesParams",
    "RequestAccountParams",
    "SignedTransaction",
    "SignTransactionParams",
    "Transaction",
    # Plumbing
    "RpcBridge",
    "SerializerRegistry",
    "Logger",
    "CallLogger",
    "configure_logging",
    "Transport",
    "InMemoryTransport",
    "WebSocketTransport",
    "DeviceBridge",
    "use_device_bridge",
    "Config",
    "load_config",
    # Errors
    "LedgerLiveApiError",
    "NotConnectedError",
    "AlreadyConnectedError",
    "DisconnectedError",
    "TransportError",
    "RpcError",
    "NotImplementedOperationError",
    "ProtocolViolationError",
    "ValidationError",
]

from loguru import logger as _logger

from .api import LedgerLiveApi
from .config import Config, load_config
from .device import DeviceBridge, use_device_bridge
from .logger import CallLogger, Logger, configure_logging
from .rpc.bridge import RpcBridge
from .serializers import SerializerRegistry
from .transport import InMemoryTransport, Transport, WebSocketTransport
from .types import (
    Account,
    ApplicationDetails,
    Currency,
    DeviceDetails,
    DeviceModel,
    EcdsaSignature,
    EstimatedFees,
    ExchangePayload,
    ExchangeType,
    FeesLevel,
    ListCurrenciesParams,
    RequestAccountParams,
    SignedTransaction,
    SignTransactionParams,
    Transaction,
)
from .utils.exceptions import (
    AlreadyConnectedError,
    DisconnectedError,
    LedgerLiveApiError,
    NotConnectedError,
    NotImplementedOperationError,
    ProtocolViolationError,
    RpcError,
    TransportError,
    ValidationError,
)

# Library records stay silent until the embedding app opts in via configure_logging().
_logger.disable("ledgerliveapi")
