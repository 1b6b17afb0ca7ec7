"""Typed operations offered by Ledger Live to an embedded application."""

from __future__ import annotations

from typing import Any, Mapping, TypeVar

from pydantic import ValidationError as PydanticValidationError

from ledgerliveapi.config.schema import Config
from ledgerliveapi.device import DeviceBridgeHandler
from ledgerliveapi.logger import CallLogger, Logger
from ledgerliveapi.rpc.bridge import RpcBridge
from ledgerliveapi.rpc.protocol import OutboundMethod
from ledgerliveapi.serializers import SerializerRegistry
from ledgerliveapi.transport.base import Transport
from ledgerliveapi.types import (
    Account,
    ApplicationDetails,
    Currency,
    DeviceDetails,
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
from ledgerliveapi.utils.exceptions import NotImplementedOperationError, ProtocolViolationError, ValidationError

T = TypeVar("T")

Params = TypeVar("Params", RequestAccountParams, ListCurrenciesParams, SignTransactionParams)


def _wire_params(model: type[Params], params: Params | Mapping[str, Any] | None) -> dict[str, Any]:
    """Dump request params; plain mappings are validated against ``model`` first."""
    if params is None:
        return {}
    if isinstance(params, model):
        return params.to_wire()
    if not isinstance(params, Mapping):
        raise ValidationError(f"{model.__name__} expected, got {type(params).__name__}", field="params")
    try:
        return model.model_validate(dict(params)).to_wire()
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "params"
        raise ValidationError(f"invalid {model.__name__}: {location}: {first['msg']}", field=location) from e


class LedgerLiveApi:
    """Client side of the Ledger Live API.

    Usage:
        async with LedgerLiveApi(WebSocketTransport(url)) as api:
            account = await api.request_account(RequestAccountParams(currencies=["ethereum"]))
            address = await api.receive(account.id)
    """

    def __init__(
        self,
        transport: Transport,
        logger: CallLogger | None = None,
        serializers: SerializerRegistry | None = None,
        config: Config | None = None,
    ):
        self.config = config or Config()
        self.transport = transport
        self.logger = logger or Logger.from_config(self.config.logging)
        self.serializers = serializers or SerializerRegistry()
        self._bridge = RpcBridge(transport, logger=self.logger, config=self.config.bridge)

    @property
    def connected(self) -> bool:
        return self._bridge.connected

    async def connect(self) -> None:
        """Connect the SDK to the Ledger Live instance."""
        await self._bridge.connect()

    async def disconnect(self) -> None:
        """Disconnect the SDK; calls still in flight fail with DisconnectedError."""
        await self._bridge.disconnect()

    async def __aenter__(self) -> "LedgerLiveApi":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.disconnect()

    async def _request(self, method: OutboundMethod, params: Any = None) -> Any:
        return await self._bridge.invoke(method, params)

    # Ledger Live methods

    async def request_account(self, params: RequestAccountParams | Mapping[str, Any] | None = None) -> Account:
        """
        Let user choose an account in Ledger Live, providing filters for choosing
        currency or allowing add account.

        Args:
            params: Filters for the request modal.

        Returns:
            The selected account.

        Raises:
            RpcError: If the user cancels the selection.
        """
        raw_account = await self._request(
            OutboundMethod.ACCOUNT_REQUEST,
            _wire_params(RequestAccountParams, params),
        )
        return self.serializers.deserialize_account(raw_account)

    async def list_accounts(self) -> list[Account]:
        """List accounts added by user on Ledger Live, in host order."""
        raw_accounts = await self._request(OutboundMethod.ACCOUNT_LIST)
        if not isinstance(raw_accounts, list):
            raise ProtocolViolationError("account.list must return an array", value=raw_accounts)
        return [self.serializers.deserialize_account(raw) for raw in raw_accounts]

    async def list_currencies(self, params: ListCurrenciesParams | Mapping[str, Any] | None = None) -> list[Currency]:
        """List crypto-currencies supported by Ledger Live, optionally filtered by name or ticker."""
        return await self._request(
            OutboundMethod.CURRENCY_LIST,
            _wire_params(ListCurrenciesParams, params),
        )

    async def receive(self, account_id: str) -> str:
        """
        Let user verify an account address on the device through Ledger Live.

        Args:
            account_id: Ledger Live id of the account.

        Returns:
            The verified address.
        """
        return await self._request(OutboundMethod.ACCOUNT_RECEIVE, {"accountId": account_id})

    async def sign_transaction(
        self,
        account_id: str,
        transaction: Transaction,
        params: SignTransactionParams | Mapping[str, Any] | None = None,
    ) -> SignedTransaction:
        """
        Let user sign a transaction through Ledger Live.

        Args:
            account_id: Ledger Live id of the account.
            transaction: The transaction in the currency family-specific format.
            params: Parameters for the sign modal.

        Returns:
            The signed transaction, to be passed to broadcast_signed_transaction.
        """
        raw_signed = await self._request(
            OutboundMethod.TRANSACTION_SIGN,
            {
                "accountId": account_id,
                "transaction": self.serializers.serialize_transaction(transaction),
                "params": _wire_params(SignTransactionParams, params),
            },
        )
        return self.serializers.deserialize_signed_transaction(raw_signed)

    async def broadcast_signed_transaction(self, account_id: str, signed_transaction: SignedTransaction) -> str:
        """
        Broadcast a signed transaction through Ledger Live.

        Args:
            account_id: Ledger Live id of the account.
            signed_transaction: A signed transaction returned by sign_transaction.

        Returns:
            Hash of the transaction.
        """
        return await self._request(
            OutboundMethod.TRANSACTION_BROADCAST,
            {
                "accountId": account_id,
                "signedTransaction": self.serializers.serialize_signed_transaction(signed_transaction),
            },
        )

    # Reserved operations. Wire method and params are fixed; the host does not serve them yet.

    async def estimate_transaction_fees(self, account_id: str, transaction: Transaction) -> EstimatedFees:
        """
        Estimate fees required to successfully broadcast a transaction.

        Wire: ``transaction.estimateFees`` with ``{accountId, transaction}``.

        Returns:
            Estimated fees for 3 levels of confirmation speed.

        Raises:
            NotImplementedOperationError: Always, until the host serves the method.
        """
        raise NotImplementedOperationError("estimate_transaction_fees", OutboundMethod.TRANSACTION_ESTIMATE_FEES.value)

    async def synchronize_account(self, account_id: str) -> Account:
        """
        Synchronize an account with its network and return an updated view of it.

        Wire: ``account.synchronize`` with ``{accountId}``.

        Raises:
            NotImplementedOperationError: Always, until the host serves the method.
        """
        raise NotImplementedOperationError("synchronize_account", OutboundMethod.ACCOUNT_SYNCHRONIZE.value)

    async def init_exchange(self, exchange_type: ExchangeType, partner_name: str) -> str:
        """
        Start the exchange process by generating a nonce on the device.

        Wire: ``exchange.init`` with ``{exchangeType, partnerName}``.

        Returns:
            The nonce of the exchange.

        Raises:
            NotImplementedOperationError: Always, until the host serves the method.
        """
        raise NotImplementedOperationError("init_exchange", OutboundMethod.EXCHANGE_INIT.value)

    async def complete_exchange(
        self,
        exchange_payload: ExchangePayload,
        payload_signature: EcdsaSignature,
        tx_fees_level: FeesLevel,
    ) -> None:
        """
        Complete an exchange process by passing the exchange content and its signature.

        Wire: ``exchange.complete`` with ``{exchangePayload, payloadSignature, txFeesLevel}``.

        Raises:
            NotImplementedOperationError: Always, until the host serves the method.
        """
        raise NotImplementedOperationError("complete_exchange", OutboundMethod.EXCHANGE_COMPLETE.value)

    async def get_device_info(self) -> DeviceDetails:
        """
        Get information about the currently connected device (model, firmware version).

        Wire: ``device.info``, no params.

        Raises:
            NotImplementedOperationError: Always, until the host serves the method.
        """
        raise NotImplementedOperationError("get_device_info", OutboundMethod.DEVICE_INFO.value)

    async def list_apps(self) -> list[ApplicationDetails]:
        """
        List applications installed on the currently connected device.

        Wire: ``device.apps``, no params.

        Raises:
            NotImplementedOperationError: Always, until the host serves the method.
        """
        raise NotImplementedOperationError("list_apps", OutboundMethod.DEVICE_APPS.value)

    async def bridge_app(self, app_name: str, handler: DeviceBridgeHandler[T]) -> T:
        """
        Open a bridge to a device application and run ``handler`` with it.

        Wire: ``device.open`` with ``{appName}``, then ``device.exchange`` per APDU
        and ``device.close``. The bridge stays open while ``handler`` runs and is
        closed afterwards whatever the outcome (see ``use_device_bridge``).

        Returns:
            The result of ``handler``.

        Raises:
            NotImplementedOperationError: Always, until the host serves the method.
        """
        raise NotImplementedOperationError("bridge_app", OutboundMethod.DEVICE_OPEN.value)

    async def bridge_dashboard(self, handler: DeviceBridgeHandler[T]) -> T:
        """
        Open a bridge to the device dashboard and run ``handler`` with it.

        Same lifecycle as ``bridge_app`` without an application name.

        Raises:
            NotImplementedOperationError: Always, until the host serves the method.
        """
        raise NotImplementedOperationError("bridge_dashboard", OutboundMethod.DEVICE_OPEN.value)
