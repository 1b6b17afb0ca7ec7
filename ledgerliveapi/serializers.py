"""Conversions between wire JSON shapes and rich domain values."""

from __future__ import annotations

from datetime import datetime, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, ValidationError as PydanticValidationError

from ledgerliveapi.types import (
    Account,
    ApplicationDetails,
    DeviceDetails,
    DeviceModel,
    EcdsaSignature,
    EstimatedFees,
    ExchangePayload,
    RawAccount,
    RawApplicationDetails,
    RawDeviceDetails,
    RawEstimatedFees,
    RawSignedTransaction,
    RawTransaction,
    SignedTransaction,
    Transaction,
)
from ledgerliveapi.utils.exceptions import ProtocolViolationError

M = TypeVar("M", bound=BaseModel)
E = TypeVar("E", bound=Enum)

TransactionSerializer = Callable[[Transaction], dict[str, Any]]
TransactionDeserializer = Callable[[Any], Transaction]


def _validate(model: type[M], raw: Any, what: str) -> M:
    try:
        return model.model_validate(raw)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or what
        raise ProtocolViolationError(f"invalid {what}: {location}: {first['msg']}", value=raw) from e


def parse_enum(enum_cls: type[E], value: Any) -> E:
    """Map a wire string onto a closed enum; anything else is a protocol violation."""
    try:
        return enum_cls(value)
    except ValueError:
        raise ProtocolViolationError(f"invalid {enum_cls.__name__}: {value!r}", value=value) from None


def _amount(value: Decimal) -> str:
    return format(value, "f")


def _date(value: datetime) -> str:
    if value.tzinfo is not None and value.utcoffset() == timedelta(0):
        return value.isoformat().replace("+00:00", "Z")
    return value.isoformat()


def _hex_to_bytes(value: str) -> bytes:
    text = value[2:] if value.startswith("0x") else value
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise ProtocolViolationError("invalid hex data", value=value) from None


# Account


def serialize_account(account: Account) -> dict[str, Any]:
    return {
        "id": account.id,
        "name": account.name,
        "address": account.address,
        "currency": account.currency,
        "balance": _amount(account.balance),
        "spendableBalance": _amount(account.spendable_balance),
        "blockHeight": account.block_height,
        "lastSyncDate": _date(account.last_sync_date),
    }


def deserialize_account(raw: Any) -> Account:
    parsed = _validate(RawAccount, raw, "account")
    return Account(
        id=parsed.id,
        name=parsed.name,
        address=parsed.address,
        currency=parsed.currency,
        balance=parsed.balance,
        spendable_balance=parsed.spendable_balance,
        block_height=parsed.block_height,
        last_sync_date=parsed.last_sync_date,
    )


# Transaction


def serialize_transaction(transaction: Transaction) -> dict[str, Any]:
    wire: dict[str, Any] = dict(transaction.extras)
    wire.update({
        "family": transaction.family,
        "amount": _amount(transaction.amount),
        "recipient": transaction.recipient,
    })
    if transaction.fees is not None:
        wire["fees"] = _amount(transaction.fees)
    if transaction.data is not None:
        wire["data"] = transaction.data.hex()
    return wire


def deserialize_transaction(raw: Any) -> Transaction:
    parsed = _validate(RawTransaction, raw, "transaction")
    return Transaction(
        family=parsed.family,
        amount=parsed.amount,
        recipient=parsed.recipient,
        fees=parsed.fees,
        data=_hex_to_bytes(parsed.data) if parsed.data is not None else None,
        extras=dict(parsed.model_extra or {}),
    )


# Signed transaction


def serialize_signed_transaction(signed: SignedTransaction) -> dict[str, Any]:
    wire: dict[str, Any] = {
        "operation": signed.operation,
        "signature": signed.signature,
        "expirationDate": _date(signed.expiration_date) if signed.expiration_date is not None else None,
    }
    if signed.signature_raw is not None:
        wire["signatureRaw"] = signed.signature_raw
    return wire


def deserialize_signed_transaction(raw: Any) -> SignedTransaction:
    parsed = _validate(RawSignedTransaction, raw, "signed transaction")
    return SignedTransaction(
        operation=parsed.operation,
        signature=parsed.signature,
        expiration_date=parsed.expiration_date,
        signature_raw=parsed.signature_raw,
    )


# Read-only shapes


def deserialize_estimated_fees(raw: Any) -> EstimatedFees:
    parsed = _validate(RawEstimatedFees, raw, "estimated fees")
    return EstimatedFees(low=parsed.low, standard=parsed.standard, high=parsed.high)


def deserialize_device_details(raw: Any) -> DeviceDetails:
    parsed = _validate(RawDeviceDetails, raw, "device details")
    return DeviceDetails(model_id=parse_enum(DeviceModel, parsed.model_id), version=parsed.version)


def deserialize_application_details(raw: Any) -> ApplicationDetails:
    parsed = _validate(RawApplicationDetails, raw, "application details")
    return ApplicationDetails(name=parsed.name, version=parsed.version)


# Exchange


def serialize_exchange_payload(payload: ExchangePayload) -> dict[str, Any]:
    wire = {
        "email": payload.email,
        "accountName": payload.account_name,
        "inCurrency": payload.in_currency,
        "inAmount": payload.in_amount,
        "inAddress": payload.in_address,
        "outCurrency": payload.out_currency,
        "outAmount": payload.out_amount,
        "outAddress": payload.out_address,
        "nonce": payload.nonce,
    }
    return {k: v for k, v in wire.items() if v is not None}


def serialize_ecdsa_signature(signature: EcdsaSignature) -> dict[str, str]:
    return {"r": signature.r.hex(), "s": signature.s.hex()}


class SerializerRegistry:
    """Serializer functions used by the facade.

    Transaction encoding is currency-family specific: callers register a
    serializer pair per family, other families use the generic pair above.
    """

    def __init__(self):
        self._transaction_families: dict[str, tuple[TransactionSerializer, TransactionDeserializer]] = {}

    def register_transaction_family(
        self,
        family: str,
        serialize: TransactionSerializer,
        deserialize: TransactionDeserializer,
    ) -> None:
        self._transaction_families[family] = (serialize, deserialize)

    def families(self) -> list[str]:
        return sorted(self._transaction_families)

    def serialize_transaction(self, transaction: Transaction) -> dict[str, Any]:
        pair = self._transaction_families.get(transaction.family)
        if pair is None:
            return serialize_transaction(transaction)
        return pair[0](transaction)

    def deserialize_transaction(self, raw: Any) -> Transaction:
        family = raw.get("family") if isinstance(raw, dict) else None
        pair = self._transaction_families.get(family) if isinstance(family, str) else None
        if pair is None:
            return deserialize_transaction(raw)
        return pair[1](raw)

    def deserialize_account(self, raw: Any) -> Account:
        return deserialize_account(raw)

    def serialize_signed_transaction(self, signed: SignedTransaction) -> dict[str, Any]:
        return serialize_signed_transaction(signed)

    def deserialize_signed_transaction(self, raw: Any) -> SignedTransaction:
        return deserialize_signed_transaction(raw)
