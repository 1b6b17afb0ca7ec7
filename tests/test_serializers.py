from datetime import datetime, timezone
from decimal import Decimal

import pytest

from ledgerliveapi.serializers import (
    SerializerRegistry,
    deserialize_account,
    deserialize_application_details,
    deserialize_device_details,
    deserialize_estimated_fees,
    deserialize_signed_transaction,
    deserialize_transaction,
    parse_enum,
    serialize_account,
    serialize_ecdsa_signature,
    serialize_exchange_payload,
    serialize_signed_transaction,
    serialize_transaction,
)
from ledgerliveapi.types import (
    Account,
    DeviceModel,
    EcdsaSignature,
    ExchangePayload,
    FeesLevel,
    SignedTransaction,
    Transaction,
)
from ledgerliveapi.utils.exceptions import ProtocolViolationError


def _account() -> Account:
    return Account(
        id="acc-1",
        name="Main",
        address="0xabc",
        currency="ethereum",
        balance=Decimal("12.000000000000000001"),
        spendable_balance=Decimal("12"),
        block_height=17_000_000,
        last_sync_date=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    )


def test_account_wire_shape():
    raw = serialize_account(_account())

    assert raw == {
        "id": "acc-1",
        "name": "Main",
        "address": "0xabc",
        "currency": "ethereum",
        "balance": "12.000000000000000001",
        "spendableBalance": "12",
        "blockHeight": 17_000_000,
        "lastSyncDate": "2024-05-01T12:00:00Z",
    }
    assert deserialize_account(raw) == _account()


def test_account_missing_member_is_a_protocol_violation():
    raw = serialize_account(_account())
    del raw["blockHeight"]

    with pytest.raises(ProtocolViolationError) as exc_info:
        deserialize_account(raw)
    assert "blockHeight" in exc_info.value.message


def test_account_must_be_an_object():
    with pytest.raises(ProtocolViolationError):
        deserialize_account(["acc-1"])


def test_transaction_keeps_family_specific_members():
    raw = {
        "family": "ethereum",
        "amount": "1000000000000000000",
        "recipient": "0xdead",
        "data": "0xcafe",
        "gasPrice": "20",
        "nonce": 4,
    }

    transaction = deserialize_transaction(raw)

    assert transaction.amount == Decimal("1000000000000000000")
    assert transaction.data == b"\xca\xfe"
    assert transaction.fees is None
    assert transaction.extras == {"gasPrice": "20", "nonce": 4}
    assert serialize_transaction(transaction) == {
        "family": "ethereum",
        "amount": "1000000000000000000",
        "recipient": "0xdead",
        "data": "cafe",
        "gasPrice": "20",
        "nonce": 4,
    }


def test_transaction_survives_serialize_then_deserialize():
    transaction = Transaction(
        family="ethereum",
        amount=Decimal("0.015"),
        recipient="0xdead",
        fees=Decimal("0.00042"),
        data=b"\xca\xfe\x00",
        extras={"gasLimit": "21000", "nonce": 4, "accessList": []},
    )

    assert deserialize_transaction(serialize_transaction(transaction)) == transaction


def test_transaction_without_optional_members_survives_serialize_then_deserialize():
    transaction = Transaction(family="bitcoin", amount=Decimal("1"), recipient="bc1q")

    raw = serialize_transaction(transaction)

    assert raw == {"family": "bitcoin", "amount": "1", "recipient": "bc1q"}
    assert deserialize_transaction(raw) == transaction


def test_transaction_with_bad_hex_data():
    with pytest.raises(ProtocolViolationError):
        deserialize_transaction({"family": "bitcoin", "amount": "1", "recipient": "bc1q", "data": "zz"})


def test_signed_transaction_dates_and_raw_signature():
    signed = SignedTransaction(
        operation={"id": "op-1"},
        signature="f86b",
        expiration_date=datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc),
        signature_raw={"v": 27},
    )

    raw = serialize_signed_transaction(signed)

    assert raw["expirationDate"] == "2024-05-01T12:30:00Z"
    assert raw["signatureRaw"] == {"v": 27}
    assert deserialize_signed_transaction(raw) == signed


def test_signed_transaction_without_optional_members():
    raw = serialize_signed_transaction(SignedTransaction(operation=None, signature="00"))

    assert raw == {"operation": None, "signature": "00", "expirationDate": None}
    assert deserialize_signed_transaction(raw) == SignedTransaction(operation=None, signature="00")


def test_device_details_use_closed_model_enum():
    details = deserialize_device_details({"modelId": "nanoX", "version": "2.1.0"})
    assert details.model_id is DeviceModel.NANO_X

    with pytest.raises(ProtocolViolationError):
        deserialize_device_details({"modelId": "nanoZ", "version": "2.1.0"})


def test_parse_enum_rejects_unknown_value():
    assert parse_enum(FeesLevel, "high") is FeesLevel.HIGH
    with pytest.raises(ProtocolViolationError) as exc_info:
        parse_enum(FeesLevel, "urgent")
    assert exc_info.value.details["value"] == "urgent"


def test_read_only_shapes():
    fees = deserialize_estimated_fees({"low": 1, "standard": 2.5, "high": 4})
    assert (fees.low, fees.standard, fees.high) == (1.0, 2.5, 4.0)

    app = deserialize_application_details({"name": "Bitcoin", "version": "2.0.4"})
    assert app.name == "Bitcoin"

    with pytest.raises(ProtocolViolationError):
        deserialize_application_details({"name": "Bitcoin"})


def test_exchange_payload_drops_absent_members():
    payload = ExchangePayload(
        email="user@example.com",
        account_name="Main",
        in_currency="BTC",
        in_amount="0.5",
        in_address="bc1q",
        nonce="abc",
        out_currency="ETH",
    )

    assert serialize_exchange_payload(payload) == {
        "email": "user@example.com",
        "accountName": "Main",
        "inCurrency": "BTC",
        "inAmount": "0.5",
        "inAddress": "bc1q",
        "outCurrency": "ETH",
        "nonce": "abc",
    }


def test_ecdsa_signature_is_hex_encoded():
    assert serialize_ecdsa_signature(EcdsaSignature(r=b"\x01\xff", s=b"\x00")) == {"r": "01ff", "s": "00"}


def test_registry_routes_transactions_by_family():
    registry = SerializerRegistry()
    seen = []

    def _serialize(transaction):
        seen.append(transaction.family)
        return {"family": transaction.family, "custom": True}

    def _deserialize(raw):
        return Transaction(family=raw["family"], amount=Decimal(0), recipient="custom")

    registry.register_transaction_family("tezos", _serialize, _deserialize)

    tezos = Transaction(family="tezos", amount=Decimal("1"), recipient="tz1")
    bitcoin = Transaction(family="bitcoin", amount=Decimal("1"), recipient="bc1q")

    assert registry.serialize_transaction(tezos) == {"family": "tezos", "custom": True}
    assert registry.serialize_transaction(bitcoin)["recipient"] == "bc1q"
    assert registry.deserialize_transaction({"family": "tezos"}).recipient == "custom"
    assert registry.deserialize_transaction(
        {"family": "bitcoin", "amount": "1", "recipient": "bc1q"}
    ).recipient == "bc1q"
    assert registry.families() == ["tezos"]
    assert seen == ["tezos"]
