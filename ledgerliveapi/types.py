"""Domain values exchanged with Ledger Live and their wire shapes.

Rich values are frozen dataclasses. Wire shapes are pydantic models using the
host's camelCase member names; they validate what comes off the transport
before it is turned into a rich value.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, TypedDict

from pydantic import BaseModel, ConfigDict, Field


class ExchangeType(str, Enum):
    """Kinds of secure exchange between a device and a partner."""
    SWAP = "swap"
    BUY = "buy"
    FUND = "fund"


class FeesLevel(str, Enum):
    LOW = "low"
    STANDARD = "standard"
    HIGH = "high"


class DeviceModel(str, Enum):
    BLUE = "blue"
    NANO_S = "nanoS"
    NANO_X = "nanoX"


# ---------------------------------------------------------------------------
# Request parameters
# ---------------------------------------------------------------------------


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class RequestAccountParams(_WireModel):
    """Filters for the account selection modal."""
    currencies: list[str] | None = None
    allow_add_account: bool | None = Field(default=None, alias="allowAddAccount")


class ListCurrenciesParams(_WireModel):
    name: str | None = None
    ticker: str | None = None


class SignTransactionParams(_WireModel):
    use_app: str | None = Field(default=None, alias="useApp")


# ---------------------------------------------------------------------------
# Wire shapes
# ---------------------------------------------------------------------------


class RawAccount(_WireModel):
    id: str
    name: str
    address: str
    currency: str
    balance: Decimal
    spendable_balance: Decimal = Field(alias="spendableBalance")
    block_height: int = Field(alias="blockHeight")
    last_sync_date: datetime = Field(alias="lastSyncDate")


class RawTransaction(_WireModel):
    """Family-agnostic members; family-specific members are kept as extras."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="allow")

    family: str
    amount: Decimal
    recipient: str
    fees: Decimal | None = None
    data: str | None = None


class RawSignedTransaction(_WireModel):
    operation: Any
    signature: str
    expiration_date: datetime | None = Field(default=None, alias="expirationDate")
    signature_raw: Any = Field(default=None, alias="signatureRaw")


class RawEstimatedFees(_WireModel):
    low: float
    standard: float
    high: float


class RawDeviceDetails(_WireModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, protected_namespaces=())

    model_id: str = Field(alias="modelId")
    version: str


class RawApplicationDetails(_WireModel):
    name: str
    version: str


# ---------------------------------------------------------------------------
# Rich values
# ---------------------------------------------------------------------------


class Currency(TypedDict, total=False):
    """Crypto-currency as listed by Ledger Live (already wire shaped)."""
    type: str
    id: str
    ticker: str
    name: str
    family: str
    color: str
    decimals: int


@dataclass(frozen=True)
class Account:
    id: str
    name: str
    address: str
    currency: str
    balance: Decimal
    spendable_balance: Decimal
    block_height: int
    last_sync_date: datetime


@dataclass(frozen=True)
class Transaction:
    """Unsigned transaction in a currency-family format.

    ``extras`` carries family-specific members (gas limit, memo, ...) untouched.
    """
    family: str
    amount: Decimal
    recipient: str
    fees: Decimal | None = None
    data: bytes | None = None
    extras: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SignedTransaction:
    operation: Any
    signature: str
    expiration_date: datetime | None = None
    signature_raw: Any = None


@dataclass(frozen=True)
class EstimatedFees:
    """Fees for three levels of confirmation speed."""
    low: float
    standard: float
    high: float


@dataclass(frozen=True)
class ApplicationDetails:
    name: str
    version: str  # SemVer


@dataclass(frozen=True)
class DeviceDetails:
    model_id: DeviceModel
    version: str  # firmware


@dataclass(frozen=True)
class ExchangePayload:
    """Metadata describing a secure exchange between a device and a partner."""
    email: str
    account_name: str
    in_currency: str
    in_amount: str
    in_address: str
    nonce: str  # returned by init_exchange
    out_currency: str | None = None
    out_amount: str | None = None
    out_address: str | None = None  # refund address, swap only


@dataclass(frozen=True)
class EcdsaSignature:
    r: bytes
    s: bytes
