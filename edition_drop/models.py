from __future__ import annotations

import re
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict

from .errors import InvalidAddressError, InvalidQuantityError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

BPS_DENOM = 10000
MAX_ROYALTY_BPS = 5000
UINT64_MAX = 2 ** 64 - 1
UINT256_MAX = 2 ** 256 - 1
ZERO_ADDRESS = "0x" + "00" * 20
EMPTY_MERKLE_ROOT = bytes(32)

_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def is_address(value: Any) -> bool:
    return isinstance(value, str) and bool(_ADDRESS_RE.match(value))


def normalize_address(value: Any) -> str:
    """Return the lowercase form of a 0x-prefixed 20-byte hex address."""
    if not is_address(value):
        raise InvalidAddressError(value)
    return value.lower()


def address_bytes(address: str) -> bytes:
    return bytes.fromhex(normalize_address(address)[2:])


def check_quantity(quantity: Any, upper: int = UINT64_MAX) -> int:
    # bool is an int subclass; a True quantity is a caller bug
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidQuantityError(quantity)
    if quantity < 0 or quantity > upper:
        raise InvalidQuantityError(quantity)
    return quantity


class DropEvent(Enum):
    SALE = "Sale"
    SALES_CONFIG_CHANGED = "SalesConfigChanged"
    FUNDS_RECIPIENT_CHANGED = "FundsRecipientChanged"
    FUNDS_WITHDRAWN = "FundsWithdrawn"
    OPEN_MINT_FINALIZED = "OpenMintFinalized"
    OWNER_CHANGED = "OwnerChanged"
    ROLE_CHANGED = "RoleChanged"
    METADATA_RENDERER_UPDATED = "UpdatedMetadataRenderer"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SaleRecord:
    buyer: str
    quantity: int
    price_per_token: int
    first_token_id: int

    event = DropEvent.SALE

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.event.value, **asdict(self)}


@dataclass(frozen=True)
class SalesConfigChanged:
    changed_by: str
    public_sale_active: bool
    presale_active: bool
    public_sale_price: int
    max_per_address: int
    presale_merkle_root: str

    event = DropEvent.SALES_CONFIG_CHANGED

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.event.value, **asdict(self)}


@dataclass(frozen=True)
class FundsRecipientChanged:
    new_address: str
    changed_by: str

    event = DropEvent.FUNDS_RECIPIENT_CHANGED

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.event.value, **asdict(self)}


@dataclass(frozen=True)
class FundsWithdrawn:
    withdrawn_by: str
    recipient: str
    amount: int
    fee_recipient: str
    fee_amount: int

    event = DropEvent.FUNDS_WITHDRAWN

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.event.value, **asdict(self)}


@dataclass(frozen=True)
class OpenMintFinalized:
    sender: str
    number_of_mints: int

    event = DropEvent.OPEN_MINT_FINALIZED

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.event.value, **asdict(self)}


@dataclass(frozen=True)
class OwnerChanged:
    previous_owner: str
    new_owner: str

    event = DropEvent.OWNER_CHANGED

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.event.value, **asdict(self)}


@dataclass(frozen=True)
class RoleChanged:
    role: str
    principal: str
    granted: bool
    changed_by: str

    event = DropEvent.ROLE_CHANGED

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.event.value, **asdict(self)}


@dataclass(frozen=True)
class MetadataRendererUpdated:
    sender: str
    renderer: str

    event = DropEvent.METADATA_RENDERER_UPDATED

    def to_dict(self) -> Dict[str, Any]:
        return {"event": self.event.value, **asdict(self)}


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Transfer:
    recipient: str
    amount: int


@dataclass(frozen=True)
class RoyaltyInfo:
    recipient: str
    amount: int

    def to_dict(self) -> Dict[str, Any]:
        return {"recipient": self.recipient, "amount": self.amount}


@dataclass(frozen=True)
class AddressMintDetails:
    total_mints: int
    presale_mints: int
    public_mints: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class SaleDetails:
    public_sale_active: bool
    presale_active: bool
    public_sale_price: int
    presale_merkle_root: bytes
    max_per_address: int
    total_minted: int
    max_supply: int

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["presale_merkle_root"] = "0x" + self.presale_merkle_root.hex()
        return data
