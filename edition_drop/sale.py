from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from . import allowlist
from .errors import (
    AddressCapExceededError,
    InvalidSaleConfigurationError,
    NotAllowlistedError,
    PresaleInactiveError,
    PriceNotSetError,
    SaleInactiveError,
    WrongPriceError,
)
from .models import EMPTY_MERKLE_ROOT, UINT64_MAX, check_quantity

UINT32_MAX = 2 ** 32 - 1


class SalePhase(Enum):
    INACTIVE = 0
    PUBLIC_ONLY = 1
    PRESALE_ONLY = 2
    BOTH = 3


@dataclass(frozen=True)
class SaleConfiguration:
    """Sale settings, always replaced as one unit."""

    public_sale_active: bool = False
    presale_active: bool = False
    public_sale_price: int = 0
    max_per_address: int = 0
    presale_merkle_root: bytes = EMPTY_MERKLE_ROOT

    def __post_init__(self) -> None:
        for name in ("public_sale_active", "presale_active"):
            if not isinstance(getattr(self, name), bool):
                raise InvalidSaleConfigurationError(name, getattr(self, name))
        for name, upper in (("public_sale_price", UINT64_MAX), ("max_per_address", UINT32_MAX)):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= upper:
                raise InvalidSaleConfigurationError(name, value)
        root = self.presale_merkle_root
        if not isinstance(root, (bytes, bytearray)) or len(root) != allowlist.HASH_SIZE:
            raise InvalidSaleConfigurationError("presale_merkle_root", root)
        object.__setattr__(self, "presale_merkle_root", bytes(root))

    @classmethod
    def with_root_hex(cls, presale_merkle_root: str, **kwargs) -> "SaleConfiguration":
        text = presale_merkle_root[2:] if presale_merkle_root.startswith("0x") else presale_merkle_root
        try:
            root = bytes.fromhex(text)
        except ValueError:
            raise InvalidSaleConfigurationError("presale_merkle_root", presale_merkle_root)
        return cls(presale_merkle_root=root, **kwargs)

    @property
    def phase(self) -> SalePhase:
        if self.public_sale_active and self.presale_active:
            return SalePhase.BOTH
        if self.public_sale_active:
            return SalePhase.PUBLIC_ONLY
        if self.presale_active:
            return SalePhase.PRESALE_ONLY
        return SalePhase.INACTIVE


class SaleStateMachine:
    """Admission rules for public and presale purchases."""

    def __init__(self, config: SaleConfiguration = SaleConfiguration()) -> None:
        self._config = config

    @property
    def config(self) -> SaleConfiguration:
        return self._config

    @property
    def phase(self) -> SalePhase:
        return self._config.phase

    def replace(self, config: SaleConfiguration) -> SaleConfiguration:
        if not isinstance(config, SaleConfiguration):
            raise InvalidSaleConfigurationError("config", config)
        previous, self._config = self._config, config
        return previous

    def admit_public(self, quantity: int, prior_minted_by_caller: int, address: str = "") -> int:
        """Return the amount owed for a public purchase of ``quantity``."""
        check_quantity(quantity)
        config = self._config
        if not config.public_sale_active:
            raise SaleInactiveError()
        if config.public_sale_price == 0:
            raise PriceNotSetError()
        if prior_minted_by_caller + quantity > config.max_per_address:
            raise AddressCapExceededError(address, prior_minted_by_caller + quantity, config.max_per_address)
        return config.public_sale_price * quantity

    def admit_presale(
        self,
        quantity: int,
        max_quantity: int,
        price_per_token: int,
        prior_minted_by_caller: int,
        proof: Sequence[bytes],
        address: str,
    ) -> int:
        """Return the amount owed for a presale purchase.

        The per-address bound here is the ``max_quantity`` committed in the
        caller's allowlist entry, not ``max_per_address``.
        """
        check_quantity(quantity)
        if not self._config.presale_active:
            raise PresaleInactiveError()
        if not allowlist.verify(self._config.presale_merkle_root, proof, address, max_quantity, price_per_token):
            raise NotAllowlistedError(address)
        if prior_minted_by_caller + quantity > max_quantity:
            raise AddressCapExceededError(address, prior_minted_by_caller + quantity, max_quantity)
        return price_per_token * quantity

    @staticmethod
    def require_exact_payment(price_owed: int, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int) or value != price_owed:
            raise WrongPriceError(value, price_owed)
