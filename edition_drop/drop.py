"""The edition drop: sale admission, supply accounting and fund withdrawal.

Every mutating call runs as one operation: operations are serialised, a
call that re-enters the drop while an operation is in flight (for example
from a registry mint hook or a payment receive hook) is refused, and any
exception restores the drop and its token registry to the state they had
when the operation started.
"""
from __future__ import annotations

import logging
import threading
from collections import Counter
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from .access import AccessController, Role
from .errors import (
    AlreadyInitializedError,
    NotInitializedError,
    NotTokenOwnerError,
    RegistryMismatchError,
    ReentrancyError,
    RoyaltyTooHighError,
)
from .fees import FeePolicy, FeeSplit, FeeSplitter
from .models import (
    BPS_DENOM,
    MAX_ROYALTY_BPS,
    ZERO_ADDRESS,
    AddressMintDetails,
    DropEvent,
    FundsRecipientChanged,
    FundsWithdrawn,
    MetadataRendererUpdated,
    OpenMintFinalized,
    OwnerChanged,
    RoleChanged,
    RoyaltyInfo,
    SaleDetails,
    SaleRecord,
    SalesConfigChanged,
    UINT256_MAX,
    check_quantity,
    normalize_address,
)
from .payments import PaymentRail
from .registry import TokenRegistry
from .renderer import MetadataRenderer
from .sale import SaleConfiguration, SaleStateMachine
from .supply import SupplyLedger

logger = logging.getLogger(__name__)


class EditionDrop:
    def __init__(
        self,
        address: str,
        registry: TokenRegistry,
        fee_policy: FeePolicy,
        payments: PaymentRail,
    ) -> None:
        self.address = normalize_address(address)
        self._registry = registry
        self._payments = payments
        self._fees = FeeSplitter(fee_policy, self.address)
        self._access = AccessController()
        self._sale = SaleStateMachine()
        self._supply = SupplyLedger()
        self._renderer: Optional[MetadataRenderer] = None
        self._initialized = False
        self.name = ""
        self.symbol = ""
        self.royalty_bps = 0
        self.funds_recipient = ZERO_ADDRESS
        self._presale_mints: Counter = Counter()
        self._public_mints: Counter = Counter()
        self._balance = 0
        self.records: List[Any] = []
        self._mutex = threading.Lock()
        self._active: Optional[Tuple[str, int]] = None

    # ------------------------------------------------------------------
    # Operation boundary
    # ------------------------------------------------------------------

    def _snapshot(self) -> Dict[str, Any]:
        return {
            "initialized": self._initialized,
            "name": self.name,
            "symbol": self.symbol,
            "royalty_bps": self.royalty_bps,
            "funds_recipient": self.funds_recipient,
            "renderer": self._renderer,
            "supply": self._supply,
            "supply_state": self._supply.snapshot(),
            "sale": self._sale.config,
            "access": self._access.snapshot(),
            "presale_mints": Counter(self._presale_mints),
            "public_mints": Counter(self._public_mints),
            "balance": self._balance,
            "records": len(self.records),
            "registry": self._registry.snapshot(),
        }

    def _restore(self, saved: Dict[str, Any]) -> None:
        self._initialized = saved["initialized"]
        self.name = saved["name"]
        self.symbol = saved["symbol"]
        self.royalty_bps = saved["royalty_bps"]
        self.funds_recipient = saved["funds_recipient"]
        self._renderer = saved["renderer"]
        self._supply = saved["supply"]
        self._supply.restore(saved["supply_state"])
        self._sale.replace(saved["sale"])
        self._access.restore(saved["access"])
        self._presale_mints = saved["presale_mints"]
        self._public_mints = saved["public_mints"]
        self._balance = saved["balance"]
        del self.records[saved["records"]:]
        self._registry.restore(saved["registry"])

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        active = self._active
        if active is not None and active[1] == threading.get_ident():
            logger.warning(f"Refused re-entrant {name} during {active[0]}")
            raise ReentrancyError(name, active[0])
        with self._mutex:
            self._active = (name, threading.get_ident())
            saved = self._snapshot()
            try:
                yield
            except Exception:
                self._restore(saved)
                logger.debug(f"{name} failed, drop state restored")
                raise
            finally:
                self._active = None

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise NotInitializedError()

    def _emit(self, record: Any) -> None:
        self.records.append(record)
        logger.info(f"{record.event.value}: {record.to_dict()}")

    def records_of(self, event: DropEvent) -> List[Any]:
        return [r for r in self.records if r.event is event]

    # ------------------------------------------------------------------
    # Initialisation
    # ------------------------------------------------------------------

    def initialize(
        self,
        name: str,
        symbol: str,
        owner: str,
        funds_recipient: str,
        edition_size: int,
        royalty_bps: int,
        renderer: MetadataRenderer,
        renderer_init: bytes = b"",
        sale_config: Optional[SaleConfiguration] = None,
    ) -> None:
        with self._operation("initialize"):
            if self._initialized:
                raise AlreadyInitializedError()
            check_quantity(royalty_bps)
            if royalty_bps > MAX_ROYALTY_BPS:
                raise RoyaltyTooHighError(royalty_bps, MAX_ROYALTY_BPS)
            self._initialized = True
            self.name = name
            self.symbol = symbol
            self.royalty_bps = royalty_bps
            self.funds_recipient = normalize_address(funds_recipient)
            self._supply = SupplyLedger(edition_size)
            self._access.bootstrap(owner)
            self._renderer = renderer
            renderer.initialize(renderer_init)
            if sale_config is not None:
                self._sale.replace(sale_config)
                self._emit(self._config_record(self._access.owner))
            logger.info(f"Initialized {name} ({symbol}): edition_size={edition_size} owner={self._access.owner}")

    # ------------------------------------------------------------------
    # Purchases
    # ------------------------------------------------------------------

    def _purchase_count(self, address: str) -> int:
        return self._presale_mints[address] + self._public_mints[address]

    def _issue(self, to: str, quantity: int, first_id: int) -> None:
        issued = self._registry.mint(to, quantity)
        if issued != first_id:
            raise RegistryMismatchError(first_id, issued)

    def purchase(self, caller: str, quantity: int, value: int) -> SaleRecord:
        """Public sale purchase; ``value`` must equal price times quantity."""
        with self._operation("purchase"):
            self._require_initialized()
            buyer = normalize_address(caller)
            owed = self._sale.admit_public(quantity, self._purchase_count(buyer), buyer)
            self._sale.require_exact_payment(owed, value)
            first_id = self._supply.reserve(quantity)
            self._public_mints[buyer] += quantity
            self._balance += value
            self._issue(buyer, quantity, first_id)
            record = SaleRecord(buyer, quantity, self._sale.config.public_sale_price, first_id)
            self._emit(record)
            return record

    def purchase_presale(
        self,
        caller: str,
        quantity: int,
        max_quantity: int,
        price_per_token: int,
        proof: Sequence[bytes],
        value: int,
    ) -> SaleRecord:
        """Allowlisted purchase at the price committed in the caller's entry."""
        with self._operation("purchase_presale"):
            self._require_initialized()
            buyer = normalize_address(caller)
            owed = self._sale.admit_presale(
                quantity, max_quantity, price_per_token, self._purchase_count(buyer), proof, buyer,
            )
            self._sale.require_exact_payment(owed, value)
            first_id = self._supply.reserve(quantity)
            self._presale_mints[buyer] += quantity
            self._balance += value
            self._issue(buyer, quantity, first_id)
            record = SaleRecord(buyer, quantity, price_per_token, first_id)
            self._emit(record)
            return record

    # ------------------------------------------------------------------
    # Administrative minting
    # ------------------------------------------------------------------

    def admin_mint(self, caller: str, recipient: str, quantity: int) -> int:
        with self._operation("admin_mint"):
            self._require_initialized()
            self._access.require_role_or_admin(caller, Role.MINTER)
            recipient = normalize_address(recipient)
            first_id = self._supply.reserve(quantity)
            self._issue(recipient, quantity, first_id)
            logger.info(f"{caller} minted {quantity} to {recipient} starting at {first_id}")
            return first_id

    def admin_airdrop(self, caller: str, recipients: Sequence[str]) -> int:
        """Mint one edition to each recipient; ``recipients[i]`` gets ``base + i``."""
        with self._operation("admin_airdrop"):
            self._require_initialized()
            self._access.require_role_or_admin(caller, Role.MINTER)
            targets = [normalize_address(r) for r in recipients]
            base = self._supply.reserve(len(targets))
            for offset, recipient in enumerate(targets):
                self._issue(recipient, 1, base + offset)
            logger.info(f"{caller} airdropped {len(targets)} editions starting at {base}")
            return base

    # ------------------------------------------------------------------
    # Funds
    # ------------------------------------------------------------------

    def withdraw(self, caller: str) -> FeeSplit:
        with self._operation("withdraw"):
            self._require_initialized()
            self._access.require_role_or_admin(caller, Role.SALES_MANAGER)
            balance = self._balance
            split = self._fees.split(balance)
            self._balance = 0
            self._payments.deliver(split.legs(self.funds_recipient))
            self._emit(FundsWithdrawn(
                withdrawn_by=normalize_address(caller),
                recipient=self.funds_recipient,
                amount=split.remainder,
                fee_recipient=split.fee_recipient,
                fee_amount=split.fee_amount,
            ))
            return split

    def set_funds_recipient(self, caller: str, new_address: str) -> None:
        with self._operation("set_funds_recipient"):
            self._require_initialized()
            self._access.require_admin(caller)
            self.funds_recipient = normalize_address(new_address)
            self._emit(FundsRecipientChanged(self.funds_recipient, normalize_address(caller)))

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def _config_record(self, changed_by: str) -> SalesConfigChanged:
        config = self._sale.config
        return SalesConfigChanged(
            changed_by=changed_by,
            public_sale_active=config.public_sale_active,
            presale_active=config.presale_active,
            public_sale_price=config.public_sale_price,
            max_per_address=config.max_per_address,
            presale_merkle_root="0x" + config.presale_merkle_root.hex(),
        )

    def set_sale_configuration(self, caller: str, config: SaleConfiguration) -> None:
        with self._operation("set_sale_configuration"):
            self._require_initialized()
            self._access.require_admin(caller)
            self._sale.replace(config)
            self._emit(self._config_record(normalize_address(caller)))

    def set_owner(self, caller: str, new_owner: str) -> None:
        with self._operation("set_owner"):
            self._require_initialized()
            previous = self._access.set_owner(caller, new_owner)
            self._emit(OwnerChanged(previous, self._access.owner))

    def grant_role(self, caller: str, role: Role, principal: str) -> None:
        with self._operation("grant_role"):
            self._require_initialized()
            if self._access.grant_role(caller, role, principal):
                self._emit(RoleChanged(role.value, normalize_address(principal), True, normalize_address(caller)))

    def revoke_role(self, caller: str, role: Role, principal: str) -> None:
        with self._operation("revoke_role"):
            self._require_initialized()
            if self._access.revoke_role(caller, role, principal):
                self._emit(RoleChanged(role.value, normalize_address(principal), False, normalize_address(caller)))

    def renounce_role(self, caller: str, role: Role) -> None:
        with self._operation("renounce_role"):
            self._require_initialized()
            if self._access.renounce_role(caller, role):
                caller = normalize_address(caller)
                self._emit(RoleChanged(role.value, caller, False, caller))

    def finalize_open_edition(self, caller: str) -> int:
        """Cap an open edition at the current supply."""
        with self._operation("finalize_open_edition"):
            self._require_initialized()
            self._access.require_role_or_admin(caller, Role.SALES_MANAGER)
            size = self._supply.finalize_open_edition()
            self._emit(OpenMintFinalized(normalize_address(caller), size))
            return size

    def set_metadata_renderer(self, caller: str, renderer: MetadataRenderer, renderer_init: bytes = b"") -> None:
        with self._operation("set_metadata_renderer"):
            self._require_initialized()
            self._access.require_admin(caller)
            renderer.initialize(renderer_init)
            self._renderer = renderer
            self._emit(MetadataRendererUpdated(normalize_address(caller), type(renderer).__name__))

    def burn(self, caller: str, token_id: int) -> None:
        """Burn a token the caller owns. Burns never return supply capacity."""
        with self._operation("burn"):
            self._require_initialized()
            caller = normalize_address(caller)
            if self._registry.owner_of(token_id) != caller:
                raise NotTokenOwnerError(caller, token_id)
            self._registry.burn(token_id)
            logger.info(f"{caller} burned token {token_id}")

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    @property
    def owner(self) -> str:
        return self._access.owner

    @property
    def balance(self) -> int:
        return self._balance

    @property
    def total_minted(self) -> int:
        return self._supply.total_minted

    @property
    def edition_size(self) -> int:
        return self._supply.edition_size

    @property
    def sale_config(self) -> SaleConfiguration:
        return self._sale.config

    def is_admin(self, address: str) -> bool:
        return self._access.is_admin(address)

    def has_role(self, address: str, role: Role) -> bool:
        return self._access.has_capability(address, role)

    def sale_details(self) -> SaleDetails:
        config = self._sale.config
        return SaleDetails(
            public_sale_active=config.public_sale_active,
            presale_active=config.presale_active,
            public_sale_price=config.public_sale_price,
            presale_merkle_root=config.presale_merkle_root,
            max_per_address=config.max_per_address,
            total_minted=self._supply.total_minted,
            max_supply=self._supply.edition_size,
        )

    def minted_per_address(self, address: str) -> AddressMintDetails:
        address = normalize_address(address)
        presale = self._presale_mints[address]
        public = self._public_mints[address]
        return AddressMintDetails(total_mints=presale + public, presale_mints=presale, public_mints=public)

    def royalty_info(self, sale_price: int) -> RoyaltyInfo:
        check_quantity(sale_price, UINT256_MAX)
        if self.funds_recipient == ZERO_ADDRESS:
            return RoyaltyInfo(ZERO_ADDRESS, 0)
        return RoyaltyInfo(self.funds_recipient, sale_price * self.royalty_bps // BPS_DENOM)

    def contract_uri(self) -> str:
        self._require_initialized()
        return self._renderer.contract_uri()

    def token_uri(self, token_id: int) -> str:
        self._require_initialized()
        self._registry.owner_of(token_id)
        return self._renderer.token_uri(token_id)
