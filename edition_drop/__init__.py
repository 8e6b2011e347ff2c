# edition_drop: capped, sequentially numbered edition sales with a public
# phase, an allowlisted presale, role-gated administration and fee-split
# withdrawals.

from .access import AccessController, Role
from .allowlist import AllowlistEntry, AllowlistTree, allowlist_leaf, verify
from .drop import EditionDrop
from .errors import (
    AddressCapExceededError,
    AlreadyInitializedError,
    EditionDropError,
    EditionNotOpenError,
    InvalidAddressError,
    InvalidFeeError,
    InvalidQuantityError,
    InvalidSaleConfigurationError,
    NotAllowlistedError,
    NotInitializedError,
    NotTokenOwnerError,
    OverCapError,
    PresaleInactiveError,
    PriceNotSetError,
    ReentrancyError,
    RegistryMismatchError,
    RoyaltyTooHighError,
    SaleInactiveError,
    TokenNotFoundError,
    TransferFailedError,
    UnauthorizedError,
    WrongPriceError,
)
from .fees import FeeSplit, FeeSplitter, StaticFeePolicy
from .models import (
    AddressMintDetails,
    DropEvent,
    RoyaltyInfo,
    SaleDetails,
    SaleRecord,
    Transfer,
)
from .payments import InMemoryPaymentRail
from .registry import InMemoryTokenRegistry
from .renderer import EditionMetadataRenderer
from .sale import SaleConfiguration, SalePhase, SaleStateMachine
from .supply import SupplyLedger

__version__ = "0.1.0"
