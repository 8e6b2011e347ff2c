from __future__ import annotations

from typing import Optional


class EditionDropError(Exception):
    """Base class for every rejected drop operation."""


class UnauthorizedError(EditionDropError):
    def __init__(self, caller: str, role: str) -> None:
        self.caller = caller
        self.role = role
        super().__init__(f"EditionDrop: unauthorized (caller={caller}, required={role})")


class SaleInactiveError(EditionDropError):
    def __init__(self) -> None:
        super().__init__("EditionDrop: public sale is not active")


class PresaleInactiveError(EditionDropError):
    def __init__(self) -> None:
        super().__init__("EditionDrop: presale is not active")


class PriceNotSetError(EditionDropError):
    def __init__(self) -> None:
        super().__init__("EditionDrop: public sale price is not set")


class WrongPriceError(EditionDropError):
    def __init__(self, sent: int, required: int) -> None:
        self.sent = sent
        self.required = required
        super().__init__(f"EditionDrop: wrong price (sent={sent}, required={required})")


class AddressCapExceededError(EditionDropError):
    def __init__(self, address: str, count: int, limit: int) -> None:
        self.address = address
        self.count = count
        self.limit = limit
        super().__init__(f"EditionDrop: mint limit exceeded for {address} (count={count}, limit={limit})")


class OverCapError(EditionDropError):
    def __init__(self, requested: int, current: int, cap: int) -> None:
        self.requested = requested
        self.current = current
        self.cap = cap
        super().__init__(f"EditionDrop: edition sold out (requested={requested}, current={current}, cap={cap})")


class NotAllowlistedError(EditionDropError):
    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(f"EditionDrop: presale proof rejected for {address}")


class AlreadyInitializedError(EditionDropError):
    def __init__(self) -> None:
        super().__init__("EditionDrop: already initialized")


class NotInitializedError(EditionDropError):
    def __init__(self) -> None:
        super().__init__("EditionDrop: not initialized")


class RoyaltyTooHighError(EditionDropError):
    def __init__(self, bps: int, limit: int) -> None:
        self.bps = bps
        self.limit = limit
        super().__init__(f"EditionDrop: royalty too high (bps={bps}, max={limit})")


class InvalidAddressError(EditionDropError):
    def __init__(self, address: object) -> None:
        self.address = address
        super().__init__(f"EditionDrop: invalid address: {address!r}")


class InvalidQuantityError(EditionDropError):
    def __init__(self, quantity: object) -> None:
        self.quantity = quantity
        super().__init__(f"EditionDrop: invalid quantity: {quantity!r}")


class InvalidFeeError(EditionDropError):
    def __init__(self, bps: object) -> None:
        self.bps = bps
        super().__init__(f"EditionDrop: fee policy returned invalid bps: {bps!r}")


class InvalidSaleConfigurationError(EditionDropError):
    def __init__(self, field_name: str, value: object) -> None:
        self.field_name = field_name
        self.value = value
        super().__init__(f"EditionDrop: invalid sale configuration {field_name}={value!r}")


class TransferFailedError(EditionDropError):
    def __init__(self, recipient: str, amount: int, reason: Optional[str] = None) -> None:
        self.recipient = recipient
        self.amount = amount
        message = f"EditionDrop: transfer of {amount} to {recipient} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ReentrancyError(EditionDropError):
    def __init__(self, operation: str, active: str) -> None:
        self.operation = operation
        self.active = active
        super().__init__(f"EditionDrop: re-entrant call to {operation} while {active} is running")


class EditionNotOpenError(EditionDropError):
    def __init__(self, edition_size: int) -> None:
        self.edition_size = edition_size
        super().__init__(f"EditionDrop: edition is not open (edition_size={edition_size})")


class TokenNotFoundError(EditionDropError):
    def __init__(self, token_id: int) -> None:
        self.token_id = token_id
        super().__init__(f"EditionDrop: token does not exist: {token_id}")


class NotTokenOwnerError(EditionDropError):
    def __init__(self, caller: str, token_id: int) -> None:
        self.caller = caller
        self.token_id = token_id
        super().__init__(f"EditionDrop: {caller} does not own token {token_id}")


class RegistryMismatchError(EditionDropError):
    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"EditionDrop: registry issued id {actual}, ledger reserved {expected}")
