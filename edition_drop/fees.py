from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol, Tuple

from .errors import InvalidFeeError
from .models import BPS_DENOM, Transfer, normalize_address


class FeePolicy(Protocol):
    def withdraw_fee_bps(self, system_identity: str) -> Tuple[str, int]:
        ...


class StaticFeePolicy:
    """Fee policy with one recipient and rate for every drop."""

    def __init__(self, recipient: str, bps: int) -> None:
        self.recipient = normalize_address(recipient)
        self.bps = bps

    def withdraw_fee_bps(self, system_identity: str) -> Tuple[str, int]:
        return self.recipient, self.bps


@dataclass(frozen=True)
class FeeSplit:
    fee_recipient: str
    fee_amount: int
    remainder: int

    @property
    def total(self) -> int:
        return self.fee_amount + self.remainder

    def legs(self, funds_recipient: str) -> List[Transfer]:
        # fee leg always goes out first
        return [Transfer(self.fee_recipient, self.fee_amount), Transfer(funds_recipient, self.remainder)]


class FeeSplitter:
    def __init__(self, policy: FeePolicy, system_identity: str) -> None:
        self.policy = policy
        self.system_identity = system_identity

    def split(self, total_balance: int) -> FeeSplit:
        recipient, bps = self.policy.withdraw_fee_bps(self.system_identity)
        if isinstance(bps, bool) or not isinstance(bps, int) or not 0 <= bps <= BPS_DENOM:
            raise InvalidFeeError(bps)
        fee_amount = total_balance * bps // BPS_DENOM
        return FeeSplit(normalize_address(recipient), fee_amount, total_balance - fee_amount)
