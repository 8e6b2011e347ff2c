from __future__ import annotations

import logging
from collections import Counter
from typing import Callable, Dict, Protocol, Sequence, Set

from .errors import TransferFailedError
from .models import Transfer, normalize_address

logger = logging.getLogger(__name__)


class PaymentRail(Protocol):
    """Moves value out of the drop.

    ``deliver`` settles every transfer or none of them: when it raises, no
    recipient has been credited.
    """

    def deliver(self, transfers: Sequence[Transfer]) -> None:
        ...


class InMemoryPaymentRail:
    """Credits balances in process memory.

    Addresses passed to ``mark_unreachable`` refuse payment. A receive hook
    registered with ``on_receive`` runs before anything is credited and may
    raise (or call back into the drop) to reject the whole batch.
    """

    def __init__(self) -> None:
        self.balances: Counter = Counter()
        self._unreachable: Set[str] = set()
        self._hooks: Dict[str, Callable[[Transfer], None]] = {}

    def mark_unreachable(self, address: str) -> None:
        self._unreachable.add(normalize_address(address))

    def mark_reachable(self, address: str) -> None:
        self._unreachable.discard(normalize_address(address))

    def on_receive(self, address: str, hook: Callable[[Transfer], None]) -> None:
        self._hooks[normalize_address(address)] = hook

    def balance_of(self, address: str) -> int:
        return self.balances[normalize_address(address)]

    def deliver(self, transfers: Sequence[Transfer]) -> None:
        for transfer in transfers:
            recipient = normalize_address(transfer.recipient)
            if recipient in self._unreachable:
                logger.warning(f"Transfer of {transfer.amount} to {recipient} refused")
                raise TransferFailedError(recipient, transfer.amount, "recipient unreachable")
            hook = self._hooks.get(recipient)
            if hook is not None:
                hook(transfer)
        for transfer in transfers:
            self.balances[normalize_address(transfer.recipient)] += transfer.amount
