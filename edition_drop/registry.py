from __future__ import annotations

from collections import Counter
from typing import Callable, Dict, Optional, Protocol, Tuple

from .errors import InvalidQuantityError, TokenNotFoundError
from .models import check_quantity, normalize_address


class TokenRegistry(Protocol):
    """Ownership ledger the drop issues tokens through."""

    def mint(self, to: str, quantity: int) -> int:
        ...

    def burn(self, token_id: int) -> None:
        ...

    def owner_of(self, token_id: int) -> str:
        ...

    def total_minted(self) -> int:
        ...

    def minted_by(self, address: str) -> int:
        ...

    def snapshot(self) -> object:
        ...

    def restore(self, snapshot: object) -> None:
        ...


class InMemoryTokenRegistry:
    """Sequential-id registry kept in process memory.

    ``on_mint`` is called after each mint with ``(to, first_id, quantity)``;
    it stands in for a receiving contract that may call back into the drop.
    """

    def __init__(self, on_mint: Optional[Callable[[str, int, int], None]] = None) -> None:
        self._owners: Dict[int, str] = {}
        self._minted_by: Counter = Counter()
        self._balances: Counter = Counter()
        self._next_id = 1
        self.on_mint = on_mint

    def mint(self, to: str, quantity: int) -> int:
        to = normalize_address(to)
        if check_quantity(quantity) == 0:
            raise InvalidQuantityError(quantity)
        first_id = self._next_id
        for token_id in range(first_id, first_id + quantity):
            self._owners[token_id] = to
        self._next_id += quantity
        self._minted_by[to] += quantity
        self._balances[to] += quantity
        if self.on_mint is not None:
            self.on_mint(to, first_id, quantity)
        return first_id

    def burn(self, token_id: int) -> None:
        owner = self.owner_of(token_id)
        del self._owners[token_id]
        self._balances[owner] -= 1

    def owner_of(self, token_id: int) -> str:
        try:
            return self._owners[token_id]
        except KeyError:
            raise TokenNotFoundError(token_id)

    def exists(self, token_id: int) -> bool:
        return token_id in self._owners

    def total_minted(self) -> int:
        return self._next_id - 1

    def minted_by(self, address: str) -> int:
        return self._minted_by[normalize_address(address)]

    def balance_of(self, address: str) -> int:
        return self._balances[normalize_address(address)]

    def snapshot(self) -> Tuple[Dict[int, str], Counter, Counter, int]:
        return (dict(self._owners), Counter(self._minted_by), Counter(self._balances), self._next_id)

    def restore(self, snapshot: Tuple[Dict[int, str], Counter, Counter, int]) -> None:
        owners, minted_by, balances, self._next_id = snapshot
        self._owners = dict(owners)
        self._minted_by = Counter(minted_by)
        self._balances = Counter(balances)
