from __future__ import annotations

import logging
from typing import Optional, Tuple

from .errors import EditionNotOpenError, OverCapError
from .models import UINT64_MAX, check_quantity

logger = logging.getLogger(__name__)


class SupplyLedger:
    """Counts issued editions against the edition cap.

    ``edition_size == 0`` means the edition is open (no cap). Token ids are
    1-based and handed out in reservation order, so the first id of a
    reservation is always ``total_minted + 1`` at the time of the call.
    """

    def __init__(self, edition_size: int = 0) -> None:
        check_quantity(edition_size)
        # None while the edition is open
        self._cap: Optional[int] = edition_size or None
        self._total_minted = 0

    @property
    def edition_size(self) -> int:
        return 0 if self._cap is None else self._cap

    @property
    def total_minted(self) -> int:
        return self._total_minted

    @property
    def next_token_id(self) -> int:
        return self._total_minted + 1

    def is_open(self) -> bool:
        return self._cap is None

    def remaining(self) -> Optional[int]:
        if self._cap is None:
            return None
        return self._cap - self._total_minted

    def is_sold_out(self) -> bool:
        return self._cap is not None and self._total_minted >= self._cap

    def reserve(self, quantity: int) -> int:
        check_quantity(quantity)
        new_total = self._total_minted + quantity
        if new_total > UINT64_MAX or (self._cap is not None and new_total > self._cap):
            logger.warning(f"Reservation of {quantity} rejected: {self._total_minted} of {self.edition_size} minted")
            raise OverCapError(quantity, self._total_minted, self.edition_size)
        first_id = self._total_minted + 1
        self._total_minted = new_total
        return first_id

    def finalize_open_edition(self) -> int:
        """Cap an open edition at the number minted so far."""
        if self._cap is not None:
            raise EditionNotOpenError(self._cap)
        self._cap = self._total_minted
        return self._cap

    def snapshot(self) -> Tuple[Optional[int], int]:
        return (self._cap, self._total_minted)

    def restore(self, snapshot: Tuple[Optional[int], int]) -> None:
        self._cap, self._total_minted = snapshot
