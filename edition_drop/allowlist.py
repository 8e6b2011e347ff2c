"""Presale allowlist commitments.

The allowlist itself never lives in the drop: the issuer builds a Merkle tree
over ``(address, max_quantity, price_per_token)`` entries off-system and only
the 32-byte root goes into the sale configuration. A buyer presents the
sibling hashes from their leaf up to the root.

Leaf encoding is ``sha256(address[20] || uint256(max_quantity) ||
uint256(price_per_token))``; interior nodes hash the two children in sorted
order so proofs carry no left/right flags.
"""
from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Dict, List, Sequence

from .models import UINT256_MAX, address_bytes, is_address, normalize_address

HASH_SIZE = 32


def _uint256(value: int) -> bytes:
    return value.to_bytes(32, "big")


def allowlist_leaf(address: str, max_quantity: int, price_per_token: int) -> bytes:
    payload = address_bytes(address) + _uint256(max_quantity) + _uint256(price_per_token)
    return hashlib.sha256(payload).digest()


def hash_pair(a: bytes, b: bytes) -> bytes:
    if a <= b:
        return hashlib.sha256(a + b).digest()
    return hashlib.sha256(b + a).digest()


def _is_uint256(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= UINT256_MAX


def _is_hash(value: object) -> bool:
    return isinstance(value, (bytes, bytearray)) and len(value) == HASH_SIZE


def verify(
    root: bytes,
    proof: Sequence[bytes],
    address: str,
    max_quantity: int,
    price_per_token: int,
) -> bool:
    """Check that the entry is committed under ``root``. Never raises."""
    if not _is_hash(root) or not is_address(address):
        return False
    if not _is_uint256(max_quantity) or not _is_uint256(price_per_token):
        return False
    try:
        siblings = list(proof)
    except TypeError:
        return False
    node = allowlist_leaf(address, max_quantity, price_per_token)
    for sibling in siblings:
        if not _is_hash(sibling):
            return False
        node = hash_pair(node, bytes(sibling))
    return node == bytes(root)


@dataclass(frozen=True)
class AllowlistEntry:
    address: str
    max_quantity: int
    price_per_token: int

    def leaf(self) -> bytes:
        return allowlist_leaf(self.address, self.max_quantity, self.price_per_token)


class AllowlistTree:
    """Builds the root and per-entry proofs for a presale allowlist."""

    def __init__(self, entries: Sequence[AllowlistEntry]) -> None:
        if not entries:
            raise ValueError("allowlist needs at least one entry")
        self.entries = [
            AllowlistEntry(normalize_address(e.address), e.max_quantity, e.price_per_token)
            for e in entries
        ]
        self._levels: List[List[bytes]] = [[e.leaf() for e in self.entries]]
        while len(self._levels[-1]) > 1:
            level = self._levels[-1]
            parents = []
            for i in range(0, len(level), 2):
                if i + 1 < len(level):
                    parents.append(hash_pair(level[i], level[i + 1]))
                else:
                    # odd node is promoted unchanged
                    parents.append(level[i])
            self._levels.append(parents)
        self._index: Dict[str, int] = {}
        for i, entry in enumerate(self.entries):
            self._index.setdefault(entry.address, i)

    @property
    def root(self) -> bytes:
        return self._levels[-1][0]

    def proof_at(self, index: int) -> List[bytes]:
        proof = []
        for level in self._levels[:-1]:
            sibling = index ^ 1
            if sibling < len(level):
                proof.append(level[sibling])
            index //= 2
        return proof

    def proof_for(self, address: str) -> List[bytes]:
        """Proof for the first entry listed for ``address``."""
        return self.proof_at(self._index[normalize_address(address)])

    def entry_for(self, address: str) -> AllowlistEntry:
        return self.entries[self._index[normalize_address(address)]]
