from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, FrozenSet, Optional, Set, Tuple

from .errors import AlreadyInitializedError, UnauthorizedError
from .models import ZERO_ADDRESS, is_address, normalize_address

logger = logging.getLogger(__name__)


class Role(Enum):
    ADMIN = "ADMIN"
    MINTER = "MINTER"
    SALES_MANAGER = "SALES_MANAGER"


class AccessController:
    """Role membership plus the single display ``owner`` field.

    ADMIN is the top of the hierarchy: an admin passes every role check.
    """

    def __init__(self) -> None:
        self._members: Dict[Role, Set[str]] = {role: set() for role in Role}
        self._owner = ZERO_ADDRESS
        self._bootstrapped = False

    def bootstrap(self, admin: str) -> None:
        if self._bootstrapped:
            raise AlreadyInitializedError()
        admin = normalize_address(admin)
        self._members[Role.ADMIN].add(admin)
        self._owner = admin
        self._bootstrapped = True

    @property
    def owner(self) -> str:
        return self._owner

    def members(self, role: Role) -> FrozenSet[str]:
        return frozenset(self._members[role])

    def has_role(self, principal: str, role: Role) -> bool:
        if not is_address(principal):
            return False
        return principal.lower() in self._members[role]

    def has_capability(self, principal: str, role: Role) -> bool:
        return self.has_role(principal, Role.ADMIN) or self.has_role(principal, role)

    def require_admin(self, caller: str) -> None:
        if not self.has_role(caller, Role.ADMIN):
            logger.warning(f"Rejected {caller}: not an admin")
            raise UnauthorizedError(caller, Role.ADMIN.value)

    def require_role_or_admin(self, caller: str, role: Role) -> None:
        if not self.has_capability(caller, role):
            logger.warning(f"Rejected {caller}: lacks {role.value}")
            raise UnauthorizedError(caller, role.value)

    def grant_role(self, caller: str, role: Role, principal: str) -> bool:
        """Grant ``role``; returns False when the principal already held it."""
        self.require_admin(caller)
        principal = normalize_address(principal)
        if principal in self._members[role]:
            return False
        self._members[role].add(principal)
        logger.info(f"{caller} granted {role.value} to {principal}")
        return True

    def revoke_role(self, caller: str, role: Role, principal: str) -> bool:
        self.require_admin(caller)
        principal = normalize_address(principal)
        if principal not in self._members[role]:
            return False
        self._members[role].discard(principal)
        logger.info(f"{caller} revoked {role.value} from {principal}")
        return True

    def renounce_role(self, caller: str, role: Role) -> bool:
        caller = normalize_address(caller)
        if caller not in self._members[role]:
            return False
        self._members[role].discard(caller)
        logger.info(f"{caller} renounced {role.value}")
        return True

    def set_owner(self, caller: str, new_owner: str) -> str:
        """Replace the display owner; returns the previous one."""
        self.require_admin(caller)
        previous, self._owner = self._owner, normalize_address(new_owner)
        return previous

    def snapshot(self) -> Tuple[Dict[Role, FrozenSet[str]], str, bool]:
        return ({role: frozenset(m) for role, m in self._members.items()}, self._owner, self._bootstrapped)

    def restore(self, snapshot: Tuple[Dict[Role, FrozenSet[str]], str, bool]) -> None:
        members, self._owner, self._bootstrapped = snapshot
        self._members = {role: set(m) for role, m in members.items()}

    def is_admin(self, principal: Optional[str]) -> bool:
        return principal is not None and self.has_role(principal, Role.ADMIN)
