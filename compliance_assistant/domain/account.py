"""Account domain entity"""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Union


class Role(str, Enum):
    """Entitlement tier (closed set)."""
    EXPLORER = "explorer"
    PRO = "pro"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: Union[str, "Role"]) -> Optional["Role"]:
        """Return the Role for an exact value, None for anything else."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (TypeError, ValueError):
            return None


# Older iterations stored either a boolean "paid" flag or other tier names.
# Premium was the paid tier without administration, so it maps to pro.
_LEGACY_ROLE_NAMES = {
    "premium": Role.PRO,
    "paid": Role.PRO,
    "standard": Role.EXPLORER,
    "free": Role.EXPLORER,
}


def migrate_legacy_role(value: Union[bool, str, Role, None]) -> Role:
    """Convert a legacy role encoding to the three-value Role.

    Booleans are the old ``isPaid`` flag. Unrecognized values become
    explorer.
    """
    if isinstance(value, bool):
        return Role.PRO if value else Role.EXPLORER

    role = Role.parse(value) if value is not None else None
    if role:
        return role

    if isinstance(value, str):
        return _LEGACY_ROLE_NAMES.get(value.strip().lower(), Role.EXPLORER)

    return Role.EXPLORER


@dataclass(eq=False, frozen=True)
class Account:
    """Registered identity with role and usage counter.

    Equality is identity: sessions hold the store's own instance. Fields are
    read-only outside the credential store, which changes role and usage
    under its lock.
    """
    id: str
    email: str
    display_name: str
    role: Role
    created_at: datetime
    secret_hash: str = field(repr=False)
    usage_count: int = 0
