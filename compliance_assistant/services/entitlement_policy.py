"""Entitlement policy: what each role may do."""
from dataclasses import dataclass
from typing import Union

from compliance_assistant.config import settings
from compliance_assistant.domain.account import Role

UNLIMITED = -1


@dataclass(frozen=True)
class Limits:
    """Quota ceiling and administrative capability for a role."""
    ceiling: int
    can_administer: bool

    @property
    def unlimited(self) -> bool:
        return self.ceiling == UNLIMITED


def limits_for(role: Union[Role, str, None]) -> Limits:
    """Get limits for a role. Unknown roles get the explorer limits."""
    role = Role.parse(role)

    if role == Role.ADMIN:
        return Limits(ceiling=UNLIMITED, can_administer=True)
    if role == Role.PRO:
        return Limits(ceiling=UNLIMITED, can_administer=False)
    return Limits(ceiling=settings.EXPLORER_QUERY_LIMIT, can_administer=False)


def has_quota(limits: Limits, usage_count: int) -> bool:
    return limits.unlimited or usage_count < limits.ceiling


def remaining(limits: Limits, usage_count: int) -> int:
    """Exchanges left, UNLIMITED for unlimited roles."""
    if limits.unlimited:
        return UNLIMITED
    return max(limits.ceiling - usage_count, 0)


def is_paid(role: Union[Role, str, None]) -> bool:
    return Role.parse(role) in (Role.PRO, Role.ADMIN)
