"""Session domain entity"""
from dataclasses import dataclass, field
from datetime import datetime

from compliance_assistant.domain.account import Account


@dataclass(eq=False)
class Session:
    """Live binding between the running application and one Account.

    ``account`` is the Credential Store's own instance, never a copy, so
    role and usage changes are visible here as soon as the store applies them.
    """
    account: Account = field(repr=False)
    token: str = field(repr=False)
    started_at: datetime
    exchange_pending: bool = False
    active: bool = True
