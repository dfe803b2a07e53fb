"""API and screen response models"""
from datetime import datetime

from pydantic import BaseModel

from compliance_assistant.domain.account import Account
from compliance_assistant.services.entitlement_policy import limits_for


class AccountSummary(BaseModel):
    """What the admin screen shows for one account (never the secret)."""
    account_id: str
    email: str
    display_name: str
    role: str
    usage_count: int
    ceiling: int
    created_at: datetime

    @classmethod
    def from_domain(cls, account: Account):
        return cls(
            account_id=account.id,
            email=account.email,
            display_name=account.display_name,
            role=account.role.value,
            usage_count=account.usage_count,
            ceiling=limits_for(account.role).ceiling,
            created_at=account.created_at
        )


class ChatResponse(BaseModel):
    response: str
    success: bool = True
