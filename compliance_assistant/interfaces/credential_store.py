"""Credential store interface"""
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from compliance_assistant.domain.account import Account, Role

# Called with (account, deleted) after every mutation
AccountListener = Callable[[Account, bool], None]


class ICredentialStore(ABC):
    """Interface for account registry access"""

    @abstractmethod
    def find_by_email(self, email: str) -> Optional[Account]:
        """Get account by email (case-insensitive)"""
        pass

    @abstractmethod
    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Get account by ID"""
        pass

    @abstractmethod
    def create(self, email: str, secret: str, display_name: str) -> Account:
        """Create new explorer account"""
        pass

    @abstractmethod
    def update_role(self, account_id: str, new_role: Role) -> Account:
        """Replace an account's role in place"""
        pass

    @abstractmethod
    def increment_usage(self, account_id: str) -> Account:
        """Add one successful exchange to an account's usage"""
        pass

    @abstractmethod
    def delete(self, account_id: str) -> bool:
        """Delete account"""
        pass

    @abstractmethod
    def list_accounts(self) -> List[Account]:
        """List all accounts in creation order"""
        pass

    @abstractmethod
    def subscribe(self, listener: AccountListener) -> None:
        """Register a callback invoked after each mutation"""
        pass
