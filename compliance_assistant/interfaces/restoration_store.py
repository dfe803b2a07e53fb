"""Restoration store interface"""
from abc import ABC, abstractmethod
from typing import Optional

from pydantic import BaseModel


class RestorationRecord(BaseModel):
    """What survives a process restart. Never holds the secret."""
    session_token: str
    account_id: str


class IRestorationStore(ABC):
    """Interface for the persisted session restoration record"""

    @abstractmethod
    def load(self) -> Optional[RestorationRecord]:
        """Read the record, None if absent or unreadable"""
        pass

    @abstractmethod
    def save(self, record: RestorationRecord) -> None:
        """Replace the record"""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the record"""
        pass
