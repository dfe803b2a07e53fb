"""Responder interface (DIP - Dependency Inversion)"""
from abc import ABC, abstractmethod
from typing import Dict, Optional


class IResponder(ABC):
    """Interface for the backend that produces assistant replies"""

    @abstractmethod
    async def reply(self, message: str, metadata: Optional[Dict] = None) -> str:
        """
        Send one user message and return the assistant's reply text.

        Args:
            message: Sanitized user text
            metadata: Optional caller identity / timestamp

        Returns:
            Reply text

        Raises:
            TransportFailure: On timeout, network error or non-success status
        """
        pass

    async def close(self) -> None:
        """Release connections held by the responder. Default: nothing to release."""
        pass
