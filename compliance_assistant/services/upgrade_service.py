"""Self-service upgrade from explorer to pro."""
import asyncio
import logging

from compliance_assistant.config import settings
from compliance_assistant.domain.account import Account, Role
from compliance_assistant.domain.view_state import ViewState
from compliance_assistant.exceptions import InvalidTransition, NotAuthenticated
from compliance_assistant.interfaces.credential_store import ICredentialStore
from compliance_assistant.services.session_manager import SessionManager

logger = logging.getLogger(__name__)


class UpgradeService:
    """Drives the upgrade screen. Payment is simulated with a delay."""

    def __init__(self, sessions: SessionManager, store: ICredentialStore, latency: float = None):
        self.sessions = sessions
        self.store = store
        self.latency = settings.UPGRADE_LATENCY_SECONDS if latency is None else latency

    def request_upgrade(self) -> ViewState:
        if self.sessions.current_account is None:
            raise NotAuthenticated()
        return self.sessions.view.request_upgrade()

    def cancel_upgrade(self) -> ViewState:
        return self.sessions.view.cancel_upgrade()

    async def complete_upgrade(self) -> Account:
        """
        Upgrade the signed-in explorer to pro and return to the chat screen.

        Accounts that already have a paid role keep it.

        Raises:
            NotAuthenticated: No active session
            InvalidTransition: Not on the upgrade screen, or logged out meanwhile
        """
        session = self.sessions.session
        if session is None:
            raise NotAuthenticated()

        view = self.sessions.view
        if view.state != ViewState.UPGRADING:
            raise InvalidTransition()

        view.set_busy(True)
        try:
            await asyncio.sleep(self.latency)
        finally:
            view.set_busy(False)

        if not session.active or view.state != ViewState.UPGRADING:
            raise InvalidTransition("Upgrade was cancelled")

        account = session.account
        if account.role == Role.EXPLORER:
            account = self.store.update_role(account.id, Role.PRO)
            logger.info(f"{account.email} upgraded to pro")
        else:
            logger.info(f"{account.email} already has {account.role.value}, no change")

        view.complete_upgrade()
        return account
