"""Role administration service for admin operations."""
import logging
from typing import List, Union

from compliance_assistant.audit_log import log_admin_action
from compliance_assistant.domain.account import Account, Role
from compliance_assistant.domain.view_state import ViewState
from compliance_assistant.exceptions import AssistantError, Forbidden, InvalidInput, NotAuthenticated
from compliance_assistant.interfaces.credential_store import ICredentialStore
from compliance_assistant.models.responses import AccountSummary
from compliance_assistant.services.session_manager import SessionManager

logger = logging.getLogger(__name__)


class RoleAdministrationService:
    """
    Business logic for the admin screen.

    Handles:
    - Entering / leaving the admin screen
    - Listing accounts with their usage
    - Changing an account's role (including the caller's own)

    The caller's capability is derived from the live account on every call,
    so a self-demotion takes effect immediately.
    """

    def __init__(self, sessions: SessionManager, store: ICredentialStore):
        self.sessions = sessions
        self.store = store

    def _require_capability(self) -> Account:
        account = self.sessions.current_account
        if account is None:
            raise NotAuthenticated()
        if not self.sessions.limits.can_administer:
            logger.warning(f"{account.email} attempted an admin action without capability")
            raise Forbidden()
        return account

    def open_admin_screen(self) -> ViewState:
        """
        Raises:
            Forbidden: Caller cannot administer (view unchanged)
        """
        if self.sessions.current_account is None:
            raise NotAuthenticated()
        return self.sessions.view.request_admin(self.sessions.limits)

    def close_admin_screen(self) -> ViewState:
        return self.sessions.view.back()

    def list_accounts(self) -> List[AccountSummary]:
        self._require_capability()
        return [AccountSummary.from_domain(a) for a in self.store.list_accounts()]

    async def change_role(self, target_account_id: str, new_role: Union[Role, str]) -> Account:
        """
        Change another (or one's own) account's role.

        Args:
            target_account_id: Account to change
            new_role: explorer, pro or admin

        Returns:
            The updated account

        Raises:
            NotAuthenticated: No active session
            Forbidden: Caller cannot administer
            InvalidInput: Role outside the closed set
            NotFound: No account has target_account_id
        """
        caller = self.sessions.current_account
        admin_user = caller.id if caller else "anonymous"
        role_value = new_role.value if isinstance(new_role, Role) else new_role
        parameters = {"account_id": target_account_id, "role": role_value}

        logger.info(f"{admin_user} changing role of {target_account_id} to {role_value}")

        try:
            self._require_capability()

            role = Role.parse(new_role)
            if role is None:
                raise InvalidInput(f"Unknown role: {new_role}")

            account = self.store.update_role(target_account_id, role)

        except AssistantError as e:
            logger.warning(f"Failed to change role: {e}")
            await log_admin_action(
                admin_user=admin_user,
                action="change_role",
                parameters=parameters,
                result=f"failure: {e}"
            )
            raise

        await log_admin_action(
            admin_user=admin_user,
            action="change_role",
            parameters=parameters,
            result="success"
        )

        logger.info(f"User role for {account.email} updated to {role.value}")
        return account
