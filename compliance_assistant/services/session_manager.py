"""Session manager (login, signup, restore, logout)"""
import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import jwt

from compliance_assistant.config import settings
from compliance_assistant.domain.account import Account
from compliance_assistant.domain.session import Session
from compliance_assistant.domain.transcript import Transcript
from compliance_assistant.domain.view_state import ViewState
from compliance_assistant.exceptions import (
    AssistantError,
    InvalidCredentials,
    InvalidInput,
    InvalidTransition,
)
from compliance_assistant.interfaces.credential_store import ICredentialStore
from compliance_assistant.interfaces.restoration_store import IRestorationStore, RestorationRecord
from compliance_assistant.services.entitlement_policy import Limits, limits_for
from compliance_assistant.services.view_controller import ViewController
from compliance_assistant.utils.crypto import dummy_hash, verify_secret
from compliance_assistant.utils.sanitize import is_valid_email
from compliance_assistant.utils.tokens import create_session_token, verify_session_token

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Owns the active Session and its Transcript.

    Depends on the credential and restoration store interfaces, and drives
    the view controller on every session change.
    """

    def __init__(
        self,
        store: ICredentialStore,
        restoration_store: IRestorationStore,
        view: ViewController,
        auth_latency: float = None
    ):
        self.store = store
        self.restoration_store = restoration_store
        self.view = view
        self.auth_latency = settings.AUTH_LATENCY_SECONDS if auth_latency is None else auth_latency
        self.transcript = Transcript()
        self._session: Optional[Session] = None
        # Bumped by every sign-in attempt and every logout
        self._auth_generation = 0

        store.subscribe(self._on_account_changed)

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def current_account(self) -> Optional[Account]:
        return self._session.account if self._session else None

    @property
    def limits(self) -> Optional[Limits]:
        """Entitlements of the signed-in account, derived fresh on every call."""
        account = self.current_account
        return limits_for(account.role) if account else None

    async def login(self, email: str, secret: str) -> Session:
        """
        Authenticate with email and secret.

        Raises:
            InvalidInput: Blank field or malformed email
            InvalidCredentials: Unknown email or wrong secret (indistinguishable)
        """
        if not isinstance(email, str) or not isinstance(secret, str) \
                or not email.strip() or not secret.strip():
            raise InvalidInput("Please fill in all fields")

        if not is_valid_email(email.strip()):
            raise InvalidInput("Please enter a valid email address")

        logger.info(f"Login attempt: {email.strip().lower()}")

        async with self._authenticating():
            account = self.store.find_by_email(email)

            # Always run one bcrypt check so a missing account costs the same
            secret_hash = account.secret_hash if account else dummy_hash()
            secret_ok = verify_secret(secret, secret_hash)

            if account is None or not secret_ok:
                logger.warning("Login failed: invalid credentials")
                raise InvalidCredentials()

        session = self._establish(account)
        logger.info(f"User {account.email} logged in as {account.role.value}")
        return session

    async def signup(self, email: str, secret: str, display_name: str) -> Session:
        """
        Register a new explorer account and sign it in.

        Raises:
            InvalidInput: Blank field, malformed email or weak secret
            DuplicateAccount: Email already registered
        """
        logger.info(f"Registration: {email.strip().lower() if isinstance(email, str) else email}")

        async with self._authenticating():
            account = self.store.create(email, secret, display_name)

        return self._establish(account)

    def restore(self, persisted_token: Optional[str], persisted_account_id: Optional[str]) -> Optional[Session]:
        """
        Resume a session from a persisted record.

        Returns None, and clears the persisted record, when the token is
        absent, malformed, expired or issued for another account, or when
        the account no longer exists.
        """
        if self._session is not None:
            raise InvalidTransition("A session is already active")
        if self.view.state == ViewState.AUTHENTICATING:
            raise InvalidTransition("Sign-in already in progress")

        if not isinstance(persisted_token, str) or not persisted_token \
                or not isinstance(persisted_account_id, str) or not persisted_account_id:
            return self._discard_restoration("record incomplete")

        try:
            payload = verify_session_token(persisted_token)
        except jwt.ExpiredSignatureError:
            return self._discard_restoration("token expired")
        except jwt.InvalidTokenError as e:
            return self._discard_restoration(f"token invalid ({e})")

        if payload.get("sub") != persisted_account_id:
            return self._discard_restoration("token issued for another account")

        account = self.store.get_by_id(persisted_account_id)
        if account is None:
            return self._discard_restoration("account no longer exists")

        session = self._start(account, persisted_token)
        logger.info(f"Session restored for {account.email}")
        return session

    def restore_from_store(self) -> Optional[Session]:
        """Read the restoration store once (startup) and try to resume."""
        record = self.restoration_store.load()
        if record is None:
            # Nothing usable on disk; make sure a corrupt file does not linger
            self.restoration_store.clear()
            return None
        return self.restore(record.session_token, record.account_id)

    def logout(self) -> None:
        """End the session. Safe to call with no active session."""
        session = self._session
        self._session = None
        self._auth_generation += 1

        if session is not None:
            session.active = False

        self.transcript.clear()
        self.restoration_store.clear()

        if self.view.state != ViewState.UNAUTHENTICATED:
            self.view.logout()

        if session is not None:
            logger.info(f"User {session.account.email} logged out")

    def _establish(self, account: Account) -> Session:
        token = create_session_token(account.id)
        session = self._start(account, token)

        try:
            self.restoration_store.save(RestorationRecord(session_token=token, account_id=account.id))
        except OSError as e:
            logger.error(f"Failed to persist restoration record: {e}")

        return session

    def _start(self, account: Account, token: str) -> Session:
        session = Session(
            account=account,
            token=token,
            started_at=datetime.now(timezone.utc)
        )
        self.transcript.clear()
        self._session = session
        self.view.authenticated()
        return session

    def _discard_restoration(self, reason: str) -> None:
        logger.warning(f"Session restoration failed: {reason}")
        self.restoration_store.clear()
        return None

    @asynccontextmanager
    async def _authenticating(self):
        """Hold the view in authenticating, with the busy indicator, for the
        simulated round trip. Any failure inside returns it to unauthenticated."""
        self.view.begin_authentication()
        self._auth_generation += 1
        generation = self._auth_generation
        self.view.set_busy(True)
        try:
            await asyncio.sleep(self.auth_latency)
            if generation != self._auth_generation:
                # logout() was called while we were waiting; a newer attempt
                # may own the view by now
                raise InvalidTransition("Sign-in was cancelled")
            yield
        except (AssistantError, asyncio.CancelledError):
            self._authentication_failed(generation)
            raise
        except Exception as e:
            logger.error(f"Unexpected authentication error: {e}")
            self._authentication_failed(generation)
            raise
        finally:
            if generation == self._auth_generation:
                self.view.set_busy(False)

    def _authentication_failed(self, generation: int) -> None:
        if generation == self._auth_generation and self.view.state == ViewState.AUTHENTICATING:
            self.view.authentication_failed()

    def _on_account_changed(self, account: Account, deleted: bool) -> None:
        session = self._session
        if session is None or session.account is not account:
            return

        if deleted:
            logger.warning(f"Account {account.email} deleted, ending its session")
            self.logout()
            return

        self.view.revalidate(limits_for(account.role))

