"""In-memory credential store implementation"""
import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Dict, List, Optional

from compliance_assistant.config import settings
from compliance_assistant.domain.account import Account, Role
from compliance_assistant.exceptions import DuplicateAccount, InvalidInput, NotFound
from compliance_assistant.interfaces.credential_store import AccountListener, ICredentialStore
from compliance_assistant.utils.crypto import hash_secret
from compliance_assistant.utils.sanitize import is_valid_email, normalize_email

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes
MAX_SECRET_BYTES = 72


def _assign(account: Account, **changes) -> None:
    """Change fields of a frozen Account in place (store-only)."""
    for name, value in changes.items():
        object.__setattr__(account, name, value)


class InMemoryCredentialStore(ICredentialStore):
    """
    Process-wide account registry.

    All mutations run under one lock, and change listeners are notified
    inside it, so a session's view of an account never lags the store by
    more than the mutation that changed it.
    """

    def __init__(self):
        self._accounts: Dict[str, Account] = {}
        self._ids_by_email: Dict[str, str] = {}
        self._listeners: List[AccountListener] = []
        self._lock = threading.RLock()

    def subscribe(self, listener: AccountListener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def _notify(self, account: Account, deleted: bool = False) -> None:
        for listener in list(self._listeners):
            listener(account, deleted)

    def find_by_email(self, email: str) -> Optional[Account]:
        """Get account by email (case-insensitive exact match)"""
        if not isinstance(email, str):
            return None
        with self._lock:
            account_id = self._ids_by_email.get(normalize_email(email))
            return self._accounts.get(account_id) if account_id else None

    def get_by_id(self, account_id: str) -> Optional[Account]:
        with self._lock:
            return self._accounts.get(account_id)

    def create(self, email: str, secret: str, display_name: str) -> Account:
        """Create new explorer account.

        Raises:
            InvalidInput: Blank field, bad email syntax, weak or oversized secret
            DuplicateAccount: Email already registered (any case)
        """
        self._validate_new_account(email, secret, display_name)
        normalized = normalize_email(email)
        secret_hash = hash_secret(secret)

        with self._lock:
            if normalized in self._ids_by_email:
                raise DuplicateAccount()

            account = Account(
                id=self._new_id(),
                email=normalized,
                display_name=display_name.strip(),
                role=Role.EXPLORER,
                created_at=datetime.now(timezone.utc),
                secret_hash=secret_hash,
                usage_count=0,
            )
            self._accounts[account.id] = account
            self._ids_by_email[normalized] = account.id

        logger.info(f"New explorer user created: {account.email}")
        return account

    def insert(self, account: Account) -> Account:
        """Insert a fully-formed account (seeding). Email must be unused."""
        with self._lock:
            if account.email in self._ids_by_email or account.id in self._accounts:
                raise DuplicateAccount()
            self._accounts[account.id] = account
            self._ids_by_email[account.email] = account.id
        return account

    def update_role(self, account_id: str, new_role: Role) -> Account:
        """Replace role in place.

        Raises:
            NotFound: No account has this id
        """
        role = Role.parse(new_role)
        if role is None:
            raise InvalidInput(f"Unknown role: {new_role}")

        with self._lock:
            account = self._accounts.get(account_id)
            if not account:
                raise NotFound()
            previous = account.role
            _assign(account, role=role)
            self._notify(account)

        logger.info(f"Role for {account.email} changed {previous.value} -> {role.value}")
        return account

    def increment_usage(self, account_id: str) -> Account:
        """Count one successful exchange.

        Raises:
            NotFound: No account has this id
        """
        with self._lock:
            account = self._accounts.get(account_id)
            if not account:
                raise NotFound()
            _assign(account, usage_count=account.usage_count + 1)
            self._notify(account)
        return account

    def delete(self, account_id: str) -> bool:
        with self._lock:
            account = self._accounts.pop(account_id, None)
            if not account:
                return False
            self._ids_by_email.pop(account.email, None)
            self._notify(account, deleted=True)

        logger.info(f"Deleted account {account.email}")
        return True

    def list_accounts(self) -> List[Account]:
        with self._lock:
            return list(self._accounts.values())

    def _new_id(self) -> str:
        while True:
            account_id = f"user_{uuid.uuid4().hex[:12]}"
            if account_id not in self._accounts:
                return account_id

    @staticmethod
    def _validate_new_account(email, secret, display_name) -> None:
        fields = (email, secret, display_name)
        if any(not isinstance(value, str) or not value.strip() for value in fields):
            raise InvalidInput("Please fill in all fields")

        if not is_valid_email(email.strip()):
            raise InvalidInput("Please enter a valid email address")

        if len(secret) < settings.MIN_SECRET_LENGTH:
            raise InvalidInput(
                f"Password must be at least {settings.MIN_SECRET_LENGTH} characters"
            )

        if len(secret.encode('utf-8')) > MAX_SECRET_BYTES:
            raise InvalidInput(f"Password must be at most {MAX_SECRET_BYTES} bytes")

        if len(display_name.strip()) > settings.MAX_DISPLAY_NAME_LENGTH:
            raise InvalidInput(
                f"Name must be at most {settings.MAX_DISPLAY_NAME_LENGTH} characters"
            )
