"""Demo account seeding"""
import logging
from datetime import datetime, timezone
from typing import List

from compliance_assistant.domain.account import Account, Role
from compliance_assistant.exceptions import DuplicateAccount
from compliance_assistant.repositories.credential_store import InMemoryCredentialStore
from compliance_assistant.utils.crypto import hash_secret

logger = logging.getLogger(__name__)

# (id, email, secret, display name, role, usage)
DEMO_ACCOUNTS = [
    ("user_demo_admin", "admin@example.com", "admin123", "Admin User", Role.ADMIN, 0),
    ("user_demo_explorer", "explorer@example.com", "explorer123", "Explorer User", Role.EXPLORER, 2),
    ("user_demo_pro", "pro@example.com", "pro123", "Pro User", Role.PRO, 15),
]


def seed_demo_accounts(store: InMemoryCredentialStore) -> List[Account]:
    """Insert the demo accounts. Ones whose email is already taken are skipped."""
    created = []
    for account_id, email, secret, display_name, role, usage in DEMO_ACCOUNTS:
        account = Account(
            id=account_id,
            email=email,
            display_name=display_name,
            role=role,
            created_at=datetime.now(timezone.utc),
            secret_hash=hash_secret(secret),
            usage_count=usage,
        )
        try:
            created.append(store.insert(account))
        except DuplicateAccount:
            logger.info(f"Demo account {email} already exists, skipping")

    logger.info(f"Seeded {len(created)} demo accounts")
    return created
