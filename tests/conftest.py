"""Pytest configuration and shared fixtures for compliance assistant tests."""
import asyncio
import os
from datetime import datetime, timezone

# Fast bcrypt and no simulated latency; must be set before settings load
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTH_LATENCY_SECONDS", "0")
os.environ.setdefault("UPGRADE_LATENCY_SECONDS", "0")
os.environ.setdefault("SESSION_SECRET_KEY", "test-session-secret-key-with-32-bytes!")

import pytest

from compliance_assistant.domain.account import Account, Role
from compliance_assistant.interfaces.responder import IResponder
from compliance_assistant.repositories.credential_store import InMemoryCredentialStore
from compliance_assistant.repositories.restoration_store import InMemoryRestorationStore
from compliance_assistant.services.message_exchange import MessageExchange
from compliance_assistant.services.session_manager import SessionManager
from compliance_assistant.services.view_controller import ViewController
from compliance_assistant.utils.crypto import hash_secret
from compliance_assistant.utils.tokens import create_session_token


class FakeResponder(IResponder):
    """Responder double. Records calls; can block on a gate, delay or fail."""

    def __init__(self, text="Keep validation records for every batch.", error=None, gate=None, delay=0):
        self.text = text
        self.error = error
        self.gate = gate
        self.delay = delay
        self.calls = []

    async def reply(self, message, metadata=None):
        self.calls.append((message, metadata))
        if self.gate is not None:
            await self.gate.wait()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def store():
    return InMemoryCredentialStore()


@pytest.fixture
def restoration_store():
    return InMemoryRestorationStore()


@pytest.fixture
def view():
    return ViewController()


@pytest.fixture
def sessions(store, restoration_store, view):
    return SessionManager(store, restoration_store, view, auth_latency=0)


@pytest.fixture
def responder():
    return FakeResponder()


@pytest.fixture
def exchange(sessions, store, responder):
    return MessageExchange(sessions, store, responder, timeout=1.0)


@pytest.fixture
def make_account(store):
    """Factory: create an account with the given role and usage."""
    counter = {"n": 0}

    def _make(role=Role.EXPLORER, usage=0, email=None, secret="secret123", display_name="Test User"):
        counter["n"] += 1
        return store.insert(Account(
            id=f"user_test{counter['n']}",
            email=email or f"user{counter['n']}@example.com",
            display_name=display_name,
            role=role,
            created_at=datetime.now(timezone.utc),
            secret_hash=hash_secret(secret),
            usage_count=usage,
        ))

    return _make


@pytest.fixture
def sign_in(sessions):
    """Start a session for an existing account without the login round trip."""

    def _sign_in(account):
        return sessions.restore(create_session_token(account.id), account.id)

    return _sign_in
