"""Cryptography utilities (bcrypt)"""
import bcrypt

from compliance_assistant.config import settings


def hash_secret(secret: str, rounds: int = None) -> str:
    """Hash secret with bcrypt"""
    secret_bytes = secret.encode('utf-8')
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    hashed = bcrypt.hashpw(secret_bytes, salt)
    return hashed.decode('utf-8')


def verify_secret(plain_secret: str, hashed_secret) -> bool:
    """Verify secret against hash"""
    try:
        if isinstance(hashed_secret, str):
            hashed_secret = hashed_secret.encode('utf-8')
        secret_bytes = plain_secret.encode('utf-8')
        return bcrypt.checkpw(secret_bytes, hashed_secret)
    except (TypeError, ValueError):
        return False


_dummy_hash = None


def dummy_hash() -> str:
    """Hash checked when no account matches, so both login failures cost the same."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_secret("no-such-account")
    return _dummy_hash
