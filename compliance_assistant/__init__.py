"""Compliance assistant: accounts, sessions, entitlements and chat exchange."""

__version__ = "1.0.0"
