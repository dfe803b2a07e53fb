"""Domain entities"""
from compliance_assistant.domain.account import Account, Role, migrate_legacy_role
from compliance_assistant.domain.session import Session
from compliance_assistant.domain.transcript import Origin, Transcript, TranscriptEntry
from compliance_assistant.domain.view_state import ViewState

__all__ = [
    "Account",
    "Role",
    "migrate_legacy_role",
    "Session",
    "Origin",
    "Transcript",
    "TranscriptEntry",
    "ViewState",
]
