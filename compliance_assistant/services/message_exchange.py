"""Quota-gated message exchange with the responder."""
import asyncio
import logging
from datetime import datetime, timezone
from typing import Optional

from compliance_assistant.config import settings
from compliance_assistant.domain.transcript import Origin, TranscriptEntry
from compliance_assistant.exceptions import (
    EmptyMessage,
    ExchangeInProgress,
    NotAuthenticated,
    QuotaExceeded,
    TransportFailure,
)
from compliance_assistant.interfaces.credential_store import ICredentialStore
from compliance_assistant.interfaces.responder import IResponder
from compliance_assistant.services.entitlement_policy import has_quota, limits_for
from compliance_assistant.services.session_manager import SessionManager
from compliance_assistant.utils.sanitize import sanitize_text

logger = logging.getLogger(__name__)


class MessageExchange:
    """
    One send/receive cycle per call, at most one in flight per session.

    The user's entry is appended before the responder is contacted, so the
    input box can be cleared right away. A failed or timed-out reply is
    turned into a notice in the transcript and does not consume quota.
    """

    def __init__(
        self,
        sessions: SessionManager,
        store: ICredentialStore,
        responder: IResponder,
        timeout: float = None,
        failure_notice: str = None
    ):
        self.sessions = sessions
        self.store = store
        self.responder = responder
        self.timeout = settings.RESPONDER_TIMEOUT_SECONDS if timeout is None else timeout
        self.failure_notice = failure_notice or settings.FAILURE_NOTICE

    @property
    def in_flight(self) -> bool:
        session = self.sessions.session
        return bool(session and session.exchange_pending)

    async def send(self, raw_text: str) -> TranscriptEntry:
        """
        Send a message and record the reply.

        Returns:
            The assistant entry (reply or failure notice)

        Raises:
            NotAuthenticated: No active session
            ExchangeInProgress: This session already has a send pending
            EmptyMessage: Nothing left after trimming / sanitizing
            QuotaExceeded: Role ceiling reached
        """
        session = self.sessions.session
        if session is None:
            raise NotAuthenticated()

        if session.exchange_pending:
            logger.warning(f"Rejected overlapping send for {session.account.email}")
            raise ExchangeInProgress()

        if not isinstance(raw_text, str) or not raw_text.strip():
            raise EmptyMessage()

        account = session.account
        limits = limits_for(account.role)
        if not has_quota(limits, account.usage_count):
            logger.info(f"Quota reached for {account.email} ({account.usage_count}/{limits.ceiling})")
            raise QuotaExceeded()

        text = sanitize_text(raw_text)
        if not text:
            raise EmptyMessage()

        transcript = self.sessions.transcript
        session.exchange_pending = True
        self.sessions.view.set_busy(True)

        try:
            transcript.append(Origin.USER, text)

            reply = await self._dispatch(text, {
                "user_role": account.role.value,
                "user_id": account.id,
                "timestamp": datetime.now(timezone.utc).isoformat()
            })

            if not session.active:
                # Logged out (or account removed) while waiting; nothing to record
                logger.warning(f"Discarding reply for ended session of {account.email}")
                return TranscriptEntry(Origin.ASSISTANT, reply or self.failure_notice)

            if reply is None:
                return transcript.append(Origin.ASSISTANT, self.failure_notice)

            entry = transcript.append(Origin.ASSISTANT, reply)
            self.store.increment_usage(account.id)
            return entry

        finally:
            session.exchange_pending = False
            if self.sessions.session is session:
                self.sessions.view.set_busy(False)

    async def _dispatch(self, text: str, metadata: dict) -> Optional[str]:
        """Call the responder. Returns the sanitized reply, None on any failure."""
        try:
            reply = await asyncio.wait_for(
                self.responder.reply(text, metadata),
                timeout=self.timeout
            )
        except asyncio.TimeoutError:
            logger.warning(f"Responder timed out after {self.timeout}s")
            return None
        except TransportFailure as e:
            logger.warning(f"Responder failed: {e}")
            return None
        except Exception as e:
            logger.error(f"Unexpected responder error: {e}")
            return None

        reply = sanitize_text(reply)
        if not reply:
            logger.warning("Responder returned an empty reply")
            return None
        return reply
