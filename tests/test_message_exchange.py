"""Unit tests for MessageExchange."""
import asyncio

import pytest

from compliance_assistant.config import settings
from compliance_assistant.domain.account import Role
from compliance_assistant.domain.transcript import Origin
from compliance_assistant.exceptions import (
    EmptyMessage,
    ExchangeInProgress,
    NotAuthenticated,
    QuotaExceeded,
    TransportFailure,
)
from compliance_assistant.services.message_exchange import MessageExchange
from tests.conftest import FakeResponder


async def wait_until_in_flight(exchange):
    while not exchange.in_flight:
        await asyncio.sleep(0)


class TestSend:
    """Tests for the successful path and its preconditions."""

    @pytest.mark.asyncio
    async def test_successful_exchange(self, exchange, sessions, responder, make_account, sign_in):
        account = make_account()
        sign_in(account)

        entry = await exchange.send("  What does Part 11 require?  ")

        assert entry.origin == Origin.ASSISTANT
        assert entry.text == responder.text
        assert [(e.origin, e.text) for e in sessions.transcript] == [
            (Origin.USER, "What does Part 11 require?"),
            (Origin.ASSISTANT, responder.text),
        ]
        assert account.usage_count == 1
        assert sessions.view.busy is False

    @pytest.mark.asyncio
    async def test_responder_receives_identity(self, exchange, responder, make_account, sign_in):
        account = make_account(role=Role.PRO)
        sign_in(account)

        await exchange.send("hello")

        message, metadata = responder.calls[0]
        assert message == "hello"
        assert metadata["user_role"] == "pro"
        assert metadata["user_id"] == account.id
        assert "timestamp" in metadata

    @pytest.mark.asyncio
    async def test_requires_session(self, exchange, responder):
        with pytest.raises(NotAuthenticated):
            await exchange.send("hello")

        assert responder.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", None, "<script>alert(1)</script>"])
    async def test_empty_message(self, exchange, sessions, responder, make_account, sign_in, text):
        account = make_account()
        sign_in(account)

        with pytest.raises(EmptyMessage):
            await exchange.send(text)

        assert len(sessions.transcript) == 0
        assert responder.calls == []
        assert account.usage_count == 0

    @pytest.mark.asyncio
    async def test_script_is_stripped_before_sending(self, exchange, sessions, responder, make_account, sign_in):
        sign_in(make_account())

        await exchange.send("Is <script>x()</script>this compliant?")

        assert responder.calls[0][0] == "Is this compliant?"
        assert sessions.transcript.entries[0].text == "Is this compliant?"

    @pytest.mark.asyncio
    async def test_reply_is_sanitized(self, sessions, store, make_account, sign_in):
        sign_in(make_account())
        exchange = MessageExchange(sessions, store, FakeResponder(text="Safe <script>bad()</script>answer "))

        entry = await exchange.send("hello")

        assert entry.text == "Safe answer"


class TestQuota:
    """Quota enforcement per role."""

    @pytest.mark.asyncio
    async def test_explorer_at_ceiling_is_refused(self, exchange, sessions, responder, make_account, sign_in):
        account = make_account(usage=settings.EXPLORER_QUERY_LIMIT)
        sign_in(account)

        with pytest.raises(QuotaExceeded):
            await exchange.send("hello")

        assert len(sessions.transcript) == 0
        assert responder.calls == []
        assert account.usage_count == settings.EXPLORER_QUERY_LIMIT

    @pytest.mark.asyncio
    async def test_explorer_last_query_then_refused(self, exchange, make_account, sign_in):
        account = make_account(usage=settings.EXPLORER_QUERY_LIMIT - 1)
        sign_in(account)

        await exchange.send("last one")

        assert account.usage_count == settings.EXPLORER_QUERY_LIMIT
        with pytest.raises(QuotaExceeded):
            await exchange.send("one more")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", [Role.PRO, Role.ADMIN])
    async def test_paid_roles_are_unlimited(self, exchange, make_account, sign_in, role):
        account = make_account(role=role, usage=1000)
        sign_in(account)

        await exchange.send("hello")

        assert account.usage_count == 1001

    @pytest.mark.asyncio
    async def test_upgrade_lifts_the_ceiling_immediately(self, exchange, store, make_account, sign_in):
        account = make_account(usage=settings.EXPLORER_QUERY_LIMIT)
        sign_in(account)

        store.update_role(account.id, Role.PRO)
        await exchange.send("hello")

        assert account.usage_count == settings.EXPLORER_QUERY_LIMIT + 1


class TestFailures:
    """A failed exchange adds a notice and consumes no quota."""

    @pytest.mark.asyncio
    async def test_transport_failure(self, sessions, store, make_account, sign_in):
        account = make_account()
        sign_in(account)
        exchange = MessageExchange(sessions, store, FakeResponder(error=TransportFailure()))

        entry = await exchange.send("hello")

        assert entry.text == settings.FAILURE_NOTICE
        assert [e.origin for e in sessions.transcript] == [Origin.USER, Origin.ASSISTANT]
        assert account.usage_count == 0
        assert sessions.view.busy is False

    @pytest.mark.asyncio
    async def test_unexpected_error(self, sessions, store, make_account, sign_in):
        account = make_account()
        sign_in(account)
        exchange = MessageExchange(sessions, store, FakeResponder(error=RuntimeError("boom")))

        entry = await exchange.send("hello")

        assert entry.text == settings.FAILURE_NOTICE
        assert account.usage_count == 0

    @pytest.mark.asyncio
    async def test_timeout(self, sessions, store, make_account, sign_in):
        account = make_account()
        sign_in(account)
        exchange = MessageExchange(sessions, store, FakeResponder(delay=1.0), timeout=0.05)

        entry = await exchange.send("hello")

        assert entry.text == settings.FAILURE_NOTICE
        assert account.usage_count == 0
        assert exchange.in_flight is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", None])
    async def test_blank_reply(self, sessions, store, make_account, sign_in, text):
        account = make_account()
        sign_in(account)
        exchange = MessageExchange(sessions, store, FakeResponder(text=text))

        entry = await exchange.send("hello")

        assert entry.text == settings.FAILURE_NOTICE
        assert account.usage_count == 0

    @pytest.mark.asyncio
    async def test_custom_failure_notice(self, sessions, store, make_account, sign_in):
        sign_in(make_account())
        exchange = MessageExchange(
            sessions, store, FakeResponder(error=TransportFailure()), failure_notice="Try later"
        )

        entry = await exchange.send("hello")

        assert entry.text == "Try later"


class TestConcurrency:
    """One exchange in flight per session."""

    @pytest.mark.asyncio
    async def test_second_send_while_pending_is_rejected(self, sessions, store, make_account, sign_in):
        account = make_account()
        sign_in(account)
        gate = asyncio.Event()
        responder = FakeResponder(gate=gate)
        exchange = MessageExchange(sessions, store, responder, timeout=1.0)

        first = asyncio.create_task(exchange.send("first"))
        await wait_until_in_flight(exchange)

        assert sessions.view.busy is True
        with pytest.raises(ExchangeInProgress):
            await exchange.send("second")

        gate.set()
        await first

        assert len(responder.calls) == 1
        assert account.usage_count == 1
        assert [e.text for e in sessions.transcript][0] == "first"
        assert len(sessions.transcript) == 2
        assert sessions.view.busy is False

    @pytest.mark.asyncio
    async def test_send_allowed_after_previous_completes(self, exchange, make_account, sign_in):
        account = make_account()
        sign_in(account)

        await exchange.send("first")
        await exchange.send("second")

        assert account.usage_count == 2

    @pytest.mark.asyncio
    async def test_logout_while_pending_discards_reply(self, sessions, store, make_account, sign_in):
        account = make_account()
        sign_in(account)
        gate = asyncio.Event()
        exchange = MessageExchange(sessions, store, FakeResponder(gate=gate), timeout=1.0)

        pending = asyncio.create_task(exchange.send("hello"))
        await wait_until_in_flight(exchange)
        sessions.logout()
        gate.set()
        await pending

        assert len(sessions.transcript) == 0
        assert account.usage_count == 0
        assert sessions.view.busy is False

    @pytest.mark.asyncio
    async def test_reply_not_added_to_next_session(self, sessions, store, make_account, sign_in):
        first_account = make_account()
        second_account = make_account()
        sign_in(first_account)
        gate = asyncio.Event()
        exchange = MessageExchange(sessions, store, FakeResponder(gate=gate), timeout=1.0)

        pending = asyncio.create_task(exchange.send("hello"))
        await wait_until_in_flight(exchange)
        sessions.logout()
        sign_in(second_account)
        gate.set()
        await pending

        assert len(sessions.transcript) == 0
        assert first_account.usage_count == 0
        assert second_account.usage_count == 0
        assert exchange.in_flight is False
