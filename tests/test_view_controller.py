"""Unit tests for the view controller state machine."""
import pytest

from compliance_assistant.domain.account import Role
from compliance_assistant.domain.view_state import ViewState
from compliance_assistant.exceptions import Forbidden, InvalidTransition
from compliance_assistant.services.entitlement_policy import limits_for
from compliance_assistant.services.view_controller import ViewController


ADMIN = limits_for(Role.ADMIN)
EXPLORER = limits_for(Role.EXPLORER)


def conversing():
    view = ViewController()
    view.authenticated()
    return view


def test_starts_unauthenticated():
    view = ViewController()

    assert view.state == ViewState.UNAUTHENTICATED
    assert view.busy is False


def test_login_flow():
    view = ViewController()

    assert view.begin_authentication() == ViewState.AUTHENTICATING
    assert view.authenticated() == ViewState.CONVERSING


def test_failed_login_returns_to_unauthenticated():
    view = ViewController()
    view.begin_authentication()

    assert view.authentication_failed() == ViewState.UNAUTHENTICATED


def test_restore_skips_authenticating():
    view = ViewController()

    assert view.authenticated() == ViewState.CONVERSING


def test_admin_round_trip():
    view = conversing()

    assert view.request_admin(ADMIN) == ViewState.ADMINISTERING
    assert view.back() == ViewState.CONVERSING


def test_request_admin_without_capability_is_forbidden():
    view = conversing()

    with pytest.raises(Forbidden):
        view.request_admin(EXPLORER)

    assert view.state == ViewState.CONVERSING


def test_request_admin_without_limits_is_forbidden():
    view = conversing()

    with pytest.raises(Forbidden):
        view.request_admin(None)


def test_request_admin_from_wrong_state():
    view = ViewController()

    with pytest.raises(InvalidTransition):
        view.request_admin(ADMIN)

    assert view.state == ViewState.UNAUTHENTICATED


def test_upgrade_complete_and_cancel():
    view = conversing()

    assert view.request_upgrade() == ViewState.UPGRADING
    assert view.complete_upgrade() == ViewState.CONVERSING

    view.request_upgrade()
    assert view.cancel_upgrade() == ViewState.CONVERSING


@pytest.mark.parametrize("event", ["authenticated", "back", "complete_upgrade", "cancel_upgrade"])
def test_invalid_transitions_leave_state_unchanged(event):
    view = conversing()
    view.request_admin(ADMIN)
    if event == "back":
        view.back()

    with pytest.raises(InvalidTransition):
        getattr(view, event)()

    assert view.state in (ViewState.ADMINISTERING, ViewState.CONVERSING)


def test_cannot_upgrade_from_admin_screen():
    view = conversing()
    view.request_admin(ADMIN)

    with pytest.raises(InvalidTransition):
        view.request_upgrade()

    assert view.state == ViewState.ADMINISTERING


@pytest.mark.parametrize("setup", [
    lambda v: None,
    lambda v: v.begin_authentication(),
    lambda v: v.authenticated(),
    lambda v: (v.authenticated(), v.request_admin(ADMIN)),
    lambda v: (v.authenticated(), v.request_upgrade()),
])
def test_logout_from_any_state(setup):
    view = ViewController()
    setup(view)
    view.set_busy(True)

    assert view.logout() == ViewState.UNAUTHENTICATED
    assert view.busy is False


def test_can():
    view = conversing()

    assert view.can("request_upgrade")
    assert not view.can("complete_upgrade")
    assert not view.can("no_such_event")


def test_revalidate_leaves_admin_screen_when_capability_lost():
    view = conversing()
    view.request_admin(ADMIN)

    assert view.revalidate(EXPLORER) == ViewState.CONVERSING


def test_revalidate_keeps_admin_screen_for_admins():
    view = conversing()
    view.request_admin(ADMIN)

    assert view.revalidate(ADMIN) == ViewState.ADMINISTERING


def test_revalidate_elsewhere_is_noop():
    view = conversing()

    assert view.revalidate(EXPLORER) == ViewState.CONVERSING


def test_listeners_receive_changes():
    view = ViewController()
    changes = []
    view.subscribe(lambda prev, cur: changes.append((prev, cur)))

    view.begin_authentication()
    view.authenticated()
    view.logout()

    assert changes == [
        (ViewState.UNAUTHENTICATED, ViewState.AUTHENTICATING),
        (ViewState.AUTHENTICATING, ViewState.CONVERSING),
        (ViewState.CONVERSING, ViewState.UNAUTHENTICATED),
    ]


def test_logout_when_already_unauthenticated_does_not_notify():
    view = ViewController()
    changes = []
    view.subscribe(lambda prev, cur: changes.append((prev, cur)))

    view.logout()

    assert changes == []
