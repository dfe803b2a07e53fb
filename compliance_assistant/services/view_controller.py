"""View controller: finite-state machine over the top-level screens.

Transitions are validated here and only here. The rendering layer asks
``state`` which screen to draw and ``busy`` whether to show the loading
indicator.
"""
import logging
from typing import Callable, Dict, List, Optional, Set, Tuple

from compliance_assistant.domain.view_state import ViewState
from compliance_assistant.exceptions import Forbidden, InvalidTransition
from compliance_assistant.services.entitlement_policy import Limits

logger = logging.getLogger(__name__)

# Called with (previous, current) after every state change
StateListener = Callable[[ViewState, ViewState], None]

_TRANSITIONS: Dict[str, Tuple[Set[ViewState], ViewState]] = {
    "begin_authentication": ({ViewState.UNAUTHENTICATED}, ViewState.AUTHENTICATING),
    "authenticated": (
        {ViewState.UNAUTHENTICATED, ViewState.AUTHENTICATING},
        ViewState.CONVERSING,
    ),
    "authentication_failed": ({ViewState.AUTHENTICATING}, ViewState.UNAUTHENTICATED),
    "request_admin": ({ViewState.CONVERSING}, ViewState.ADMINISTERING),
    "request_upgrade": ({ViewState.CONVERSING}, ViewState.UPGRADING),
    "complete_upgrade": ({ViewState.UPGRADING}, ViewState.CONVERSING),
    "cancel_upgrade": ({ViewState.UPGRADING}, ViewState.CONVERSING),
    "back": ({ViewState.ADMINISTERING}, ViewState.CONVERSING),
    "logout": (set(ViewState), ViewState.UNAUTHENTICATED),
}


class ViewController:
    """Owns the current ViewState and the busy indicator."""

    def __init__(self, initial: ViewState = ViewState.UNAUTHENTICATED):
        self._state = initial
        self._busy = False
        self._listeners: List[StateListener] = []

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def busy(self) -> bool:
        return self._busy

    def set_busy(self, busy: bool) -> None:
        self._busy = busy

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    def can(self, event: str) -> bool:
        """Whether ``event`` is allowed from the current state."""
        allowed = _TRANSITIONS.get(event)
        return bool(allowed) and self._state in allowed[0]

    def _fire(self, event: str) -> ViewState:
        if event not in _TRANSITIONS:
            raise InvalidTransition(f"Unknown transition: {event}")

        sources, target = _TRANSITIONS[event]
        if self._state not in sources:
            logger.warning(f"Rejected transition '{event}' from {self._state.value}")
            raise InvalidTransition()

        previous = self._state
        self._state = target
        if previous != target:
            logger.debug(f"View {previous.value} -> {target.value} ({event})")
            for listener in list(self._listeners):
                listener(previous, target)
        return target

    def begin_authentication(self) -> ViewState:
        return self._fire("begin_authentication")

    def authenticated(self) -> ViewState:
        return self._fire("authenticated")

    def authentication_failed(self) -> ViewState:
        return self._fire("authentication_failed")

    def request_admin(self, limits: Optional[Limits]) -> ViewState:
        """Enter the admin screen.

        Raises:
            Forbidden: Caller's policy lacks the administrative capability
                (state is left unchanged)
        """
        if not self.can("request_admin"):
            raise InvalidTransition()
        if limits is None or not limits.can_administer:
            logger.warning("Admin screen requested without capability")
            raise Forbidden()
        return self._fire("request_admin")

    def request_upgrade(self) -> ViewState:
        return self._fire("request_upgrade")

    def complete_upgrade(self) -> ViewState:
        return self._fire("complete_upgrade")

    def cancel_upgrade(self) -> ViewState:
        return self._fire("cancel_upgrade")

    def back(self) -> ViewState:
        return self._fire("back")

    def logout(self) -> ViewState:
        self._busy = False
        return self._fire("logout")

    def revalidate(self, limits: Optional[Limits]) -> ViewState:
        """Leave the admin screen if the capability is gone."""
        if self._state == ViewState.ADMINISTERING and not (limits and limits.can_administer):
            logger.info("Administrative capability revoked, leaving admin screen")
            return self._fire("back")
        return self._state
