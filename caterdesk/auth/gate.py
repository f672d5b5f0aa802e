"""
Auth Gate

Process-wide authentication state for the dashboard.

State machine:
    INITIALIZING -> AUTHENTICATED | UNAUTHENTICATED   (initialize)
    AUTHENTICATED -> UNAUTHENTICATED                  (logout / set_current_user(None))
    UNAUTHENTICATED -> AUTHENTICATED                  (set_current_user after a credential check)

The gate also decides, for every view, whether to show a loading indicator,
render, or redirect. The login view and the protected views redirect in
opposite directions depending on state, so no state produces a loop.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from loguru import logger

from caterdesk.auth.session_store import SessionStore
from caterdesk.storage.schemas import Session


class GateState(str, Enum):
    INITIALIZING = "initializing"
    AUTHENTICATED = "authenticated"
    UNAUTHENTICATED = "unauthenticated"


class RouteKind(str, Enum):
    LOADING = "loading"
    RENDER = "render"
    REDIRECT = "redirect"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class RouteDecision:
    kind: RouteKind
    target: Optional[str] = None


LOGIN_VIEW = "login"
HOME_VIEW = "dashboard"
PROTECTED_VIEWS = frozenset({"dashboard", "reviews", "contacts", "menu", "admins"})


class AuthGate:
    """
    Holds the current session and routes views accordingly.

    Usage:
        gate = AuthGate(SessionStore("./data/session.json"))
        gate.initialize()

        decision = gate.resolve("reviews")
        if decision.kind == RouteKind.REDIRECT:
            ...
    """

    def __init__(self, store: SessionStore):
        self.store = store
        self._state = GateState.INITIALIZING
        self._current_user: Optional[Session] = None

    @property
    def state(self) -> GateState:
        return self._state

    @property
    def current_user(self) -> Optional[Session]:
        return self._current_user

    @property
    def is_initializing(self) -> bool:
        return self._state == GateState.INITIALIZING

    @property
    def is_authenticated(self) -> bool:
        return self._state == GateState.AUTHENTICATED

    def initialize(self) -> GateState:
        """Settle the initial state from the session store. Runs once."""
        if not self.is_initializing:
            return self._state

        session = self.store.load()
        self._apply(session)
        logger.info(f"Auth gate initialized: {self._state.value}")
        return self._state

    def set_current_user(self, session: Optional[Session]) -> None:
        """Persist (or clear) the session and update the state together."""
        if session is None:
            self.store.clear()
        else:
            self.store.save(session)
        self._apply(session)

    def logout(self) -> None:
        previous = self._current_user
        self.store.clear()
        self._apply(None)
        if previous is not None:
            logger.info(f"Admin {previous.email} logged out")

    def _apply(self, session: Optional[Session]) -> None:
        self._current_user = session
        self._state = GateState.AUTHENTICATED if session else GateState.UNAUTHENTICATED

    def resolve(self, view: str) -> RouteDecision:
        """Decide what a request for ``view`` should produce."""
        view = (view or "").strip("/")

        if view == "":
            return RouteDecision(RouteKind.REDIRECT, HOME_VIEW)

        if view == LOGIN_VIEW:
            if self.is_authenticated:
                return RouteDecision(RouteKind.REDIRECT, HOME_VIEW)
            return RouteDecision(RouteKind.RENDER)

        if view not in PROTECTED_VIEWS:
            return RouteDecision(RouteKind.NOT_FOUND)

        if self.is_initializing:
            return RouteDecision(RouteKind.LOADING)
        if self.is_authenticated:
            return RouteDecision(RouteKind.RENDER)
        return RouteDecision(RouteKind.REDIRECT, LOGIN_VIEW)
