"""Session/role gate.

The session state machine, the pastor-only check and the cancellable
session-change subscriptions live here. The check is advisory: it guards
views, not the data store.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..core.enums import Role, SessionState
from .model import SessionUser

logger = logging.getLogger(__name__)

PASTOR_ONLY_NOTICES = {
    "members": "Accès refusé : seuls les pasteurs peuvent gérer les fidèles",
    "statistics": "Accès refusé : seuls les pasteurs peuvent voir les statistiques",
}
DEFAULT_DENIAL_NOTICE = "Accès refusé : réservé aux pasteurs"
LOGIN_NOTICE = "Veuillez vous connecter pour continuer"


def state_for_role(role: Optional[Role]) -> SessionState:
    if role == Role.PASTOR:
        return SessionState.AUTHENTICATED_PASTOR
    if role == Role.ENUMERATOR:
        return SessionState.AUTHENTICATED_ENUMERATOR
    return SessionState.AUTHENTICATED_UNKNOWN_ROLE


@dataclass(frozen=True)
class GateDecision:
    allowed: bool
    redirect_endpoint: Optional[str] = None
    notice: Optional[str] = None


class RoleGate:
    """Decide whether the current session may open a view."""

    def __init__(self, *, login_endpoint: str = "login", landing_endpoint: str = "dashboard"):
        self._login_endpoint = login_endpoint
        self._landing_endpoint = landing_endpoint

    def check(self, user: Optional[SessionUser], *, pastor_only: bool = False, area: str = "") -> GateDecision:
        if user is None or user.state == SessionState.UNAUTHENTICATED:
            return GateDecision(False, self._login_endpoint, LOGIN_NOTICE)

        if pastor_only and user.state != SessionState.AUTHENTICATED_PASTOR:
            return GateDecision(False, self._landing_endpoint, PASTOR_ONLY_NOTICES.get(area, DEFAULT_DENIAL_NOTICE))

        return GateDecision(True)


@dataclass(frozen=True)
class SessionChange:
    state: SessionState
    account_id: Optional[str] = None


Listener = Callable[[SessionChange], None]


class Subscription:
    def __init__(self, events: "SessionEvents", listener: Listener):
        self._events = events
        self._listener: Optional[Listener] = listener

    @property
    def active(self) -> bool:
        return self._listener is not None

    def cancel(self) -> None:
        if self._listener is None:
            return
        self._events._remove(self._listener)
        self._listener = None

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc) -> None:
        self.cancel()


class SessionEvents:
    """Session-change notifications with explicit teardown."""

    def __init__(self):
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self, listener)

    def _remove(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, change: SessionChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("Session listener failed for %s", change.state.value)
