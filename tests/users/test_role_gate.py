from __future__ import annotations

from src.chapelle.chapelle.core.enums import Role, SessionState
from src.chapelle.chapelle.users.gate import (
    LOGIN_NOTICE,
    PASTOR_ONLY_NOTICES,
    RoleGate,
    SessionChange,
    SessionEvents,
    state_for_role,
)
from src.chapelle.chapelle.users.model import SessionUser


def _user(role: Role) -> SessionUser:
    return SessionUser(account_id="u1", display_name="U", role=role, state=state_for_role(role))


def test_unauthenticated_goes_to_login():
    gate = RoleGate()
    anonymous = SessionUser(account_id="", display_name="", role=Role.ENUMERATOR, state=SessionState.UNAUTHENTICATED)

    for user in (None, anonymous):
        decision = gate.check(user)
        assert not decision.allowed
        assert decision.redirect_endpoint == "login"
        assert decision.notice == LOGIN_NOTICE


def test_enumerator_is_sent_back_to_dashboard_from_pastor_views():
    decision = RoleGate().check(_user(Role.ENUMERATOR), pastor_only=True, area="statistics")

    assert not decision.allowed
    assert decision.redirect_endpoint == "dashboard"
    assert decision.notice == PASTOR_ONLY_NOTICES["statistics"]
    assert decision.notice.startswith("Accès refusé : ")


def test_enumerator_may_open_shared_views():
    assert RoleGate().check(_user(Role.ENUMERATOR)).allowed


def test_pastor_may_open_everything():
    gate = RoleGate()

    assert gate.check(_user(Role.PASTOR), pastor_only=True, area="members").allowed
    assert gate.check(_user(Role.PASTOR)).allowed


def test_unknown_role_maps_to_its_own_state():
    assert state_for_role(None) == SessionState.AUTHENTICATED_UNKNOWN_ROLE


def test_cancelled_subscription_stops_notifications_and_cancel_is_idempotent():
    events = SessionEvents()
    seen = []
    sub = events.subscribe(seen.append)

    events.publish(SessionChange(SessionState.AUTHENTICATED_PASTOR, "u1"))
    sub.cancel()
    sub.cancel()
    events.publish(SessionChange(SessionState.UNAUTHENTICATED, "u1"))

    assert len(seen) == 1
    assert not sub.active
    assert events.listener_count == 0


def test_subscription_as_context_manager():
    events = SessionEvents()

    with events.subscribe(lambda change: None) as sub:
        assert events.listener_count == 1
        assert sub.active

    assert events.listener_count == 0


def test_failing_listener_does_not_block_others():
    events = SessionEvents()
    seen = []

    def broken(change):
        raise RuntimeError("boom")

    events.subscribe(broken)
    events.subscribe(seen.append)
    events.publish(SessionChange(SessionState.UNAUTHENTICATED))

    assert len(seen) == 1
