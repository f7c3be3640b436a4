from __future__ import annotations

from functools import wraps

from flask import flash, g, redirect, session, url_for

from .gate import RoleGate
from .service import AuthService


def current_user():
    return getattr(g, "current_user", None)


def build_guards(auth_service: AuthService, gate: RoleGate | None = None):
    """Return (login_required, pastor_required) decorators bound to the auth service."""

    gate = gate or RoleGate()

    def _resolve():
        user = auth_service.resolve_session(session.get("user_id"), email=session.get("email"))
        g.current_user = user
        return user

    def _guard(view, *, pastor_only: bool, area: str = ""):
        @wraps(view)
        def wrapper(*args, **kwargs):
            decision = gate.check(_resolve(), pastor_only=pastor_only, area=area)
            if not decision.allowed:
                flash(decision.notice, "warning")
                return redirect(url_for(decision.redirect_endpoint))
            return view(*args, **kwargs)

        return wrapper

    def login_required(view):
        return _guard(view, pastor_only=False)

    def pastor_required(area: str = ""):
        def decorator(view):
            return _guard(view, pastor_only=True, area=area)

        return decorator

    return login_required, pastor_required
