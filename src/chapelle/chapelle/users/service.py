from __future__ import annotations

import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_text, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role, SessionState
from ..core.exceptions import EmailInUseError, InvalidCredentialsError, ValidationError, WeakPasswordError
from .gate import SessionChange, SessionEvents, state_for_role
from .model import SessionUser
from .repository import UserAccountRepository

logger = logging.getLogger(__name__)

SIGN_UP_ERROR = "Erreur lors de l'inscription"
SIGN_IN_ERROR = "Erreur lors de la connexion"


class AuthService:
    """Use case: sign up, sign in, sign out and resolve the current session."""

    def __init__(self, accounts: UserAccountRepository, events: Optional[SessionEvents] = None):
        self._accounts = accounts
        self.events = events or SessionEvents()

    def sign_up(self, *, name: str, email: str, password: str, role: Role | str = Role.ENUMERATOR) -> str:
        email = require_non_empty(email, "Email").lower()
        if password is None or len(password) < MIN_PASSWORD_LENGTH:
            raise WeakPasswordError(f"Le mot de passe doit contenir au moins {MIN_PASSWORD_LENGTH} caractères")

        try:
            role = Role(role)
        except ValueError:
            raise ValidationError("Rôle invalide")

        if self._accounts.get_by_email(email):
            raise EmailInUseError("Cet email est déjà utilisé")

        account_id = self._accounts.create_account(
            name=optional_text(name) or "",
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
        )
        logger.info("Account created: %s (%s)", email, role.value)
        return account_id

    def sign_in(self, email: str, password: str) -> SessionUser:
        email = (email or "").strip().lower()
        account = self._accounts.get_by_email(email) if email else None
        if not account:
            raise InvalidCredentialsError("Email ou mot de passe incorrect")

        try:
            ok = check_password_hash(account.password_hash, password or "")
        except ValueError:
            # hash corrompu ou placeholder
            ok = False
        if not ok:
            raise InvalidCredentialsError("Email ou mot de passe incorrect")

        user = SessionUser(
            account_id=account.account_id,
            display_name=account.name or account.email,
            role=account.role,
            state=state_for_role(account.role),
        )
        self.events.publish(SessionChange(user.state, user.account_id))
        return user

    def sign_out(self, account_id: Optional[str]) -> None:
        self.events.publish(SessionChange(SessionState.UNAUTHENTICATED, account_id))

    def resolve_session(self, account_id: Optional[str], *, email: Optional[str] = None) -> SessionUser:
        """Map a session identity to its role by reading the account record.

        No session -> unauthenticated. A missing or unreadable account keeps the
        session but falls back to the enumerator role.
        """

        if not account_id:
            return SessionUser(account_id="", display_name="", role=Role.ENUMERATOR, state=SessionState.UNAUTHENTICATED)

        fallback_name = email or "Utilisateur"
        try:
            account = self._accounts.get_by_id(account_id)
        except Exception:
            logger.exception("Could not read account %s, defaulting to enumerator", account_id)
            account = None

        if not account:
            return SessionUser(
                account_id=account_id,
                display_name=fallback_name,
                role=Role.ENUMERATOR,
                state=SessionState.AUTHENTICATED_ENUMERATOR,
            )

        return SessionUser(
            account_id=account.account_id,
            display_name=account.name or account.email or fallback_name,
            role=account.role,
            state=state_for_role(account.role),
        )
