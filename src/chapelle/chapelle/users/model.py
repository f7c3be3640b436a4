from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import coerce_datetime
from ..core.enums import Role, SessionState
from ..core.exceptions import MalformedRecordError


@dataclass(frozen=True)
class UserAccount:
    """Entité métier : compte utilisateur (pasteur ou recenseur).

    Note : objet de données pur, aucune logique d'accès à la base ici.
    """

    account_id: str
    name: str
    email: str
    role: Role
    created_at: Optional[datetime] = None
    password_hash: str = ""

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "UserAccount":
        account_id = record.get("account_id") or record.get("id")
        email = record.get("email")
        if not account_id or not isinstance(email, str):
            raise MalformedRecordError(f"user account without id/email: {record!r}")

        # Un rôle absent ou inconnu retombe sur recenseur.
        try:
            role = Role(record.get("role") or Role.ENUMERATOR.value)
        except ValueError:
            role = Role.ENUMERATOR

        created_raw = record.get("created_at") or record.get("createdAt")
        try:
            created_at = coerce_datetime(created_raw) if created_raw else None
        except (TypeError, ValueError):
            created_at = None

        return cls(
            account_id=str(account_id),
            name=str(record.get("name") or ""),
            email=email,
            role=role,
            created_at=created_at,
            password_hash=str(record.get("password_hash") or ""),
        )


@dataclass(frozen=True)
class SessionUser:
    """What the role gate resolves for the current request."""

    account_id: str
    display_name: str
    role: Role
    state: SessionState

    @property
    def is_pastor(self) -> bool:
        return self.role == Role.PASTOR
