from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Rôle d'un compte utilisateur (valeurs stockées telles quelles en base)."""

    PASTOR = "pasteur"
    ENUMERATOR = "recenseur"


class PresenceStatus(str, Enum):
    """Etat d'un fidèle pour un culte donné."""

    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    NOT_MARKED = "NOT_MARKED"


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED_UNKNOWN_ROLE = "authenticated-unknown-role"
    AUTHENTICATED_PASTOR = "authenticated-pastor"
    AUTHENTICATED_ENUMERATOR = "authenticated-enumerator"
