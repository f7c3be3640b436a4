from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import coerce_date, coerce_datetime
from ..core.exceptions import MalformedRecordError

# Noms de champs historiques (anciens documents "fideles") -> colonnes actuelles.
_LEGACY_KEYS = {
    "nom": "last_name",
    "prenom": "first_name",
    "dateAdhesion": "joined_on",
    "fonction": "role_tag",
    "service": "ministry",
    "telephone": "phone",
    "lieuResidence": "residence",
    "createdAt": "created_at",
    "id": "member_id",
}


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value or None


@dataclass(frozen=True)
class Member:
    """Entité métier : fidèle."""

    member_id: str
    last_name: str
    first_name: str
    joined_on: date
    photo: str = ""
    role_tag: Optional[str] = None
    ministry: Optional[str] = None
    phone: Optional[str] = None
    residence: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def initials(self) -> str:
        first = self.first_name[:1] or "?"
        last = self.last_name[:1] or "?"
        return f"{first}{last}".upper()

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Member":
        data = {_LEGACY_KEYS.get(k, k): v for k, v in record.items()}

        member_id = _clean(data.get("member_id"))
        last_name = _clean(data.get("last_name"))
        first_name = _clean(data.get("first_name"))
        if not member_id or not last_name or not first_name:
            raise MalformedRecordError(f"member without id or name: {record!r}")

        try:
            joined_on = coerce_date(data.get("joined_on"))
        except (TypeError, ValueError) as e:
            raise MalformedRecordError(f"member {member_id}: bad join date {data.get('joined_on')!r}") from e

        created_raw = data.get("created_at")
        try:
            created_at = coerce_datetime(created_raw) if created_raw else None
        except (TypeError, ValueError):
            created_at = None

        return cls(
            member_id=member_id,
            last_name=last_name,
            first_name=first_name,
            joined_on=joined_on,
            photo=_clean(data.get("photo")) or "",
            role_tag=_clean(data.get("role_tag")),
            ministry=_clean(data.get("ministry")),
            phone=_clean(data.get("phone")),
            residence=_clean(data.get("residence")),
            created_at=created_at,
        )


@dataclass(frozen=True)
class MemberForm:
    """Raw form input for create/update (not yet validated)."""

    last_name: str = ""
    first_name: str = ""
    joined_on: str = ""
    role_tag: str = ""
    ministry: str = ""
    phone: str = ""
    residence: str = ""


@dataclass(frozen=True)
class PhotoUpload:
    filename: str
    content_type: str
    data: bytes
