from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional

from ..common.datetime_utils import coerce_date, coerce_datetime
from ..core.enums import PresenceStatus
from ..core.exceptions import MalformedRecordError


@dataclass(frozen=True)
class AttendanceMark:
    """Entité métier : présence d'un fidèle à un culte.

    Identité = (service_date, member_id); une seule marque par couple.
    """

    service_date: date
    member_id: str
    present: bool
    marked_at: datetime

    @property
    def key(self) -> str:
        return f"{self.service_date.isoformat()}_{self.member_id}"

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "AttendanceMark":
        member_id = record.get("member_id", record.get("fideleId"))
        raw_date = record.get("service_date", record.get("date"))
        raw_present = record.get("present")
        raw_marked = record.get("marked_at", record.get("markedAt"))

        if not member_id or raw_date is None or raw_present is None:
            raise MalformedRecordError(f"attendance mark missing fields: {record!r}")
        if isinstance(raw_present, str):
            raise MalformedRecordError(f"attendance mark with textual present flag: {record!r}")

        try:
            service_date = coerce_date(raw_date)
            marked_at = coerce_datetime(raw_marked) if raw_marked else datetime.combine(service_date, datetime.min.time())
        except (TypeError, ValueError) as e:
            raise MalformedRecordError(f"attendance mark with bad date: {record!r}") from e

        return cls(
            service_date=service_date,
            member_id=str(member_id),
            present=bool(raw_present),
            marked_at=marked_at,
        )


def presence_status(mark: Optional[AttendanceMark]) -> PresenceStatus:
    if mark is None:
        return PresenceStatus.NOT_MARKED
    return PresenceStatus.PRESENT if mark.present else PresenceStatus.ABSENT


@dataclass(frozen=True)
class DaySummary:
    total: int
    present: int
    absent: int
    not_marked: int
