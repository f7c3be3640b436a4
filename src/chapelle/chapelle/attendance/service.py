from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional

from ..common.datetime_utils import now_local, upcoming_sunday
from ..core.exceptions import ValidationError
from ..members.repository import MemberRepository
from .model import AttendanceMark, DaySummary
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


def day_summary(member_ids: Iterable[str], marks: Mapping[str, AttendanceMark]) -> DaySummary:
    """Counts for one date; marks of members no longer listed are ignored."""

    ids = list(member_ids)
    present = sum(1 for mid in ids if mid in marks and marks[mid].present)
    absent = sum(1 for mid in ids if mid in marks and not marks[mid].present)
    total = len(ids)
    return DaySummary(total=total, present=present, absent=absent, not_marked=total - present - absent)


class AttendanceService:
    """Use case: marquer les présences d'un culte."""

    def __init__(self, attendance: AttendanceRepository, members: MemberRepository):
        self._attendance = attendance
        self._members = members

    @staticmethod
    def default_date(today: Optional[date] = None) -> date:
        return upcoming_sunday(today or now_local().date())

    def mark(self, member_id: str, service_date: date, present: bool, *, now: Optional[datetime] = None) -> AttendanceMark:
        if not member_id:
            raise ValidationError("Fidèle manquant")
        if self._members.get_by_id(member_id) is None:
            raise ValidationError("Fidèle introuvable")

        mark = AttendanceMark(
            service_date=service_date,
            member_id=member_id,
            present=bool(present),
            marked_at=now or now_local(),
        )
        # The write completes before the caller sees the mark.
        self._attendance.upsert(mark)
        logger.info("Attendance %s -> %s", mark.key, "present" if mark.present else "absent")
        return mark

    def marks_for_date(self, service_date: date) -> Dict[str, AttendanceMark]:
        return {m.member_id: m for m in self._attendance.list_for_date(service_date)}

    def all_marks(self) -> List[AttendanceMark]:
        return list(self._attendance.list_all())

    def available_dates(self) -> List[date]:
        return sorted(set(self._attendance.list_dates()), reverse=True)
