from __future__ import annotations

from collections import Counter, defaultdict
from datetime import date
from typing import Iterable, Optional

from ..attendance.model import AttendanceMark
from ..attendance.service import AttendanceService
from ..common.datetime_utils import first_day_of_month, now_local
from ..core.constants import UNDEFINED_BUCKET
from ..members.model import Member
from ..members.service import MemberService
from .model import DateTally, Statistics


def compute_statistics(members: Iterable[Member], marks: Iterable[AttendanceMark], today: date) -> Statistics:
    members = list(members)
    marks = list(marks)
    total_members = len(members)

    month_start = first_day_of_month(today)
    new_this_month = sum(1 for m in members if m.joined_on >= month_start)

    counts: dict[date, list[int]] = defaultdict(lambda: [0, 0])
    for mark in marks:
        counts[mark.service_date][0 if mark.present else 1] += 1
    per_date = {d: DateTally(present=p, absent=a, total=p + a) for d, (p, a) in counts.items()}

    if per_date and total_members:
        rates = [tally.present * 100 / total_members for tally in per_date.values()]
        average_rate = sum(rates) / len(rates)
    else:
        average_rate = 0.0

    present_per_member = Counter(mark.member_id for mark in marks if mark.present)
    by_role: dict[str, int] = {}
    by_ministry: dict[str, int] = {}
    for m in members:
        n = present_per_member.get(m.member_id, 0)
        role = m.role_tag or UNDEFINED_BUCKET
        ministry = m.ministry or UNDEFINED_BUCKET
        by_role[role] = by_role.get(role, 0) + n
        by_ministry[ministry] = by_ministry.get(ministry, 0) + n

    return Statistics(
        total_members=total_members,
        new_this_month=new_this_month,
        average_rate=average_rate,
        last_service_date=max(per_date) if per_date else None,
        per_date=per_date,
        present_by_role=by_role,
        present_by_ministry=by_ministry,
    )


class StatisticsService:
    def __init__(self, members: MemberService, attendance: AttendanceService):
        self._members = members
        self._attendance = attendance

    def current(self, *, today: Optional[date] = None) -> Statistics:
        return compute_statistics(
            self._members.list_members(),
            self._attendance.all_marks(),
            today or now_local().date(),
        )
