from __future__ import annotations

from datetime import date, timedelta

import pytest

from src.chapelle.chapelle.attendance.model import AttendanceMark, presence_status
from src.chapelle.chapelle.attendance.service import AttendanceService, day_summary
from src.chapelle.chapelle.core.enums import PresenceStatus
from src.chapelle.chapelle.core.exceptions import ValidationError


def test_marking_twice_keeps_one_mark_and_last_write_wins(attendance_repo, members_repo, fixed_now):
    svc = AttendanceService(attendance_repo, members_repo)
    sunday = fixed_now.date()

    svc.mark("awa", sunday, True, now=fixed_now)
    later = fixed_now + timedelta(minutes=5)
    svc.mark("awa", sunday, False, now=later)

    marks = attendance_repo.list_all()
    assert len(marks) == 1
    assert marks[0].present is False
    assert marks[0].marked_at == later


def test_mark_returns_the_persisted_mark(attendance_repo, members_repo, fixed_now):
    svc = AttendanceService(attendance_repo, members_repo)

    mark = svc.mark("jean", fixed_now.date(), True, now=fixed_now)

    assert mark.key == "2025-10-12_jean"
    assert svc.marks_for_date(fixed_now.date()) == {"jean": mark}


def test_mark_without_member_is_rejected(attendance_repo, members_repo, fixed_now):
    svc = AttendanceService(attendance_repo, members_repo)

    with pytest.raises(ValidationError):
        svc.mark("", fixed_now.date(), True)

    assert attendance_repo.list_all() == []


def test_marks_for_date_only_returns_that_date(attendance_repo, members_repo, fixed_now):
    svc = AttendanceService(attendance_repo, members_repo)
    svc.mark("awa", date(2025, 10, 5), True, now=fixed_now)
    svc.mark("awa", date(2025, 10, 12), False, now=fixed_now)

    marks = svc.marks_for_date(date(2025, 10, 5))

    assert list(marks) == ["awa"]
    assert marks["awa"].present is True


def test_available_dates_are_distinct_and_newest_first(attendance_repo, members_repo, fixed_now):
    svc = AttendanceService(attendance_repo, members_repo)
    for d in (date(2025, 9, 28), date(2025, 10, 12), date(2025, 10, 5)):
        svc.mark("awa", d, True, now=fixed_now)
        svc.mark("jean", d, False, now=fixed_now)

    assert svc.available_dates() == [date(2025, 10, 12), date(2025, 10, 5), date(2025, 9, 28)]


@pytest.mark.parametrize(
    "today, expected",
    [
        (date(2025, 10, 12), date(2025, 10, 12)),
        (date(2025, 10, 13), date(2025, 10, 19)),
        (date(2025, 10, 18), date(2025, 10, 19)),
    ],
)
def test_default_date_is_the_upcoming_sunday(today, expected):
    assert AttendanceService.default_date(today) == expected


def test_day_summary_counts_only_listed_members(attendance_repo, members_repo, fixed_now):
    svc = AttendanceService(attendance_repo, members_repo)
    sunday = fixed_now.date()
    svc.mark("awa", sunday, True, now=fixed_now)
    svc.mark("jean", sunday, False, now=fixed_now)
    attendance_repo.upsert(AttendanceMark(service_date=sunday, member_id="deleted-member", present=True, marked_at=fixed_now))

    summary = day_summary(["awa", "jean", "jp", "esther"], svc.marks_for_date(sunday))

    assert (summary.total, summary.present, summary.absent, summary.not_marked) == (4, 1, 1, 2)


def test_presence_status_of_missing_mark():
    assert presence_status(None) == PresenceStatus.NOT_MARKED


def test_mark_for_unknown_member_is_rejected(attendance_repo, members_repo, fixed_now):
    svc = AttendanceService(attendance_repo, members_repo)

    with pytest.raises(ValidationError, match="Fidèle introuvable"):
        svc.mark("ghost", fixed_now.date(), True, now=fixed_now)

    assert attendance_repo.list_all() == []


class _BrokenAttendance:
    def upsert(self, mark):
        raise ConnectionError("store unavailable")


def test_store_failure_propagates_from_mark(members_repo, fixed_now):
    svc = AttendanceService(_BrokenAttendance(), members_repo)

    with pytest.raises(ConnectionError):
        svc.mark("awa", fixed_now.date(), True, now=fixed_now)
