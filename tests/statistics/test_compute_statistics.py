from __future__ import annotations

from datetime import date, datetime

from src.chapelle.chapelle.attendance.model import AttendanceMark
from src.chapelle.chapelle.attendance.service import AttendanceService
from src.chapelle.chapelle.members.service import MemberService
from src.chapelle.chapelle.statistics.service import StatisticsService, compute_statistics
from tests.fakes import FakeStore, InMemoryAttendance, InMemoryMembers, make_member

TODAY = date(2025, 10, 15)


def _mark(d, member_id, present):
    return AttendanceMark(service_date=d, member_id=member_id, present=present, marked_at=datetime(2025, 10, 12, 10))


def test_no_marks_gives_zero_rate_and_no_last_service(members_repo):
    stats = compute_statistics(members_repo.list_all(), [], TODAY)

    assert stats.total_members == 4
    assert stats.average_rate == 0
    assert stats.last_service_date is None
    assert stats.last_service is None
    assert stats.per_date == {}


def test_no_members_gives_zero_rate():
    stats = compute_statistics([], [_mark(date(2025, 10, 12), "ghost", True)], TODAY)

    assert stats.average_rate == 0
    assert stats.total_members == 0


def test_three_present_of_ten_members_is_thirty_percent():
    members = [make_member(f"m{i}", f"P{i}", f"N{i}") for i in range(10)]
    sunday = date(2025, 10, 12)
    marks = [_mark(sunday, f"m{i}", i < 3) for i in range(10)]

    stats = compute_statistics(members, marks, TODAY)

    assert stats.average_rate == 30.0
    assert stats.per_date[sunday].present == 3
    assert stats.per_date[sunday].absent == 7
    assert stats.per_date[sunday].total == 10


def test_average_rate_is_the_mean_over_dates():
    members = [make_member(f"m{i}", f"P{i}", f"N{i}") for i in range(4)]
    marks = [
        _mark(date(2025, 10, 5), "m0", True),
        _mark(date(2025, 10, 5), "m1", True),
        _mark(date(2025, 10, 12), "m0", True),
        _mark(date(2025, 10, 12), "m1", False),
    ]

    stats = compute_statistics(members, marks, TODAY)

    # (50 + 25) / 2
    assert stats.average_rate == 37.5
    assert stats.last_service_date == date(2025, 10, 12)
    assert stats.last_service.present == 1
    assert stats.last_service.total == 2


def test_new_this_month_boundaries():
    members = [
        make_member("a", "A", "A", joined_on=date(2025, 10, 1)),
        make_member("b", "B", "B", joined_on=date(2025, 9, 30)),
        make_member("c", "C", "C", joined_on=date(2025, 10, 15)),
    ]

    stats = compute_statistics(members, [], TODAY)

    assert stats.new_this_month == 2


def test_present_counts_are_bucketed_by_role_and_ministry(members_repo):
    marks = [
        _mark(date(2025, 10, 5), "awa", True),
        _mark(date(2025, 10, 12), "awa", True),
        _mark(date(2025, 10, 12), "jp", True),
        _mark(date(2025, 10, 12), "jean", False),
        _mark(date(2025, 10, 12), "esther", True),
        _mark(date(2025, 10, 12), "removed", True),
    ]

    stats = compute_statistics(members_repo.list_all(), marks, TODAY)

    assert stats.present_by_ministry == {"Louange": 3, "Accueil": 0, "Non défini": 1}
    assert stats.present_by_role == {"Chantre": 2, "Diacre": 0, "Ancien": 1, "Non défini": 1}


def test_statistics_service_reads_through_services(fixed_now):
    members = InMemoryMembers([make_member("awa", "Awa", "Diallo", joined_on=date(2025, 10, 2))])
    attendance = InMemoryAttendance()
    attendance_svc = AttendanceService(attendance, members)
    attendance_svc.mark("awa", fixed_now.date(), True, now=fixed_now)
    svc = StatisticsService(MemberService(members, FakeStore()), attendance_svc)

    stats = svc.current(today=TODAY)

    assert stats.total_members == 1
    assert stats.new_this_month == 1
    assert stats.average_rate == 100.0
