from __future__ import annotations

import io
from datetime import date, datetime

import pytest
from PIL import Image

from src.chapelle.chapelle.attendance.model import AttendanceMark, DaySummary
from src.chapelle.chapelle.attendance.service import AttendanceService
from src.chapelle.chapelle.core.exceptions import StorageError
from src.chapelle.chapelle.members.service import MemberService
from src.chapelle.chapelle.reports.pdf import AttendanceReportRenderer, format_percent, summary_lines
from src.chapelle.chapelle.reports.photos import PhotoLoader
from src.chapelle.chapelle.reports.service import AttendanceReportService
from tests.fakes import FakeStore, InMemoryAttendance, InMemoryMembers, make_member

SUNDAY = date(2025, 10, 12)


def _png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (40, 30), (200, 30, 30)).save(buf, "PNG")
    return buf.getvalue()


def _no_photo(reference: str) -> bytes:
    raise AssertionError(f"unexpected photo fetch: {reference}")


def _render(members, marks=None, photo_source=_no_photo):
    marks = marks or {}
    ids = [m.member_id for m in members]
    present = sum(1 for i in ids if i in marks and marks[i].present)
    absent = sum(1 for i in ids if i in marks and not marks[i].present)
    summary = DaySummary(total=len(ids), present=present, absent=absent, not_marked=len(ids) - present - absent)
    return AttendanceReportRenderer().render(
        service_date=SUNDAY,
        members=members,
        marks=marks,
        summary=summary,
        photo_source=photo_source,
    )


def test_report_for_zero_members_renders():
    rendered = _render([])

    assert rendered.content.startswith(b"%PDF")
    assert rendered.page_count == 1
    assert rendered.fallback_initials == {}


def test_summary_with_zero_members_shows_zero_percent():
    lines = [text for text, _ in summary_lines(DaySummary(total=0, present=0, absent=0, not_marked=0))]

    assert "Présents: 0 (0.0%)" in lines
    assert "Absents: 0 (0.0%)" in lines


def test_percentages_have_one_decimal():
    assert format_percent(1, 3) == "33.3%"
    assert format_percent(3, 10) == "30.0%"


def test_member_without_photo_gets_initials():
    rendered = _render([make_member("awa", "Awa", "Diallo")])

    assert rendered.fallback_initials == {"awa": "AD"}


def test_failing_photo_fetch_falls_back_without_aborting_other_rows():
    png = _png_bytes()

    def source(reference):
        if reference.endswith("broken.jpg"):
            raise StorageError("timeout")
        return png

    members = [
        make_member("awa", "Awa", "Diallo", photo="https://example.org/broken.jpg"),
        make_member("jean", "Jean", "Kouassi", photo="/photos/fideles/1_jean.png"),
        make_member("esther", "Esther", "Ngoma"),
    ]

    rendered = _render(members, photo_source=source)

    assert rendered.fallback_initials == {"awa": "AD", "esther": "EN"}


def test_undecodable_photo_falls_back_to_initials():
    rendered = _render(
        [make_member("jp", "Jean-Paul", "Mbemba", photo="/photos/fideles/1_jp.png")],
        photo_source=lambda ref: b"not an image",
    )

    assert rendered.fallback_initials == {"jp": "JM"}


def test_long_lists_span_several_pages():
    members = [make_member(f"m{i:02d}", f"Prenom{i}", f"Nom{i}") for i in range(12)]
    marks = {
        "m00": AttendanceMark(service_date=SUNDAY, member_id="m00", present=True, marked_at=datetime(2025, 10, 12, 9)),
        "m01": AttendanceMark(service_date=SUNDAY, member_id="m01", present=False, marked_at=datetime(2025, 10, 12, 9)),
    }

    rendered = _render(members, marks)

    # 5 rows fit under the header, 7 on the next page, the summary moves to a third one
    assert rendered.page_count == 3


def test_report_service_builds_named_file(fixed_now):
    members = InMemoryMembers([make_member("awa", "Awa", "Diallo"), make_member("jean", "Jean", "Kouassi")])
    attendance = AttendanceService(InMemoryAttendance(), members)
    attendance.mark("awa", SUNDAY, True, now=fixed_now)
    svc = AttendanceReportService(MemberService(members, FakeStore()), attendance, _no_photo)

    report = svc.build(SUNDAY)

    assert report.filename == "presence_2025-10-12.pdf"
    assert report.mimetype == "application/pdf"
    assert report.content.startswith(b"%PDF")
    assert report.fallback_initials == {"awa": "AD", "jean": "JK"}


class _Response:
    def __init__(self, content=b"", status=200):
        self.content = content
        self.status = status

    def raise_for_status(self):
        if self.status >= 400:
            raise RuntimeError(f"HTTP {self.status}")


class _Session:
    def __init__(self, response):
        self.response = response
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        return self.response


def test_photo_loader_reads_store_owned_references():
    store = FakeStore()
    store.objects["fideles/1_awa.png"] = b"img"
    loader = PhotoLoader(store, session=_Session(_Response()))

    assert loader.load("/photos/fideles/1_awa.png") == b"img"


def test_photo_loader_downloads_urls_with_timeout():
    session = _Session(_Response(b"remote"))
    loader = PhotoLoader(FakeStore(), timeout=3, session=session)

    assert loader.load("https://example.org/awa.jpg") == b"remote"
    assert session.calls == [("https://example.org/awa.jpg", 3.0)]


def test_photo_loader_propagates_http_errors():
    loader = PhotoLoader(FakeStore(), session=_Session(_Response(status=404)))

    with pytest.raises(RuntimeError):
        loader.load("https://example.org/missing.jpg")


@pytest.mark.parametrize("reference", ["", "fideles/1_awa.png", "ftp://example.org/a.jpg"])
def test_photo_loader_rejects_unknown_references(reference):
    loader = PhotoLoader(FakeStore(), session=_Session(_Response()))

    with pytest.raises(StorageError):
        loader.load(reference)
