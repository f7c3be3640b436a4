"""PDF rendering of the attendance list for one service date.

Layout works with a cursor measured from the top of the page (reportlab's
origin is bottom-left, see ``_RowCursor.baseline``). Every member row has the
same height; a new page starts when the next row would cross the bottom
margin.
"""
from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Dict, Mapping, Optional, Sequence

from PIL import Image, ImageOps
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ..attendance.model import AttendanceMark, DaySummary, presence_status
from ..common.datetime_utils import format_long_fr
from ..core.constants import CHURCH_NAME
from ..core.enums import PresenceStatus
from ..members.model import Member

logger = logging.getLogger(__name__)

PhotoSource = Callable[[str], bytes]

PAGE_TOP = 20 * mm
PAGE_BOTTOM = 20 * mm
PHOTO_SIZE = 25 * mm
PHOTO_X = 15 * mm
ROW_GAP = 5 * mm
ROW_HEIGHT = PHOTO_SIZE + 2 * ROW_GAP
SUMMARY_HEIGHT = 40 * mm
PHOTO_PIXELS = 200

FALLBACK_FILL = (99, 102, 241)
SEPARATOR = (230, 230, 230)
RULE = (200, 200, 200)
DETAIL_TEXT = (100, 100, 100)

STATUS_STYLE = {
    PresenceStatus.PRESENT: ("PRÉSENT", (34, 197, 94)),
    PresenceStatus.ABSENT: ("ABSENT", (239, 68, 68)),
    PresenceStatus.NOT_MARKED: ("NON MARQUÉ", (156, 163, 175)),
}


def format_percent(part: int, total: int) -> str:
    if total <= 0:
        return "0.0%"
    return f"{part / total * 100:.1f}%"


def member_initials(member: Member) -> str:
    return member.initials or "??"


def decode_photo(data: bytes, *, pixels: int = PHOTO_PIXELS) -> ImageReader:
    """Decode image bytes into a square RGB raster reportlab can embed."""

    img = Image.open(io.BytesIO(data))
    img.load()
    img = ImageOps.fit(img.convert("RGB"), (pixels, pixels))
    return ImageReader(img)


def _rgb(c: canvas.Canvas, color: tuple, *, fill: bool = True) -> None:
    r, g, b = (v / 255 for v in color)
    if fill:
        c.setFillColorRGB(r, g, b)
    else:
        c.setStrokeColorRGB(r, g, b)


@dataclass
class _RowCursor:
    page_height: float
    top: float = PAGE_TOP
    pages: int = 1

    def baseline(self, offset: float = 0) -> float:
        return self.page_height - (self.top + offset)

    def ensure_room(self, c: canvas.Canvas, needed: float) -> bool:
        if self.top + needed > self.page_height - PAGE_BOTTOM:
            c.showPage()
            self.pages += 1
            self.top = PAGE_TOP
            return True
        return False


@dataclass
class RenderedReport:
    content: bytes
    page_count: int
    fallback_initials: Dict[str, str] = field(default_factory=dict)


class AttendanceReportRenderer:
    def __init__(self, *, church_name: str = CHURCH_NAME, pagesize: tuple = A4):
        self._church_name = church_name
        self._pagesize = pagesize

    def render(
        self,
        *,
        service_date: date,
        members: Sequence[Member],
        marks: Mapping[str, AttendanceMark],
        summary: DaySummary,
        photo_source: PhotoSource,
    ) -> RenderedReport:
        buffer = io.BytesIO()
        width, height = self._pagesize
        c = canvas.Canvas(buffer, pagesize=self._pagesize)
        c.setTitle(f"Liste de présence {service_date.isoformat()}")
        cursor = _RowCursor(page_height=height)
        fallbacks: Dict[str, str] = {}

        self._draw_header(c, cursor, width, service_date, summary)

        for member in members:
            cursor.ensure_room(c, ROW_HEIGHT)
            if not self._draw_photo(c, cursor, member, photo_source):
                fallbacks[member.member_id] = member_initials(member)
            self._draw_details(c, cursor, width, member, marks.get(member.member_id))

            cursor.top += PHOTO_SIZE + ROW_GAP
            _rgb(c, SEPARATOR, fill=False)
            c.line(10 * mm, cursor.baseline(), width - 10 * mm, cursor.baseline())
            cursor.top += ROW_GAP

        cursor.ensure_room(c, SUMMARY_HEIGHT)
        self._draw_summary(c, cursor, width, summary)

        c.showPage()
        c.save()
        return RenderedReport(content=buffer.getvalue(), page_count=cursor.pages, fallback_initials=fallbacks)

    def _draw_header(self, c: canvas.Canvas, cursor: _RowCursor, width: float, service_date: date, summary: DaySummary) -> None:
        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 18)
        c.drawCentredString(width / 2, cursor.baseline(), self._church_name)
        cursor.top += 10 * mm

        c.setFont("Helvetica", 14)
        c.drawCentredString(width / 2, cursor.baseline(), "Liste de Présence")
        cursor.top += 8 * mm

        c.setFont("Helvetica", 12)
        c.drawCentredString(width / 2, cursor.baseline(), format_long_fr(service_date))
        cursor.top += 15 * mm

        c.setFont("Helvetica-Bold", 10)
        c.drawCentredString(
            width / 2,
            cursor.baseline(),
            f"Total: {summary.total}  |  Présents: {summary.present}  |  "
            f"Absents: {summary.absent}  |  Non marqués: {summary.not_marked}",
        )
        cursor.top += 15 * mm

        _rgb(c, RULE, fill=False)
        c.line(10 * mm, cursor.baseline(), width - 10 * mm, cursor.baseline())
        cursor.top += 10 * mm

    def _draw_photo(self, c: canvas.Canvas, cursor: _RowCursor, member: Member, photo_source: PhotoSource) -> bool:
        """Draw the member photo; return False when the initials square was used instead."""

        bottom = cursor.baseline(PHOTO_SIZE)
        if member.photo:
            try:
                image = decode_photo(photo_source(member.photo))
                c.drawImage(image, PHOTO_X, bottom, PHOTO_SIZE, PHOTO_SIZE)
                return True
            except Exception as e:
                logger.warning("Photo of member %s unavailable (%s), using initials", member.member_id, e)

        self._draw_initials(c, bottom, member_initials(member))
        return False

    @staticmethod
    def _draw_initials(c: canvas.Canvas, bottom: float, initials: str) -> None:
        _rgb(c, FALLBACK_FILL)
        c.rect(PHOTO_X, bottom, PHOTO_SIZE, PHOTO_SIZE, stroke=0, fill=1)
        c.setFillColorRGB(1, 1, 1)
        c.setFont("Helvetica-Bold", 12)
        c.drawCentredString(PHOTO_X + PHOTO_SIZE / 2, bottom + PHOTO_SIZE / 2 - 4, initials)

    def _draw_details(
        self,
        c: canvas.Canvas,
        cursor: _RowCursor,
        width: float,
        member: Member,
        mark: Optional[AttendanceMark],
    ) -> None:
        info_x = PHOTO_X + PHOTO_SIZE + 10 * mm

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 12)
        c.drawString(info_x, cursor.baseline(6 * mm), member.full_name)

        c.setFont("Helvetica", 9)
        _rgb(c, DETAIL_TEXT)
        line = 12 * mm
        if member.role_tag:
            c.drawString(info_x, cursor.baseline(line), f"Fonction: {member.role_tag}")
            line += 5 * mm
        if member.ministry:
            c.drawString(info_x, cursor.baseline(line), f"Service: {member.ministry}")
        if member.phone:
            c.drawString(info_x + 70 * mm, cursor.baseline(12 * mm), f"Tél: {member.phone}")
        if member.residence:
            c.drawString(info_x + 70 * mm, cursor.baseline(17 * mm), f"Résidence: {member.residence}")

        label, color = STATUS_STYLE[presence_status(mark)]
        c.setFont("Helvetica-Bold", 10)
        _rgb(c, color)
        c.drawString(width - 45 * mm, cursor.baseline(PHOTO_SIZE / 2 + 3 * mm), label)

    def _draw_summary(self, c: canvas.Canvas, cursor: _RowCursor, width: float, summary: DaySummary) -> None:
        cursor.top += 10 * mm
        _rgb(c, RULE, fill=False)
        c.line(10 * mm, cursor.baseline(), width - 10 * mm, cursor.baseline())
        cursor.top += 10 * mm

        c.setFillColorRGB(0, 0, 0)
        c.setFont("Helvetica-Bold", 12)
        c.drawString(15 * mm, cursor.baseline(), "Statistiques récapitulatives")
        cursor.top += 8 * mm

        c.setFont("Helvetica", 10)
        for text, color in summary_lines(summary):
            _rgb(c, color)
            c.drawString(15 * mm, cursor.baseline(), text)
            cursor.top += 6 * mm


def summary_lines(summary: DaySummary) -> list[tuple[str, tuple]]:
    return [
        (f"Total des fidèles: {summary.total}", (0, 0, 0)),
        (
            f"Présents: {summary.present} ({format_percent(summary.present, summary.total)})",
            STATUS_STYLE[PresenceStatus.PRESENT][1],
        ),
        (
            f"Absents: {summary.absent} ({format_percent(summary.absent, summary.total)})",
            STATUS_STYLE[PresenceStatus.ABSENT][1],
        ),
        (f"Non marqués: {summary.not_marked}", STATUS_STYLE[PresenceStatus.NOT_MARKED][1]),
    ]
