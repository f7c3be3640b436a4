from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..attendance.service import AttendanceService, day_summary
from ..members.service import MemberService
from .model import ReportFile, report_filename
from .pdf import AttendanceReportRenderer, PhotoSource

logger = logging.getLogger(__name__)


class AttendanceReportService:
    """Use case: télécharger la liste de présence d'un culte en PDF."""

    def __init__(
        self,
        members: MemberService,
        attendance: AttendanceService,
        photo_source: PhotoSource,
        *,
        renderer: Optional[AttendanceReportRenderer] = None,
    ):
        self._members = members
        self._attendance = attendance
        self._photo_source = photo_source
        self._renderer = renderer or AttendanceReportRenderer()

    def build(self, service_date: date) -> ReportFile:
        members = self._members.list_members()
        marks = self._attendance.marks_for_date(service_date)
        summary = day_summary([m.member_id for m in members], marks)

        rendered = self._renderer.render(
            service_date=service_date,
            members=members,
            marks=marks,
            summary=summary,
            photo_source=self._photo_source,
        )
        logger.info(
            "Attendance report %s: %d members, %d pages, %d initials fallbacks",
            service_date.isoformat(),
            summary.total,
            rendered.page_count,
            len(rendered.fallback_initials),
        )
        return ReportFile(
            filename=report_filename(service_date),
            content=rendered.content,
            page_count=rendered.page_count,
            fallback_initials=rendered.fallback_initials,
        )
