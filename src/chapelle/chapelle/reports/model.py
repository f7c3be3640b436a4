from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict


def report_filename(service_date: date) -> str:
    return f"presence_{service_date.isoformat()}.pdf"


@dataclass(frozen=True)
class ReportFile:
    """Generated attendance report, ready to be sent as a download."""

    filename: str
    content: bytes
    page_count: int
    # member_id -> initials drawn in place of the photo
    fallback_initials: Dict[str, str] = field(default_factory=dict)

    mimetype: str = "application/pdf"
