from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import AttendanceMark


class AttendanceRepository(Protocol):
    def upsert(self, mark: AttendanceMark) -> None:
        """Create or overwrite the mark stored under (service_date, member_id)."""

        raise NotImplementedError

    def list_for_date(self, service_date: date) -> Sequence[AttendanceMark]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AttendanceMark]:
        raise NotImplementedError

    def list_dates(self) -> Sequence[date]:
        raise NotImplementedError
