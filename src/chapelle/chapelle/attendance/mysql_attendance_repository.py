from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, map_rows
from .model import AttendanceMark
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def upsert(self, mark: AttendanceMark) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_marks(service_date, member_id, present, marked_at)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE present=VALUES(present), marked_at=VALUES(marked_at)
                """,
                (mark.service_date, mark.member_id, int(mark.present), mark.marked_at),
            )

    def list_for_date(self, service_date: date) -> Sequence[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT service_date, member_id, present, marked_at
                FROM attendance_marks
                WHERE service_date=%s
                """,
                (service_date,),
            )
            return map_rows(fetchall(cur), AttendanceMark.from_record, collection="attendance_marks")

    def list_all(self) -> Sequence[AttendanceMark]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT service_date, member_id, present, marked_at FROM attendance_marks")
            return map_rows(fetchall(cur), AttendanceMark.from_record, collection="attendance_marks")

    def list_dates(self) -> Sequence[date]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT DISTINCT service_date FROM attendance_marks ORDER BY service_date DESC")
            return [r["service_date"] for r in fetchall(cur)]
