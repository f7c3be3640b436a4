from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import CHURCH_NAME, MAX_PHOTO_BYTES
from .database.connection import DBConfig, DatabaseConnection
from .members.mysql_member_repository import MySQLMemberRepository
from .members.repository import MemberRepository
from .members.service import MemberService
from .reports.pdf import AttendanceReportRenderer
from .reports.photos import PhotoLoader
from .reports.service import AttendanceReportService
from .statistics.service import StatisticsService
from .storage.store import LocalObjectStore, ObjectStore
from .users.mysql_user_account_repository import MySQLUserAccountRepository
from .users.repository import UserAccountRepository
from .users.service import AuthService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    accounts_repo: UserAccountRepository
    members_repo: MemberRepository
    attendance_repo: AttendanceRepository
    object_store: ObjectStore

    auth_service: AuthService
    member_service: MemberService
    attendance_service: AttendanceService
    statistics_service: StatisticsService
    report_service: AttendanceReportService


def wire_services(
    *,
    conn: Optional[DatabaseConnection],
    accounts_repo: UserAccountRepository,
    members_repo: MemberRepository,
    attendance_repo: AttendanceRepository,
    object_store: ObjectStore,
    max_photo_bytes: int = MAX_PHOTO_BYTES,
    photo_fetch_timeout: float = 10.0,
    church_name: str = CHURCH_NAME,
) -> Container:
    """Build the services on top of already constructed repositories."""

    auth_service = AuthService(accounts_repo)
    member_service = MemberService(members_repo, object_store, max_photo_bytes=max_photo_bytes)
    attendance_service = AttendanceService(attendance_repo, members_repo)
    statistics_service = StatisticsService(member_service, attendance_service)
    report_service = AttendanceReportService(
        member_service,
        attendance_service,
        PhotoLoader(object_store, timeout=photo_fetch_timeout).load,
        renderer=AttendanceReportRenderer(church_name=church_name),
    )

    return Container(
        conn=conn,
        accounts_repo=accounts_repo,
        members_repo=members_repo,
        attendance_repo=attendance_repo,
        object_store=object_store,
        auth_service=auth_service,
        member_service=member_service,
        attendance_service=attendance_service,
        statistics_service=statistics_service,
        report_service=report_service,
    )


def build_container(
    *,
    db_config: dict,
    upload_dir: str,
    photo_url_prefix: str = "/photos",
    max_photo_bytes: int = MAX_PHOTO_BYTES,
    photo_fetch_timeout: float = 10.0,
    church_name: str = CHURCH_NAME,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_services(
        conn=conn,
        accounts_repo=MySQLUserAccountRepository(conn),
        members_repo=MySQLMemberRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        object_store=LocalObjectStore(upload_dir, url_prefix=photo_url_prefix),
        max_photo_bytes=max_photo_bytes,
        photo_fetch_timeout=photo_fetch_timeout,
        church_name=church_name,
    )
