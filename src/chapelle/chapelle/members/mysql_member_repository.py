from __future__ import annotations

import uuid
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, map_rows
from .model import Member
from .repository import MemberRepository

_COLUMNS = "member_id, last_name, first_name, photo, joined_on, role_tag, ministry, phone, residence, created_at"


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM members ORDER BY last_name, first_name")
            return map_rows(fetchall(cur), Member.from_record, collection="members")

    def get_by_id(self, member_id: str) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM members WHERE member_id=%s", (member_id,))
            row = fetchone(cur)
            return Member.from_record(row) if row else None

    def add(self, member: Member) -> str:
        member_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO members({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    member_id,
                    member.last_name,
                    member.first_name,
                    member.photo,
                    member.joined_on,
                    member.role_tag,
                    member.ministry,
                    member.phone,
                    member.residence,
                    member.created_at,
                ),
            )
        return member_id

    def update(self, member: Member) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE members
                SET last_name=%s, first_name=%s, photo=%s, joined_on=%s,
                    role_tag=%s, ministry=%s, phone=%s, residence=%s
                WHERE member_id=%s
                """,
                (
                    member.last_name,
                    member.first_name,
                    member.photo,
                    member.joined_on,
                    member.role_tag,
                    member.ministry,
                    member.phone,
                    member.residence,
                    member.member_id,
                ),
            )

    def delete_by_id(self, member_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM members WHERE member_id=%s", (member_id,))
            return cur.rowcount > 0
