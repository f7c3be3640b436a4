from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import UserAccount
from .repository import UserAccountRepository

_COLUMNS = "account_id, name, email, password_hash, role, created_at"


class MySQLUserAccountRepository(UserAccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, account_id: str) -> Optional[UserAccount]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE account_id=%s", (account_id,))
            row = fetchone(cur)
            return UserAccount.from_record(row) if row else None

    def get_by_email(self, email: str) -> Optional[UserAccount]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return UserAccount.from_record(row) if row else None

    def create_account(self, *, name: str, email: str, password_hash: str, role: Role) -> str:
        account_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(account_id, name, email, password_hash, role, created_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (account_id, name, email, password_hash, role.value, datetime.now()),
            )
        return account_id
