from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterable, List, Optional, TypeVar

from ..core.exceptions import MalformedRecordError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def map_rows(rows: Iterable[Dict[str, Any]], factory: Callable[[Dict[str, Any]], T], *, collection: str) -> List[T]:
    """Map rows through a validating constructor, skipping (and logging) malformed ones."""

    out: List[T] = []
    for row in rows:
        try:
            out.append(factory(row))
        except MalformedRecordError as e:
            logger.warning("Skipping malformed %s record: %s", collection, e)
    return out
