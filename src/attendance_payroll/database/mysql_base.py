from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import Any, Optional

import mysql.connector
from mysql.connector import errorcode

from ..common.datetime_utils import parse_time_of_day
from .connection import DatabaseConnection

Row = dict[str, Any]


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)``.

    Inside ``atomic()`` the thread's shared connection is reused and left for
    the transaction owner to commit; otherwise a fresh connection commits on
    success and rolls back on error.
    """

    shared = conn_factory.current()
    conn = shared if shared is not None else conn_factory.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        if shared is None:
            conn.commit()
    except Exception:
        if shared is None:
            conn.rollback()
        raise
    finally:
        cur.close()
        if shared is None:
            conn.close()


def fetchone(cur) -> Optional[Row]:
    return cur.fetchone() or None


def fetchall(cur) -> list[Row]:
    return list(cur.fetchall() or [])


def is_duplicate_key(error: Exception) -> bool:
    return isinstance(error, mysql.connector.IntegrityError) and error.errno == errorcode.ER_DUP_ENTRY


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def normalize_mysql_time(value: Any) -> Optional[time]:
    """TIME columns come back as ``time``, ``timedelta`` or ``'HH:MM:SS'`` depending on the connector."""

    if value is None or isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return (datetime.min + timedelta(seconds=seconds)).time()
    if isinstance(value, str):
        return parse_time_of_day(value)
    raise TypeError(f"Unsupported MySQL TIME value: {value!r}")
