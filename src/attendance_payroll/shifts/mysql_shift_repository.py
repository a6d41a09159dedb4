from __future__ import annotations

from datetime import time
from typing import Optional, Sequence

from ..core.enums import Sector
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import Shift
from .repository import ShiftRepository


def _to_shift(r: dict) -> Shift:
    return Shift(
        shift_id=int(r["shift_id"]),
        tenant_id=int(r["tenant_id"]),
        sector=Sector(r["sector"]),
        shift_name=r["shift_name"],
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
    )


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_tenant(self, *, tenant_id: int, sector: Sector) -> Sequence[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT shift_id, tenant_id, sector, shift_name, start_time, end_time
                FROM shifts
                WHERE tenant_id=%s AND sector=%s
                ORDER BY start_time, shift_id
                """,
                (int(tenant_id), sector.value),
            )
            return [_to_shift(r) for r in fetchall(cur)]

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT shift_id, tenant_id, sector, shift_name, start_time, end_time
                FROM shifts
                WHERE shift_id=%s
                """,
                (int(shift_id),),
            )
            r = fetchone(cur)
            return _to_shift(r) if r else None

    def create(self, *, tenant_id: int, sector: Sector, shift_name: str, start_time: time, end_time: time) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO shifts(tenant_id, sector, shift_name, start_time, end_time)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (int(tenant_id), sector.value, shift_name, start_time, end_time),
            )
            return int(cur.lastrowid)

    def delete(self, shift_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM shifts WHERE shift_id=%s", (int(shift_id),))
            return cur.rowcount > 0
