from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import LockGranularity, Sector
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceLock, LockScope
from .repository import LockRepository

_COLUMNS = """
    tenant_id, sector, granularity, scope_key, lock_date, month, year, is_locked,
    locked_by, locked_at, unlocked_by, unlocked_at, unlock_reason
"""


def _to_lock(r: dict) -> AttendanceLock:
    return AttendanceLock(
        tenant_id=int(r["tenant_id"]),
        sector=Sector(r["sector"]),
        scope=LockScope(
            granularity=LockGranularity(r["granularity"]),
            month=int(r["month"]),
            year=int(r["year"]),
            lock_date=r.get("lock_date"),
        ),
        is_locked=bool(r["is_locked"]),
        locked_by=r.get("locked_by"),
        locked_at=r.get("locked_at"),
        unlocked_by=r.get("unlocked_by"),
        unlocked_at=r.get("unlocked_at"),
        unlock_reason=r.get("unlock_reason"),
    )


class MySQLLockRepository(LockRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, tenant_id: int, sector: Sector, scope: LockScope) -> Optional[AttendanceLock]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_locks
                WHERE tenant_id=%s AND sector=%s AND scope_key=%s
                """,
                (int(tenant_id), sector.value, scope.key),
            )
            r = fetchone(cur)
            return _to_lock(r) if r else None

    def save_locked(self, *, tenant_id: int, sector: Sector, scope: LockScope, actor: str, at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_locks(
                    tenant_id, sector, granularity, scope_key, lock_date, month, year,
                    is_locked, locked_by, locked_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,1,%s,%s)
                ON DUPLICATE KEY UPDATE is_locked=1, locked_by=VALUES(locked_by), locked_at=VALUES(locked_at)
                """,
                (
                    int(tenant_id),
                    sector.value,
                    scope.granularity.value,
                    scope.key,
                    scope.lock_date,
                    scope.month,
                    scope.year,
                    actor,
                    at,
                ),
            )

    def save_unlocked(
        self, *, tenant_id: int, sector: Sector, scope: LockScope, actor: str, reason: str, at: datetime
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_locks
                SET is_locked=0, unlocked_by=%s, unlocked_at=%s, unlock_reason=%s
                WHERE tenant_id=%s AND sector=%s AND scope_key=%s
                """,
                (actor, at, reason, int(tenant_id), sector.value, scope.key),
            )
            return cur.rowcount > 0

    def list_for_month(self, *, tenant_id: int, sector: Sector, month: int, year: int) -> Sequence[AttendanceLock]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_locks
                WHERE tenant_id=%s AND sector=%s AND year=%s AND month=%s
                ORDER BY scope_key
                """,
                (int(tenant_id), sector.value, int(year), int(month)),
            )
            return [_to_lock(r) for r in fetchall(cur)]
