from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import AttendanceStatus, Sector
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, normalize_mysql_time
from .model import AttendanceFilters, AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    a.record_id, a.tenant_id, a.sector, a.member_id, a.work_date, a.context_id, a.status,
    a.subject, a.check_in, a.check_out, a.total_hours, a.work_mode, a.note,
    a.permission_start, a.permission_end, a.permission_reason,
    a.overtime_hours, a.overtime_reason, a.created_by, a.updated_by
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        record_id=int(r["record_id"]),
        tenant_id=int(r["tenant_id"]),
        sector=Sector(r["sector"]),
        member_id=int(r["member_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        context_id=int(r["context_id"]) if r.get("context_id") is not None else None,
        subject=r.get("subject"),
        check_in=normalize_mysql_time(r.get("check_in")),
        check_out=normalize_mysql_time(r.get("check_out")),
        total_hours=float(r.get("total_hours") or 0),
        work_mode=r.get("work_mode"),
        note=r.get("note"),
        permission_start=normalize_mysql_time(r.get("permission_start")),
        permission_end=normalize_mysql_time(r.get("permission_end")),
        permission_reason=r.get("permission_reason"),
        overtime_hours=float(r.get("overtime_hours") or 0),
        overtime_reason=r.get("overtime_reason"),
        created_by=r.get("created_by"),
        updated_by=r.get("updated_by"),
    )


def _filter_clauses(tenant_id: int, sector: Sector, filters: AttendanceFilters) -> tuple[str, list[object]]:
    clauses = ["a.tenant_id=%s", "a.sector=%s"]
    params: list[object] = [int(tenant_id), sector.value]
    if filters.start_date:
        clauses.append("a.work_date>=%s")
        params.append(filters.start_date)
    if filters.end_date:
        clauses.append("a.work_date<=%s")
        params.append(filters.end_date)
    if filters.member_id:
        clauses.append("a.member_id=%s")
        params.append(int(filters.member_id))
    if filters.context_id:
        clauses.append("a.context_id=%s")
        params.append(int(filters.context_id))
    if filters.role:
        clauses.append("m.role=%s")
        params.append(filters.role)
    if filters.department:
        clauses.append("m.department=%s")
        params.append(filters.department)
    return " AND ".join(clauses), params


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records a WHERE a.record_id=%s", (int(record_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def find_by_key(
        self,
        *,
        tenant_id: int,
        sector: Sector,
        member_id: int,
        work_date: date,
        context_id: Optional[int] = None,
        for_update: bool = False,
    ) -> Optional[AttendanceRecord]:
        context_clause = "a.context_id=%s" if context_id is not None else "a.context_id IS NULL"
        params: list[object] = [int(tenant_id), sector.value, int(member_id), work_date]
        if context_id is not None:
            params.append(int(context_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records a
                WHERE a.tenant_id=%s AND a.sector=%s AND a.member_id=%s AND a.work_date=%s
                  AND {context_clause}
                ORDER BY a.record_id
                LIMIT 1
                {"FOR UPDATE" if for_update else ""}
                """,
                tuple(params),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_member_date(
        self,
        *,
        tenant_id: int,
        sector: Sector,
        member_id: int,
        work_date: date,
        for_update: bool = False,
    ) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records a
                WHERE a.tenant_id=%s AND a.sector=%s AND a.member_id=%s AND a.work_date=%s
                ORDER BY a.record_id
                {"FOR UPDATE" if for_update else ""}
                """,
                (int(tenant_id), sector.value, int(member_id), work_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def insert(self, record: AttendanceRecord, *, single_per_day: bool) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(
                        tenant_id, sector, member_id, work_date, context_id, status, subject,
                        check_in, check_out, total_hours, work_mode, note,
                        permission_start, permission_end, permission_reason,
                        overtime_hours, overtime_reason, created_by, updated_by, single_day_guard
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(record.tenant_id),
                        record.sector.value,
                        int(record.member_id),
                        record.work_date,
                        record.context_id,
                        record.status.value,
                        record.subject,
                        record.check_in,
                        record.check_out,
                        record.total_hours,
                        record.work_mode,
                        record.note,
                        record.permission_start,
                        record.permission_end,
                        record.permission_reason,
                        record.overtime_hours,
                        record.overtime_reason,
                        record.created_by,
                        record.updated_by,
                        1 if single_per_day else None,
                    ),
                )
                return int(cur.lastrowid)
        except Exception as e:
            if is_duplicate_key(e):
                raise ConflictError("Attendance already marked for this member on this date") from e
            raise

    def update(self, record: AttendanceRecord) -> bool:
        try:
            return self._update(record)
        except Exception as e:
            if is_duplicate_key(e):
                raise ConflictError("Attendance already marked for this member on that date") from e
            raise

    def _update(self, record: AttendanceRecord) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET work_date=%s, context_id=%s, status=%s, subject=%s,
                    check_in=%s, check_out=%s, total_hours=%s, work_mode=%s, note=%s,
                    permission_start=%s, permission_end=%s, permission_reason=%s,
                    overtime_hours=%s, overtime_reason=%s, updated_by=%s
                WHERE record_id=%s
                """,
                (
                    record.work_date,
                    record.context_id,
                    record.status.value,
                    record.subject,
                    record.check_in,
                    record.check_out,
                    record.total_hours,
                    record.work_mode,
                    record.note,
                    record.permission_start,
                    record.permission_end,
                    record.permission_reason,
                    record.overtime_hours,
                    record.overtime_reason,
                    record.updated_by,
                    int(record.record_id),
                ),
            )
            # rowcount is 0 when nothing changed, so re-check existence.
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM attendance_records WHERE record_id=%s", (int(record.record_id),))
            return fetchone(cur) is not None

    def delete(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE record_id=%s", (int(record_id),))
            return cur.rowcount > 0

    def list_records(self, *, tenant_id: int, sector: Sector, filters: AttendanceFilters) -> Sequence[AttendanceRecord]:
        where, params = _filter_clauses(tenant_id, sector, filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records a
                JOIN members m ON m.member_id = a.member_id
                WHERE {where}
                ORDER BY a.work_date DESC, a.member_id, a.check_in
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def count_by_status(
        self, *, tenant_id: int, sector: Sector, filters: AttendanceFilters
    ) -> dict[AttendanceStatus, int]:
        where, params = _filter_clauses(tenant_id, sector, filters)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT a.status, COUNT(*) AS cnt
                FROM attendance_records a
                JOIN members m ON m.member_id = a.member_id
                WHERE {where}
                GROUP BY a.status
                """,
                tuple(params),
            )
            return {AttendanceStatus(r["status"]): int(r["cnt"]) for r in fetchall(cur)}
