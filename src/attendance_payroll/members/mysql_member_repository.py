from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import LeaveType, Sector, WageType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import Member
from .repository import MemberDirectory

_COLUMNS = """
    member_id, tenant_id, sector, full_name, role, department, wage_type,
    monthly_salary, daily_wage, hourly_rate, overtime_rate,
    cl_balance, sl_balance, el_balance, default_shift_id, is_active
"""

_BALANCE_COLUMNS = {
    LeaveType.CL: "cl_balance",
    LeaveType.SL: "sl_balance",
    LeaveType.EL: "el_balance",
}


def _to_member(r: dict) -> Member:
    return Member(
        member_id=int(r["member_id"]),
        tenant_id=int(r["tenant_id"]),
        sector=Sector(r["sector"]),
        full_name=r["full_name"],
        role=r.get("role"),
        department=r.get("department"),
        wage_type=WageType(r.get("wage_type") or WageType.MONTHLY.value),
        monthly_salary=to_decimal(r.get("monthly_salary")),
        daily_wage=to_decimal(r.get("daily_wage")),
        hourly_rate=to_decimal(r.get("hourly_rate")),
        overtime_rate=to_decimal(r.get("overtime_rate")),
        cl_balance=to_decimal(r.get("cl_balance")),
        sl_balance=to_decimal(r.get("sl_balance")),
        el_balance=to_decimal(r.get("el_balance")),
        default_shift_id=int(r["default_shift_id"]) if r.get("default_shift_id") else None,
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLMemberDirectory(MemberDirectory):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, member_id: int) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM members WHERE member_id=%s", (int(member_id),))
            r = fetchone(cur)
            return _to_member(r) if r else None

    def list_active(
        self,
        *,
        tenant_id: int,
        sector: Sector,
        role: Optional[str] = None,
        department: Optional[str] = None,
        member_id: Optional[int] = None,
    ) -> Sequence[Member]:
        clauses = ["tenant_id=%s", "sector=%s", "is_active=1"]
        params: list[object] = [int(tenant_id), sector.value]
        if role:
            clauses.append("role=%s")
            params.append(role)
        if department:
            clauses.append("department=%s")
            params.append(department)
        if member_id:
            clauses.append("member_id=%s")
            params.append(int(member_id))

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM members WHERE {where} ORDER BY full_name", tuple(params))
            return [_to_member(r) for r in fetchall(cur)]

    def decrement_leave_balance(self, *, member_id: int, leave_type: LeaveType) -> bool:
        column = _BALANCE_COLUMNS[leave_type]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE members SET {column} = GREATEST({column} - 1, 0) WHERE member_id=%s AND {column} > 0",
                (int(member_id),),
            )
            return cur.rowcount > 0
