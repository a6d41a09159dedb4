from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import PayrollStatus, Sector
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_decimal
from .model import PayrollFigures, PayrollRecord
from .repository import PayrollRepository

_COLUMNS = """
    p.payroll_id, p.tenant_id, p.member_id, p.month, p.year,
    p.working_days, p.present_days, p.absent_days, p.half_days, p.cl_used, p.sl_used, p.el_used,
    p.base_salary, p.net_salary, p.bonus, p.deductions, p.status,
    p.payment_mode, p.transaction_id, p.paid_at, m.full_name, m.sector
"""


def _to_payroll(r: dict) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        tenant_id=int(r["tenant_id"]),
        member_id=int(r["member_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        figures=PayrollFigures(
            working_days=to_decimal(r["working_days"]),
            present_days=to_decimal(r["present_days"]),
            absent_days=to_decimal(r["absent_days"]),
            half_days=to_decimal(r["half_days"]),
            cl_used=to_decimal(r["cl_used"]),
            sl_used=to_decimal(r["sl_used"]),
            el_used=to_decimal(r["el_used"]),
            base_salary=to_decimal(r["base_salary"]),
            net_salary=to_decimal(r["net_salary"]),
        ),
        status=PayrollStatus(r["status"]),
        bonus=to_decimal(r.get("bonus")),
        deductions=to_decimal(r.get("deductions")),
        payment_mode=r.get("payment_mode"),
        transaction_ref=int(r["transaction_id"]) if r.get("transaction_id") else None,
        paid_at=r.get("paid_at"),
        member_name=r.get("full_name"),
        sector=Sector(r["sector"]) if r.get("sector") else None,
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int, *, for_update: bool = False) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records p
                JOIN members m ON m.member_id = p.member_id
                WHERE p.payroll_id=%s
                {"FOR UPDATE" if for_update else ""}
                """,
                (int(payroll_id),),
            )
            r = fetchone(cur)
            return _to_payroll(r) if r else None

    def get_for_member_month(
        self, *, tenant_id: int, member_id: int, month: int, year: int, for_update: bool = False
    ) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records p
                JOIN members m ON m.member_id = p.member_id
                WHERE p.tenant_id=%s AND p.member_id=%s AND p.month=%s AND p.year=%s
                {"FOR UPDATE" if for_update else ""}
                """,
                (int(tenant_id), int(member_id), int(month), int(year)),
            )
            r = fetchone(cur)
            return _to_payroll(r) if r else None

    def upsert_draft(
        self, *, tenant_id: int, member_id: int, month: int, year: int, figures: PayrollFigures
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_records(
                    tenant_id, member_id, month, year,
                    working_days, present_days, absent_days, half_days, cl_used, sl_used, el_used,
                    base_salary, net_salary, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,'draft')
                ON DUPLICATE KEY UPDATE
                    payroll_id=LAST_INSERT_ID(payroll_id),
                    working_days=VALUES(working_days), present_days=VALUES(present_days),
                    absent_days=VALUES(absent_days), half_days=VALUES(half_days),
                    cl_used=VALUES(cl_used), sl_used=VALUES(sl_used), el_used=VALUES(el_used),
                    base_salary=VALUES(base_salary), net_salary=VALUES(net_salary),
                    status='draft'
                """,
                (
                    int(tenant_id),
                    int(member_id),
                    int(month),
                    int(year),
                    figures.working_days,
                    figures.present_days,
                    figures.absent_days,
                    figures.half_days,
                    figures.cl_used,
                    figures.sl_used,
                    figures.el_used,
                    figures.base_salary,
                    figures.net_salary,
                ),
            )
            return int(cur.lastrowid)

    def mark_approved(self, payroll_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payroll_records SET status='approved' WHERE payroll_id=%s AND status='draft'",
                (int(payroll_id),),
            )
            return cur.rowcount > 0

    def mark_paid(self, *, payroll_id: int, payment_mode: str, transaction_ref: int, paid_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payroll_records
                SET status='paid', payment_mode=%s, transaction_id=%s, paid_at=%s, is_locked=1
                WHERE payroll_id=%s AND status='approved'
                """,
                (payment_mode, int(transaction_ref), paid_at, int(payroll_id)),
            )
            return cur.rowcount > 0

    def list_for_month(
        self,
        *,
        tenant_id: int,
        month: int,
        year: int,
        sector: Optional[Sector] = None,
        status: Optional[PayrollStatus] = None,
    ) -> Sequence[PayrollRecord]:
        clauses = ["p.tenant_id=%s", "p.month=%s", "p.year=%s"]
        params: list[object] = [int(tenant_id), int(month), int(year)]
        if sector:
            clauses.append("m.sector=%s")
            params.append(sector.value)
        if status:
            clauses.append("p.status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records p
                JOIN members m ON m.member_id = p.member_id
                WHERE {where}
                ORDER BY m.full_name
                """,
                tuple(params),
            )
            return [_to_payroll(r) for r in fetchall(cur)]
