from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol

from ..core.constants import DEFAULT_PAYMENT_MODE, SALARY_CATEGORY
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor


@dataclass(frozen=True)
class ExpenseEntry:
    tenant_id: int
    amount: Decimal
    txn_date: datetime
    label: str
    member_id: Optional[int] = None
    category: str = SALARY_CATEGORY
    payment_mode: str = DEFAULT_PAYMENT_MODE
    created_by: Optional[str] = None


class ExpenseLedger(Protocol):
    def create_expense(self, entry: ExpenseEntry) -> int:
        """Record an expense and return the ledger reference."""

        raise NotImplementedError


class MySQLExpenseLedger(ExpenseLedger):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_expense(self, entry: ExpenseEntry) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO ledger_transactions(
                    tenant_id, txn_type, title, amount, category, payment_mode, txn_date, member_id, created_by
                )
                VALUES(%s,'expense',%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(entry.tenant_id),
                    entry.label,
                    entry.amount,
                    entry.category,
                    entry.payment_mode,
                    entry.txn_date,
                    entry.member_id,
                    entry.created_by,
                ),
            )
            return int(cur.lastrowid)
