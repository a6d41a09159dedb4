from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollStatus, Sector
from .model import PayrollFigures, PayrollRecord


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int, *, for_update: bool = False) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def get_for_member_month(
        self, *, tenant_id: int, member_id: int, month: int, year: int, for_update: bool = False
    ) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def upsert_draft(
        self, *, tenant_id: int, member_id: int, month: int, year: int, figures: PayrollFigures
    ) -> int:
        """Insert or overwrite the computed figures and reset the record to DRAFT."""

        raise NotImplementedError

    def mark_approved(self, payroll_id: int) -> bool:
        raise NotImplementedError

    def mark_paid(self, *, payroll_id: int, payment_mode: str, transaction_ref: int, paid_at: datetime) -> bool:
        """Flip APPROVED to PAID; returns False when the record was not APPROVED."""

        raise NotImplementedError

    def list_for_month(
        self,
        *,
        tenant_id: int,
        month: int,
        year: int,
        sector: Optional[Sector] = None,
        status: Optional[PayrollStatus] = None,
    ) -> Sequence[PayrollRecord]:
        raise NotImplementedError
