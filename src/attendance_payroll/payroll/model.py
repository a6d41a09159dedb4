from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import PayrollStatus, Sector


@dataclass(frozen=True)
class PayrollFigures:
    """Computed part of a payroll record; everything regeneration may overwrite."""

    working_days: Decimal
    present_days: Decimal
    absent_days: Decimal
    half_days: Decimal
    cl_used: Decimal
    sl_used: Decimal
    el_used: Decimal
    base_salary: Decimal
    net_salary: Decimal


@dataclass(frozen=True)
class PayrollRecord:
    payroll_id: int
    tenant_id: int
    member_id: int
    month: int
    year: int
    figures: PayrollFigures
    status: PayrollStatus = PayrollStatus.DRAFT
    bonus: Decimal = Decimal("0")
    deductions: Decimal = Decimal("0")
    payment_mode: Optional[str] = None
    transaction_ref: Optional[int] = None
    paid_at: Optional[datetime] = None
    member_name: Optional[str] = None
    sector: Optional[Sector] = None

    @property
    def net_salary(self) -> Decimal:
        return self.figures.net_salary

    @property
    def is_paid(self) -> bool:
        return self.status == PayrollStatus.PAID


@dataclass(frozen=True)
class GenerationResult:
    month: int
    year: int
    records: list = field(default_factory=list)
    skipped_paid: list = field(default_factory=list)


@dataclass(frozen=True)
class PayrollPeriodSummary:
    month: int
    year: int
    total_salary: Decimal
    staff_count: int
    paid_salary: Decimal
    pending_salary: Decimal
