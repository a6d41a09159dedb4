from __future__ import annotations

from decimal import Decimal

from ...core.constants import HALF_DAY_WEIGHT, PAYROLL_DAYS_PER_MONTH
from ...core.enums import AttendanceStatus
from ...reports.model import MemberPeriodSummary
from ..model import PayrollFigures
from .base import PayrollCalculator, money

_PAID_STATUSES = (
    AttendanceStatus.PRESENT,
    AttendanceStatus.LATE,
    AttendanceStatus.PERMISSION,
    AttendanceStatus.CL,
    AttendanceStatus.SL,
    AttendanceStatus.EL,
)


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: effective present days times the per-day rate, 30-day base."""

    def effective_present(self, summary: MemberPeriodSummary) -> Decimal:
        full_days = sum(summary.count(s) for s in _PAID_STATUSES)
        return Decimal(full_days) + Decimal(summary.count(AttendanceStatus.HALF_DAY)) * HALF_DAY_WEIGHT

    def compute(self, summary: MemberPeriodSummary) -> PayrollFigures:
        rate = summary.member.payroll_rate
        present = (
            summary.count(AttendanceStatus.PRESENT)
            + summary.count(AttendanceStatus.LATE)
            + summary.count(AttendanceStatus.PERMISSION)
        )
        return PayrollFigures(
            working_days=Decimal(summary.working_days or PAYROLL_DAYS_PER_MONTH),
            present_days=Decimal(present),
            absent_days=Decimal(summary.count(AttendanceStatus.ABSENT)),
            half_days=Decimal(summary.count(AttendanceStatus.HALF_DAY)),
            cl_used=Decimal(summary.count(AttendanceStatus.CL)),
            sl_used=Decimal(summary.count(AttendanceStatus.SL)),
            el_used=Decimal(summary.count(AttendanceStatus.EL)),
            base_salary=money(rate * PAYROLL_DAYS_PER_MONTH),
            net_salary=money(self.effective_present(summary) * rate),
        )
