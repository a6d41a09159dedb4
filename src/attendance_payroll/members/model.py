from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.constants import PAYROLL_DAYS_PER_MONTH, STANDARD_SHIFT_HOURS
from ..core.enums import LeaveType, Sector, WageType


@dataclass(frozen=True)
class Member:
    """Member directory entry: wage terms and leave balances."""

    member_id: int
    tenant_id: int
    sector: Sector
    full_name: str
    role: Optional[str] = None
    department: Optional[str] = None
    wage_type: WageType = WageType.MONTHLY
    monthly_salary: Decimal = Decimal("0")
    daily_wage: Decimal = Decimal("0")
    hourly_rate: Decimal = Decimal("0")
    overtime_rate: Decimal = Decimal("0")
    cl_balance: Decimal = Decimal("0")
    sl_balance: Decimal = Decimal("0")
    el_balance: Decimal = Decimal("0")
    default_shift_id: Optional[int] = None
    is_active: bool = True

    def balance_for(self, leave_type: LeaveType) -> Decimal:
        return {
            LeaveType.CL: self.cl_balance,
            LeaveType.SL: self.sl_balance,
            LeaveType.EL: self.el_balance,
        }[leave_type]

    @property
    def payroll_rate(self) -> Decimal:
        """Per-day rate used by payroll generation."""
        if self.daily_wage > 0:
            return self.daily_wage
        if self.monthly_salary > 0:
            return self.monthly_salary / PAYROLL_DAYS_PER_MONTH
        return self.hourly_rate * STANDARD_SHIFT_HOURS
