from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ...core.constants import PAYROLL_DAYS_PER_MONTH
from ...core.enums import WageType
from ...members.model import Member
from .base import WageCalculator


class MonthlyWageCalculator(WageCalculator):
    def base_wage(self, member: Member, *, present_equivalent: Decimal, hours_worked: Decimal) -> Decimal:
        return member.monthly_salary / PAYROLL_DAYS_PER_MONTH * present_equivalent


class DailyWageCalculator(WageCalculator):
    def base_wage(self, member: Member, *, present_equivalent: Decimal, hours_worked: Decimal) -> Decimal:
        return member.daily_wage * present_equivalent


class HourlyWageCalculator(WageCalculator):
    def base_wage(self, member: Member, *, present_equivalent: Decimal, hours_worked: Decimal) -> Decimal:
        return member.hourly_rate * hours_worked


@dataclass
class WageCalculatorFactory:
    """Factory Pattern: pick the wage strategy for a member's wage type."""

    def for_wage_type(self, wage_type: WageType) -> WageCalculator:
        if wage_type == WageType.DAILY:
            return DailyWageCalculator()
        if wage_type == WageType.HOURLY:
            return HourlyWageCalculator()
        return MonthlyWageCalculator()
