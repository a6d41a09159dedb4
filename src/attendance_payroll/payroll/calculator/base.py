from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import ROUND_HALF_UP, Decimal

from ...members.model import Member
from ...reports.model import MemberPeriodSummary
from ..model import PayrollFigures

CENT = Decimal("0.01")


def money(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


class WageCalculator(ABC):
    """Estimated base wage for one wage type (Strategy Pattern)."""

    @abstractmethod
    def base_wage(self, member: Member, *, present_equivalent: Decimal, hours_worked: Decimal) -> Decimal:
        raise NotImplementedError


class PayrollCalculator(ABC):
    """Turns a member's monthly summary into payroll figures."""

    @abstractmethod
    def compute(self, summary: MemberPeriodSummary) -> PayrollFigures:
        raise NotImplementedError
