from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from ..auth.principal import Principal
from ..common.validators import require_month_year
from ..core.enums import PayrollStatus
from ..sectors.profile import SectorProfile
from .model import PayrollPeriodSummary, PayrollRecord
from .repository import PayrollRepository


class PayrollService:
    """Read side of payroll: listing and period totals for one sector."""

    def __init__(self, payroll: PayrollRepository):
        self._payroll = payroll

    def list_payroll(
        self,
        principal: Principal,
        profile: SectorProfile,
        month: object,
        year: object,
        *,
        status: Optional[PayrollStatus] = None,
    ) -> Sequence[PayrollRecord]:
        m, y = require_month_year(month, year)
        return self._payroll.list_for_month(
            tenant_id=principal.tenant_id, month=m, year=y, sector=profile.sector, status=status
        )

    def period_summary(
        self, principal: Principal, profile: SectorProfile, month: object, year: object
    ) -> PayrollPeriodSummary:
        records = self.list_payroll(principal, profile, month, year)
        m, y = require_month_year(month, year)

        total = sum((r.net_salary for r in records), Decimal("0"))
        paid = sum((r.net_salary for r in records if r.is_paid), Decimal("0"))
        return PayrollPeriodSummary(
            month=m,
            year=y,
            total_salary=total,
            staff_count=len(records),
            paid_salary=paid,
            pending_salary=total - paid,
        )
