from __future__ import annotations

import logging
from typing import Optional

from ..attendance.model import AttendanceFilters
from ..auth.principal import Principal, require_privileged
from ..common.datetime_utils import month_bounds
from ..common.transactions import TransactionManager
from ..common.validators import require_month_year
from ..core.exceptions import NoDataError
from ..integrations.audit import AuditEvent, AuditSink
from ..reports.service import AttendanceStatsService
from ..sectors.profile import SectorProfile
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import GenerationResult
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollGenerator:
    """Builds DRAFT payroll rows for a month from the attendance summary."""

    def __init__(
        self,
        payroll: PayrollRepository,
        stats: AttendanceStatsService,
        *,
        transactions: TransactionManager,
        audit: AuditSink,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._payroll = payroll
        self._stats = stats
        self._tx = transactions
        self._audit = audit
        self._calculator = calculator or StandardPayrollCalculator()

    def generate(self, principal: Principal, profile: SectorProfile, month: object, year: object) -> GenerationResult:
        require_privileged(principal, "generate payroll")
        month, year = require_month_year(month, year)

        start, end = month_bounds(year, month)
        summaries = [
            s
            for s in self._stats.member_summary(principal, profile, AttendanceFilters(start_date=start, end_date=end))
            if s.total_records > 0
        ]
        if not summaries:
            raise NoDataError("No attendance data found for this month.")

        records = []
        skipped_paid = []
        with self._tx.atomic():
            for summary in summaries:
                member_id = summary.member.member_id
                current = self._payroll.get_for_member_month(
                    tenant_id=principal.tenant_id,
                    member_id=member_id,
                    month=month,
                    year=year,
                    for_update=True,
                )
                if current is not None and current.is_paid:
                    skipped_paid.append(member_id)
                    continue

                payroll_id = self._payroll.upsert_draft(
                    tenant_id=principal.tenant_id,
                    member_id=member_id,
                    month=month,
                    year=year,
                    figures=self._calculator.compute(summary),
                )
                records.append(self._payroll.get_by_id(payroll_id))

            self._audit.record(
                AuditEvent(
                    tenant_id=principal.tenant_id,
                    module="payroll",
                    action="GENERATED_PAYROLL",
                    actor=principal.username,
                    details={"month": month, "year": year, "count": len(records), "skipped_paid": skipped_paid},
                )
            )

        logger.info(
            "payroll %02d/%d generated for tenant %s: %d drafts, %d already paid",
            month,
            year,
            principal.tenant_id,
            len(records),
            len(skipped_paid),
        )
        return GenerationResult(month=month, year=year, records=records, skipped_paid=skipped_paid)
