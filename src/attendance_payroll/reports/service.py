from __future__ import annotations

from collections import Counter
from dataclasses import replace
from decimal import Decimal
from typing import Optional, Sequence

from ..attendance.model import AttendanceFilters, AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..auth.principal import Principal
from ..core.enums import AttendanceStatus
from ..members.model import Member
from ..members.repository import MemberDirectory
from ..payroll.calculator.base import money
from ..payroll.calculator.wage_calculators import WageCalculatorFactory
from ..sectors.profile import SectorProfile
from .model import MemberPeriodSummary


class AttendanceStatsService:
    """Read side: status counts and per-member period rollups."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        members: MemberDirectory,
        *,
        wage_factory: Optional[WageCalculatorFactory] = None,
    ):
        self._attendance = attendance
        self._members = members
        self._wage_factory = wage_factory or WageCalculatorFactory()

    def stats(self, principal: Principal, profile: SectorProfile, filters: AttendanceFilters) -> dict:
        counts = self._attendance.count_by_status(tenant_id=principal.tenant_id, sector=profile.sector, filters=filters)
        out = {status.value: int(counts.get(status, 0)) for status in AttendanceStatus}
        out["total"] = sum(counts.values())
        return out

    def member_summary(
        self, principal: Principal, profile: SectorProfile, filters: AttendanceFilters
    ) -> list[MemberPeriodSummary]:
        members = self._members.list_active(
            tenant_id=principal.tenant_id,
            sector=profile.sector,
            role=filters.role,
            department=filters.department,
            member_id=filters.member_id,
        )
        records = self._attendance.list_records(tenant_id=principal.tenant_id, sector=profile.sector, filters=filters)

        by_member: dict[int, list[AttendanceRecord]] = {}
        for r in records:
            by_member.setdefault(r.member_id, []).append(r)

        return [self._summarize(profile, m, by_member.get(m.member_id, [])) for m in members]

    def _summarize(self, profile: SectorProfile, member: Member, records: Sequence[AttendanceRecord]) -> MemberPeriodSummary:
        counts = Counter(r.status for r in records)
        summary = MemberPeriodSummary(
            member=member,
            counts=dict(counts),
            total_records=len(records),
            working_days=sum(1 for r in records if r.status.counts_as_working_day),
            hours_worked=round(sum(r.total_hours for r in records), 2),
            overtime_hours=round(sum(r.overtime_hours for r in records), 2),
        )
        if not profile.wage_aware:
            return summary

        calculator = self._wage_factory.for_wage_type(member.wage_type)
        base = money(
            calculator.base_wage(
                member,
                present_equivalent=summary.present_equivalent,
                hours_worked=Decimal(str(summary.hours_worked)),
            )
        )
        ot = money(member.overtime_rate * Decimal(str(summary.overtime_hours)))
        return replace(summary, base_wage=base, ot_wage=ot, estimated_total_wage=base + ot)
