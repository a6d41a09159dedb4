from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from ..core.constants import HALF_DAY_WEIGHT
from ..core.enums import AttendanceStatus
from ..members.model import Member


@dataclass(frozen=True)
class MemberPeriodSummary:
    """Per-member rollup of attendance over a period."""

    member: Member
    counts: dict = field(default_factory=dict)
    total_records: int = 0
    working_days: int = 0
    hours_worked: float = 0.0
    overtime_hours: float = 0.0
    base_wage: Optional[Decimal] = None
    ot_wage: Optional[Decimal] = None
    estimated_total_wage: Optional[Decimal] = None

    def count(self, status: AttendanceStatus) -> int:
        return int(self.counts.get(status, 0))

    @property
    def present_equivalent(self) -> Decimal:
        return Decimal(self.count(AttendanceStatus.PRESENT)) + Decimal(
            self.count(AttendanceStatus.HALF_DAY)
        ) * HALF_DAY_WEIGHT

    def to_dict(self) -> dict:
        out = {
            "member_id": self.member.member_id,
            "name": self.member.full_name,
            "role": self.member.role,
            "department": self.member.department,
            "wage_type": self.member.wage_type.value,
        }
        for status in AttendanceStatus:
            out[status.value] = self.count(status)
        out.update(
            {
                "total_records": self.total_records,
                "working_days": self.working_days,
                "hours_worked": round(self.hours_worked, 2),
                "overtime_hours": round(self.overtime_hours, 2),
            }
        )
        if self.estimated_total_wage is not None:
            out.update(
                {
                    "base_wage": float(self.base_wage),
                    "ot_wage": float(self.ot_wage),
                    "estimated_total_wage": float(self.estimated_total_wage),
                }
            )
        return out
