from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, time
from typing import Any, Optional

from ..common.datetime_utils import resolve_period
from ..core.enums import AttendanceStatus, Sector
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AttendanceRecord:
    """Attendance of one member on one date (optionally within a shift/project context)."""

    record_id: int
    tenant_id: int
    sector: Sector
    member_id: int
    work_date: date
    status: AttendanceStatus
    context_id: Optional[int] = None
    subject: Optional[str] = None
    check_in: Optional[time] = None
    check_out: Optional[time] = None
    total_hours: float = 0.0
    work_mode: Optional[str] = None
    note: Optional[str] = None
    permission_start: Optional[time] = None
    permission_end: Optional[time] = None
    permission_reason: Optional[str] = None
    overtime_hours: float = 0.0
    overtime_reason: Optional[str] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None

    @property
    def has_interval(self) -> bool:
        return self.check_in is not None and self.check_out is not None


@dataclass(frozen=True)
class AttendanceInput:
    """Partial set of fields supplied by a caller. ``None`` means "not supplied"."""

    status: Optional[AttendanceStatus] = None
    work_date: Optional[date] = None
    context_id: Optional[int] = None
    subject: Optional[str] = None
    check_in: Optional[time] = None
    check_out: Optional[time] = None
    total_hours: Optional[float] = None
    work_mode: Optional[str] = None
    note: Optional[str] = None
    permission_start: Optional[time] = None
    permission_end: Optional[time] = None
    permission_reason: Optional[str] = None
    overtime_hours: Optional[float] = None
    overtime_reason: Optional[str] = None

    def supplied(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is not None:
                out[f.name] = value
        return out


@dataclass(frozen=True)
class AttendanceFilters:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    member_id: Optional[int] = None
    role: Optional[str] = None
    department: Optional[str] = None
    context_id: Optional[int] = None


@dataclass(frozen=True)
class QuickMarkResult:
    record: AttendanceRecord
    created: bool

    @property
    def updated(self) -> bool:
        return not self.created

    def to_dict(self) -> dict:
        key = "created" if self.created else "updated"
        return {"id": self.record.record_id, key: True, "status": self.record.status.value}


@dataclass(frozen=True)
class BulkMarkResult:
    count: int
    created: int
    updated: int


def build_filters(
    *,
    period: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    member_id: Optional[int] = None,
    role: Optional[str] = None,
    department: Optional[str] = None,
    context_id: Optional[int] = None,
) -> AttendanceFilters:
    """Filters from an exact date / ISO week / month / year period, or an explicit range."""

    if period:
        start_date, end_date = resolve_period(period)
    if start_date and end_date and start_date > end_date:
        raise ValidationError("startDate must not be after endDate")
    return AttendanceFilters(
        start_date=start_date,
        end_date=end_date,
        member_id=member_id,
        role=role or None,
        department=department or None,
        context_id=context_id,
    )
