from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional

from ..common.datetime_utils import duration_hours
from ..common.validators import require_non_negative
from ..core.enums import AttendanceStatus
from ..sectors.profile import SectorProfile
from .model import AttendanceInput, AttendanceRecord


def overtime_for(total_hours: float, threshold: float) -> float:
    return round(max(0.0, float(total_hours) - float(threshold)), 2)


def new_record(
    profile: SectorProfile,
    *,
    tenant_id: int,
    member_id: int,
    work_date: date,
    data: AttendanceInput,
    actor: Optional[str],
    overtime_threshold: float,
) -> AttendanceRecord:
    values = data.supplied()
    values.pop("work_date", None)
    status = values.pop("status", AttendanceStatus.PRESENT)

    record = AttendanceRecord(
        record_id=0,
        tenant_id=int(tenant_id),
        sector=profile.sector,
        member_id=int(member_id),
        work_date=work_date,
        status=status,
        subject=profile.default_subject,
        created_by=actor,
        updated_by=actor,
    )
    record = replace(record, **values)
    return _finalize(profile, record, data, None, overtime_threshold)


def merged_record(
    profile: SectorProfile,
    existing: AttendanceRecord,
    data: AttendanceInput,
    *,
    actor: Optional[str],
    overtime_threshold: float,
) -> AttendanceRecord:
    """Overlay supplied fields on ``existing``; absent fields keep their stored value."""

    record = replace(existing, **data.supplied())
    record = replace(record, updated_by=actor or existing.updated_by)
    return _finalize(profile, record, data, existing, overtime_threshold)


def _finalize(
    profile: SectorProfile,
    record: AttendanceRecord,
    data: AttendanceInput,
    previous: Optional[AttendanceRecord],
    overtime_threshold: float,
) -> AttendanceRecord:
    require_non_negative(data.total_hours, "total_hours")
    require_non_negative(data.overtime_hours, "overtime_hours")

    if not profile.shift_contexts:
        record = replace(record, context_id=None)

    if not profile.tracks_time:
        return replace(record, check_in=None, check_out=None, total_hours=0.0)

    times_changed = previous is None or data.check_in is not None or data.check_out is not None
    if data.total_hours is not None:
        total = round(float(data.total_hours), 2)
    elif record.has_interval and times_changed:
        total = duration_hours(record.check_in, record.check_out)
    else:
        total = float(record.total_hours or 0.0)

    if data.overtime_hours is not None:
        overtime = round(float(data.overtime_hours), 2)
    elif previous is None or total != previous.total_hours:
        overtime = overtime_for(total, overtime_threshold)
    else:
        overtime = record.overtime_hours

    return replace(record, total_hours=total, overtime_hours=overtime)
