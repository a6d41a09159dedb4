from __future__ import annotations

from typing import Iterable, Optional

from ..common.datetime_utils import intervals_overlap, normalized_interval
from ..core.exceptions import ConflictError
from ..sectors.profile import SectorProfile
from .model import AttendanceRecord


def _interval(record: AttendanceRecord) -> Optional[tuple[int, int]]:
    if not record.has_interval:
        return None
    return normalized_interval(record.check_in, record.check_out)


def find_conflict(candidate: AttendanceRecord, existing: Iterable[AttendanceRecord]) -> Optional[AttendanceRecord]:
    """First existing record whose interval overlaps the candidate.

    A record without both endpoints covers the whole day and conflicts with anything.
    """

    cand = _interval(candidate)
    for other in existing:
        if other.record_id == candidate.record_id:
            continue
        span = _interval(other)
        if cand is None or span is None:
            return other
        if intervals_overlap(span, cand):
            return other
    return None


def check_create_conflict(
    profile: SectorProfile,
    candidate: AttendanceRecord,
    existing: Iterable[AttendanceRecord],
) -> None:
    existing = list(existing)
    if not profile.shift_contexts:
        if existing:
            raise ConflictError("Attendance already marked for this member on this date")
        return

    clash = find_conflict(candidate, existing)
    if clash is not None:
        if clash.has_interval:
            window = f"{clash.check_in.strftime('%H:%M')}-{clash.check_out.strftime('%H:%M')}"
        else:
            window = "a full-day record"
        raise ConflictError(f"Shift overlaps an existing attendance ({window}) for this member on this date")
