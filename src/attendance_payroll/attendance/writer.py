from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional

from ..auth.principal import Principal
from ..core.enums import AttendanceStatus, LeaveType
from ..core.exceptions import NotFoundError
from ..leave.ledger import LeaveBalanceLedger
from ..locks.service import AttendanceLockManager
from ..sectors.profile import SectorProfile
from .conflicts import check_create_conflict
from .model import AttendanceRecord
from .policy import TemporalPolicy
from .repository import AttendanceRepository


class AttendanceWriter:
    """Ordered mutation path shared by direct edits and quick mark.

    temporal policy -> lock -> leave balance -> conflict (insert only) -> write.
    Callers run it inside a transaction.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        leave: LeaveBalanceLedger,
        locks: AttendanceLockManager,
        temporal: TemporalPolicy,
    ):
        self._attendance = attendance
        self._leave = leave
        self._locks = locks
        self._temporal = temporal

    def check_policy(self, principal: Principal, profile: SectorProfile, *dates: date) -> None:
        touched = sorted(set(dates))
        for d in touched:
            self._temporal.ensure_allowed(principal, d)
        for d in touched:
            self._locks.ensure_writable(principal, profile, d)

    def insert(self, principal: Principal, profile: SectorProfile, candidate: AttendanceRecord) -> AttendanceRecord:
        self.check_policy(principal, profile, candidate.work_date)

        leave_type = _newly_charged(profile, None, candidate.status)
        if leave_type:
            self._leave.ensure_available(candidate.member_id, leave_type)

        existing = self._attendance.list_for_member_date(
            tenant_id=candidate.tenant_id,
            sector=candidate.sector,
            member_id=candidate.member_id,
            work_date=candidate.work_date,
            for_update=True,
        )
        check_create_conflict(profile, candidate, existing)

        if leave_type:
            self._leave.charge(candidate.member_id, leave_type)
        record_id = self._attendance.insert(candidate, single_per_day=not profile.shift_contexts)
        return replace(candidate, record_id=record_id)

    def save_changes(
        self,
        principal: Principal,
        profile: SectorProfile,
        existing: AttendanceRecord,
        updated: AttendanceRecord,
    ) -> AttendanceRecord:
        self.check_policy(principal, profile, existing.work_date, updated.work_date)

        leave_type = _newly_charged(profile, existing.status, updated.status)
        if leave_type:
            self._leave.charge(updated.member_id, leave_type)

        if not self._attendance.update(updated):
            raise NotFoundError("Attendance record not found")
        return updated

    def remove(self, principal: Principal, profile: SectorProfile, existing: AttendanceRecord) -> None:
        self.check_policy(principal, profile, existing.work_date)
        if not self._attendance.delete(existing.record_id):
            raise NotFoundError("Attendance record not found")


def _newly_charged(
    profile: SectorProfile,
    previous: Optional[AttendanceStatus],
    status: AttendanceStatus,
) -> Optional[LeaveType]:
    leave_type = status.leave_type
    if not profile.charges(leave_type) or previous == status:
        return None
    return leave_type
