from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..auth.principal import Principal, ensure_same_tenant
from ..common.transactions import TransactionManager
from ..core.constants import STANDARD_SHIFT_HOURS
from ..core.exceptions import NotFoundError, ValidationError
from ..integrations.audit import AuditEvent, AuditSink
from ..members.model import Member
from ..members.repository import MemberDirectory
from ..sectors.profile import SectorProfile
from .model import AttendanceFilters, AttendanceInput, AttendanceRecord
from .repository import AttendanceRepository
from .rules import merged_record, new_record
from .writer import AttendanceWriter

logger = logging.getLogger(__name__)


def load_member(members: MemberDirectory, principal: Principal, profile: SectorProfile, member_id: int) -> Member:
    member = members.get_by_id(member_id)
    if not member:
        raise NotFoundError(f"Member {member_id} not found")
    ensure_same_tenant(principal, member.tenant_id, what="member")
    if member.sector != profile.sector:
        raise ValidationError(f"Member {member_id} is not on the {profile.sector.value} roster")
    return member


def created_event(principal: Principal, profile: SectorProfile, record: AttendanceRecord) -> AuditEvent:
    return AuditEvent(
        tenant_id=principal.tenant_id,
        module=profile.sector.value,
        action="CREATED_ATTENDANCE",
        actor=principal.username,
        details={
            "record_id": record.record_id,
            "member_id": record.member_id,
            "date": record.work_date.strftime("%Y-%m-%d"),
            "status": record.status.value,
        },
    )


class AttendanceService:
    """Tenant-scoped attendance store: create, find, update, delete, list."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        members: MemberDirectory,
        writer: AttendanceWriter,
        *,
        transactions: TransactionManager,
        audit: AuditSink,
        overtime_threshold: float = STANDARD_SHIFT_HOURS,
    ):
        self._attendance = attendance
        self._members = members
        self._writer = writer
        self._tx = transactions
        self._audit = audit
        self._overtime_threshold = float(overtime_threshold)

    def get(self, principal: Principal, profile: SectorProfile, record_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(record_id)
        if not record:
            raise NotFoundError("Attendance record not found")
        ensure_same_tenant(principal, record.tenant_id, what="attendance record")
        if record.sector != profile.sector:
            raise NotFoundError("Attendance record not found")
        return record

    def find_by_key(
        self,
        principal: Principal,
        profile: SectorProfile,
        member_id: int,
        work_date: date,
        context_id: Optional[int] = None,
    ) -> Optional[AttendanceRecord]:
        return self._attendance.find_by_key(
            tenant_id=principal.tenant_id,
            sector=profile.sector,
            member_id=member_id,
            work_date=work_date,
            context_id=context_id if profile.shift_contexts else None,
        )

    def list_records(
        self, principal: Principal, profile: SectorProfile, filters: AttendanceFilters
    ) -> Sequence[AttendanceRecord]:
        return self._attendance.list_records(tenant_id=principal.tenant_id, sector=profile.sector, filters=filters)

    def create(
        self,
        principal: Principal,
        profile: SectorProfile,
        member_id: int,
        work_date: Optional[date],
        data: AttendanceInput = AttendanceInput(),
    ) -> AttendanceRecord:
        if work_date is None:
            raise ValidationError("date is required")

        with self._tx.atomic():
            member = load_member(self._members, principal, profile, member_id)
            candidate = new_record(
                profile,
                tenant_id=principal.tenant_id,
                member_id=member.member_id,
                work_date=work_date,
                data=data,
                actor=principal.username,
                overtime_threshold=self._overtime_threshold,
            )
            record = self._writer.insert(principal, profile, candidate)
            self._audit.record(created_event(principal, profile, record))

        logger.info(
            "attendance %s created: member=%s date=%s status=%s",
            record.record_id,
            record.member_id,
            record.work_date,
            record.status.value,
        )
        return record

    def update(
        self, principal: Principal, profile: SectorProfile, record_id: int, data: AttendanceInput
    ) -> AttendanceRecord:
        with self._tx.atomic():
            existing = self.get(principal, profile, record_id)
            updated = merged_record(
                profile,
                existing,
                data,
                actor=principal.username,
                overtime_threshold=self._overtime_threshold,
            )
            record = self._writer.save_changes(principal, profile, existing, updated)

        logger.info("attendance %s updated by %s", record_id, principal.username)
        return record

    def delete(self, principal: Principal, profile: SectorProfile, record_id: int) -> None:
        with self._tx.atomic():
            existing = self.get(principal, profile, record_id)
            self._writer.remove(principal, profile, existing)

        logger.info("attendance %s deleted by %s", record_id, principal.username)
