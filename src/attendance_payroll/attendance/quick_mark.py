from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Iterable, Optional

from ..auth.principal import Principal
from ..common.transactions import TransactionManager
from ..core.constants import STANDARD_SHIFT_HOURS
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..integrations.audit import AuditSink
from ..members.model import Member
from ..members.repository import MemberDirectory
from ..sectors.profile import SectorProfile
from ..shifts.repository import ShiftRepository
from .model import AttendanceInput, BulkMarkResult, QuickMarkResult
from .repository import AttendanceRepository
from .rules import merged_record, new_record
from .service import created_event, load_member
from .writer import AttendanceWriter

logger = logging.getLogger(__name__)


class QuickMarkService:
    """Idempotent find-or-merge-or-create used by one-click and bulk marking."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        members: MemberDirectory,
        shifts: ShiftRepository,
        writer: AttendanceWriter,
        *,
        transactions: TransactionManager,
        audit: AuditSink,
        overtime_threshold: float = STANDARD_SHIFT_HOURS,
    ):
        self._attendance = attendance
        self._members = members
        self._shifts = shifts
        self._writer = writer
        self._tx = transactions
        self._audit = audit
        self._overtime_threshold = float(overtime_threshold)

    def quick_mark(
        self,
        principal: Principal,
        profile: SectorProfile,
        member_id: int,
        work_date: Optional[date],
        data: AttendanceInput = AttendanceInput(),
    ) -> QuickMarkResult:
        if work_date is None:
            raise ValidationError("date is required")

        with self._tx.atomic():
            result = self._mark(principal, profile, member_id, work_date, data)

        logger.info(
            "quick mark member=%s date=%s status=%s %s",
            member_id,
            work_date,
            result.record.status.value,
            "created" if result.created else "updated",
        )
        return result

    def bulk_mark(
        self,
        principal: Principal,
        profile: SectorProfile,
        member_ids: Iterable[int],
        work_date: Optional[date],
        status: Optional[AttendanceStatus],
    ) -> BulkMarkResult:
        ids = list(dict.fromkeys(int(m) for m in member_ids))
        if not ids:
            raise ValidationError("member_ids must not be empty")
        if work_date is None:
            raise ValidationError("date is required")

        data = AttendanceInput(status=status)
        created = 0
        with self._tx.atomic():
            for member_id in ids:
                if self._mark(principal, profile, member_id, work_date, data).created:
                    created += 1

        logger.info("bulk mark date=%s members=%d created=%d", work_date, len(ids), created)
        return BulkMarkResult(count=len(ids), created=created, updated=len(ids) - created)

    def _mark(
        self,
        principal: Principal,
        profile: SectorProfile,
        member_id: int,
        work_date: date,
        data: AttendanceInput,
    ) -> QuickMarkResult:
        member = load_member(self._members, principal, profile, member_id)
        existing = self._attendance.find_by_key(
            tenant_id=principal.tenant_id,
            sector=profile.sector,
            member_id=member.member_id,
            work_date=work_date,
            context_id=data.context_id if profile.shift_contexts else None,
            for_update=True,
        )

        if existing:
            merged = merged_record(
                profile,
                existing,
                replace(data, work_date=None),
                actor=principal.username,
                overtime_threshold=self._overtime_threshold,
            )
            return QuickMarkResult(self._writer.save_changes(principal, profile, existing, merged), created=False)

        candidate = new_record(
            profile,
            tenant_id=principal.tenant_id,
            member_id=member.member_id,
            work_date=work_date,
            data=self._with_default_shift(profile, member, data),
            actor=principal.username,
            overtime_threshold=self._overtime_threshold,
        )
        record = self._writer.insert(principal, profile, candidate)
        self._audit.record(created_event(principal, profile, record))
        return QuickMarkResult(record, created=True)

    def _with_default_shift(self, profile: SectorProfile, member: Member, data: AttendanceInput) -> AttendanceInput:
        if not profile.uses_default_shift or not member.default_shift_id:
            return data
        if data.status not in (None, AttendanceStatus.PRESENT):
            return data
        if data.total_hours is not None or data.check_in is not None or data.check_out is not None:
            return data

        shift = self._shifts.get_by_id(member.default_shift_id)
        if not shift or shift.tenant_id != member.tenant_id:
            return data
        return replace(data, check_in=shift.start_time, check_out=shift.end_time)
