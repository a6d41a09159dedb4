"""In-memory repositories used across the test suite."""

from __future__ import annotations

import copy
from collections import Counter
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from decimal import Decimal
from typing import Optional

from attendance_payroll.attendance.model import AttendanceFilters, AttendanceRecord
from attendance_payroll.auth.principal import Principal
from attendance_payroll.common.datetime_utils import FixedClock
from attendance_payroll.container import Container, assemble
from attendance_payroll.core.enums import LeaveType, PayrollStatus, Role, Sector
from attendance_payroll.core.exceptions import ConflictError
from attendance_payroll.integrations.audit import AuditEvent
from attendance_payroll.integrations.ledger import ExpenseEntry
from attendance_payroll.locks.model import AttendanceLock, LockScope
from attendance_payroll.members.model import Member
from attendance_payroll.payroll.model import PayrollFigures, PayrollRecord
from attendance_payroll.shifts.model import Shift

OWNER = Principal(tenant_id=1, user_id=1, username="owner", role=Role.OWNER)
ADMIN = Principal(tenant_id=1, user_id=2, username="admin", role=Role.ADMIN)
STAFF = Principal(tenant_id=1, user_id=3, username="staff", role=Role.STAFF)
OTHER_TENANT = Principal(tenant_id=2, user_id=9, username="intruder", role=Role.OWNER)


def make_member(member_id: int, sector: Sector = Sector.EDUCATION, *, tenant_id: int = 1, **kwargs) -> Member:
    kwargs.setdefault("full_name", f"Member {member_id}")
    return Member(member_id=member_id, tenant_id=tenant_id, sector=sector, **kwargs)


class InMemoryMembers:
    def __init__(self, *members: Member):
        self.members: dict[int, Member] = {m.member_id: m for m in members}

    def add(self, member: Member) -> Member:
        self.members[member.member_id] = member
        return member

    def get_by_id(self, member_id: int) -> Optional[Member]:
        return self.members.get(int(member_id))

    def list_active(self, *, tenant_id, sector, role=None, department=None, member_id=None):
        out = []
        for m in sorted(self.members.values(), key=lambda x: x.full_name):
            if m.tenant_id != tenant_id or m.sector != sector or not m.is_active:
                continue
            if role and m.role != role:
                continue
            if department and m.department != department:
                continue
            if member_id and m.member_id != member_id:
                continue
            out.append(m)
        return out

    def decrement_leave_balance(self, *, member_id: int, leave_type: LeaveType) -> bool:
        m = self.members.get(member_id)
        if not m or m.balance_for(leave_type) <= 0:
            return False
        field_name = f"{leave_type.value.lower()}_balance"
        self.members[member_id] = replace(m, **{field_name: max(Decimal("0"), m.balance_for(leave_type) - 1)})
        return True


class InMemoryAttendance:
    def __init__(self, members: Optional[InMemoryMembers] = None):
        self.records: dict[int, AttendanceRecord] = {}
        self._members = members
        self._id = 0

    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        return self.records.get(record_id)

    def find_by_key(self, *, tenant_id, sector, member_id, work_date, context_id=None, for_update=False):
        for r in sorted(self.records.values(), key=lambda x: x.record_id):
            if (r.tenant_id, r.sector, r.member_id, r.work_date, r.context_id) == (
                tenant_id,
                sector,
                member_id,
                work_date,
                context_id,
            ):
                return r
        return None

    def list_for_member_date(self, *, tenant_id, sector, member_id, work_date, for_update=False):
        return [
            r
            for r in sorted(self.records.values(), key=lambda x: x.record_id)
            if (r.tenant_id, r.sector, r.member_id, r.work_date) == (tenant_id, sector, member_id, work_date)
        ]

    def insert(self, record: AttendanceRecord, *, single_per_day: bool) -> int:
        if single_per_day and self.list_for_member_date(
            tenant_id=record.tenant_id, sector=record.sector, member_id=record.member_id, work_date=record.work_date
        ):
            raise ConflictError("duplicate day")
        self._id += 1
        self.records[self._id] = replace(record, record_id=self._id)
        return self._id

    def update(self, record: AttendanceRecord) -> bool:
        if record.record_id not in self.records:
            return False
        self.records[record.record_id] = record
        return True

    def delete(self, record_id: int) -> bool:
        return self.records.pop(record_id, None) is not None

    def list_records(self, *, tenant_id, sector, filters: AttendanceFilters):
        out = []
        for r in self.records.values():
            if r.tenant_id != tenant_id or r.sector != sector:
                continue
            if filters.start_date and r.work_date < filters.start_date:
                continue
            if filters.end_date and r.work_date > filters.end_date:
                continue
            if filters.member_id and r.member_id != filters.member_id:
                continue
            if filters.context_id and r.context_id != filters.context_id:
                continue
            if (filters.role or filters.department) and self._members:
                m = self._members.get_by_id(r.member_id)
                if filters.role and (not m or m.role != filters.role):
                    continue
                if filters.department and (not m or m.department != filters.department):
                    continue
            out.append(r)
        return sorted(out, key=lambda x: (x.work_date, x.member_id), reverse=True)

    def count_by_status(self, *, tenant_id, sector, filters):
        return dict(Counter(r.status for r in self.list_records(tenant_id=tenant_id, sector=sector, filters=filters)))


class InMemoryShifts:
    def __init__(self, *shifts: Shift):
        self.shifts: dict[int, Shift] = {s.shift_id: s for s in shifts}
        self._id = max(self.shifts, default=0)

    def list_for_tenant(self, *, tenant_id, sector):
        return [s for s in self.shifts.values() if s.tenant_id == tenant_id and s.sector == sector]

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        return self.shifts.get(shift_id)

    def create(self, *, tenant_id, sector, shift_name, start_time: time, end_time: time) -> int:
        self._id += 1
        self.shifts[self._id] = Shift(self._id, tenant_id, sector, shift_name, start_time, end_time)
        return self._id

    def delete(self, shift_id: int) -> bool:
        return self.shifts.pop(shift_id, None) is not None


class InMemoryLocks:
    def __init__(self):
        self.locks: dict[tuple, AttendanceLock] = {}

    def get(self, *, tenant_id, sector, scope: LockScope):
        return self.locks.get((tenant_id, sector, scope.key))

    def save_locked(self, *, tenant_id, sector, scope, actor, at) -> None:
        key = (tenant_id, sector, scope.key)
        current = self.locks.get(key)
        if current:
            self.locks[key] = replace(current, is_locked=True, locked_by=actor, locked_at=at)
        else:
            self.locks[key] = AttendanceLock(tenant_id, sector, scope, True, locked_by=actor, locked_at=at)

    def save_unlocked(self, *, tenant_id, sector, scope, actor, reason, at) -> bool:
        key = (tenant_id, sector, scope.key)
        current = self.locks.get(key)
        if not current:
            return False
        self.locks[key] = replace(current, is_locked=False, unlocked_by=actor, unlocked_at=at, unlock_reason=reason)
        return True

    def list_for_month(self, *, tenant_id, sector, month, year):
        return sorted(
            (
                lk
                for (t, s, _), lk in self.locks.items()
                if t == tenant_id and s == sector and lk.scope.month == month and lk.scope.year == year
            ),
            key=lambda lk: lk.scope.key,
        )


class InMemoryPayroll:
    def __init__(self, members: Optional[InMemoryMembers] = None):
        self.records: dict[int, PayrollRecord] = {}
        self._members = members
        self._id = 0
        self.fail_mark_paid = False

    def get_by_id(self, payroll_id: int, *, for_update: bool = False):
        return self.records.get(payroll_id)

    def get_for_member_month(self, *, tenant_id, member_id, month, year, for_update=False):
        for r in self.records.values():
            if (r.tenant_id, r.member_id, r.month, r.year) == (tenant_id, member_id, month, year):
                return r
        return None

    def upsert_draft(self, *, tenant_id, member_id, month, year, figures: PayrollFigures) -> int:
        current = self.get_for_member_month(tenant_id=tenant_id, member_id=member_id, month=month, year=year)
        if current:
            self.records[current.payroll_id] = replace(current, figures=figures, status=PayrollStatus.DRAFT)
            return current.payroll_id
        self._id += 1
        member = self._members.get_by_id(member_id) if self._members else None
        self.records[self._id] = PayrollRecord(
            payroll_id=self._id,
            tenant_id=tenant_id,
            member_id=member_id,
            month=month,
            year=year,
            figures=figures,
            member_name=member.full_name if member else None,
            sector=member.sector if member else None,
        )
        return self._id

    def mark_approved(self, payroll_id: int) -> bool:
        r = self.records.get(payroll_id)
        if not r or r.status != PayrollStatus.DRAFT:
            return False
        self.records[payroll_id] = replace(r, status=PayrollStatus.APPROVED)
        return True

    def mark_paid(self, *, payroll_id, payment_mode, transaction_ref, paid_at) -> bool:
        r = self.records.get(payroll_id)
        if self.fail_mark_paid or not r or r.status != PayrollStatus.APPROVED:
            return False
        self.records[payroll_id] = replace(
            r,
            status=PayrollStatus.PAID,
            payment_mode=payment_mode,
            transaction_ref=transaction_ref,
            paid_at=paid_at,
        )
        return True

    def list_for_month(self, *, tenant_id, month, year, sector=None, status=None):
        return [
            r
            for r in self.records.values()
            if (r.tenant_id, r.month, r.year) == (tenant_id, month, year)
            and (sector is None or r.sector == sector)
            and (status is None or r.status == status)
        ]


class InMemoryLedger:
    def __init__(self):
        self.entries: dict[int, ExpenseEntry] = {}
        self._id = 100

    def create_expense(self, entry: ExpenseEntry) -> int:
        self._id += 1
        self.entries[self._id] = entry
        return self._id


class RecordingAudit:
    def __init__(self):
        self.events: list[AuditEvent] = []

    def record(self, event: AuditEvent) -> None:
        self.events.append(event)

    def actions(self) -> list[str]:
        return [e.action for e in self.events]


class InMemoryTransactions:
    """Snapshots the given stores on the outermost atomic() and restores them on error."""

    def __init__(self, *stores):
        self._stores = stores
        self._depth = 0

    @contextmanager
    def atomic(self):
        if self._depth:
            self._depth += 1
            try:
                yield
            finally:
                self._depth -= 1
            return

        # Stores referencing each other keep pointing at the live objects.
        memo = {id(s): s for s in self._stores}
        saved = [copy.deepcopy(s.__dict__, memo) for s in self._stores]
        self._depth = 1
        try:
            yield
        except Exception:
            for store, state in zip(self._stores, saved):
                store.__dict__.clear()
                store.__dict__.update(state)
            raise
        finally:
            self._depth = 0


@dataclass
class FakeEnv:
    clock: FixedClock
    members: InMemoryMembers
    attendance: InMemoryAttendance
    shifts: InMemoryShifts
    locks: InMemoryLocks
    payroll: InMemoryPayroll
    ledger: InMemoryLedger
    audit: RecordingAudit
    container: Container = field(init=False)

    def __post_init__(self):
        stores = (self.members, self.attendance, self.locks, self.payroll, self.ledger, self.audit)
        self.container = assemble(
            transactions=InMemoryTransactions(*stores),
            attendance_repo=self.attendance,
            members=self.members,
            shifts_repo=self.shifts,
            locks_repo=self.locks,
            payroll_repo=self.payroll,
            ledger=self.ledger,
            audit=self.audit,
            clock=self.clock,
        )


def build_env(now: datetime, *members: Member, shifts: tuple = ()) -> FakeEnv:
    directory = InMemoryMembers(*members)
    return FakeEnv(
        clock=FixedClock(now),
        members=directory,
        attendance=InMemoryAttendance(directory),
        shifts=InMemoryShifts(*shifts),
        locks=InMemoryLocks(),
        payroll=InMemoryPayroll(directory),
        ledger=InMemoryLedger(),
        audit=RecordingAudit(),
    )


def t(value: str) -> time:
    hh, mm = value.split(":")
    return time(int(hh), int(mm))


def d(value: str) -> date:
    return date.fromisoformat(value)
