from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.policy import TemporalPolicy
from .attendance.quick_mark import QuickMarkService
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.writer import AttendanceWriter
from .common.datetime_utils import Clock, SystemClock
from .common.transactions import TransactionManager
from .core.constants import STANDARD_SHIFT_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .integrations.audit import AuditSink, ChainedAuditSink, LoggingAuditSink, MySQLAuditSink
from .integrations.ledger import ExpenseLedger, MySQLExpenseLedger
from .leave.ledger import LeaveBalanceLedger
from .locks.mysql_lock_repository import MySQLLockRepository
from .locks.repository import LockRepository
from .locks.service import AttendanceLockManager
from .members.mysql_member_repository import MySQLMemberDirectory
from .members.repository import MemberDirectory
from .payroll.generator import PayrollGenerator
from .payroll.lifecycle import PayrollLifecycle
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .reports.service import AttendanceStatsService
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository
from .shifts.service import ShiftService


@dataclass(frozen=True)
class Container:
    conn: Optional[Any]

    attendance_repo: AttendanceRepository
    members: MemberDirectory
    shifts_repo: ShiftRepository
    locks_repo: LockRepository
    payroll_repo: PayrollRepository
    ledger: ExpenseLedger
    audit: AuditSink

    lock_manager: AttendanceLockManager
    leave_ledger: LeaveBalanceLedger
    attendance_service: AttendanceService
    quick_mark_service: QuickMarkService
    stats_service: AttendanceStatsService
    shift_service: ShiftService
    payroll_generator: PayrollGenerator
    payroll_lifecycle: PayrollLifecycle
    payroll_service: PayrollService


def assemble(
    *,
    transactions: TransactionManager,
    attendance_repo: AttendanceRepository,
    members: MemberDirectory,
    shifts_repo: ShiftRepository,
    locks_repo: LockRepository,
    payroll_repo: PayrollRepository,
    ledger: ExpenseLedger,
    audit: Optional[AuditSink] = None,
    clock: Optional[Clock] = None,
    overtime_threshold: float = STANDARD_SHIFT_HOURS,
    conn: Optional[Any] = None,
) -> Container:
    """Wire services over any set of repository implementations."""

    clock = clock or SystemClock()
    audit = audit or LoggingAuditSink()

    lock_manager = AttendanceLockManager(locks_repo, transactions=transactions, audit=audit, clock=clock)
    leave_ledger = LeaveBalanceLedger(members)
    writer = AttendanceWriter(attendance_repo, leave_ledger, lock_manager, TemporalPolicy(clock))
    attendance_service = AttendanceService(
        attendance_repo,
        members,
        writer,
        transactions=transactions,
        audit=audit,
        overtime_threshold=overtime_threshold,
    )
    quick_mark_service = QuickMarkService(
        attendance_repo,
        members,
        shifts_repo,
        writer,
        transactions=transactions,
        audit=audit,
        overtime_threshold=overtime_threshold,
    )
    stats_service = AttendanceStatsService(attendance_repo, members)
    payroll_generator = PayrollGenerator(payroll_repo, stats_service, transactions=transactions, audit=audit)
    payroll_lifecycle = PayrollLifecycle(
        payroll_repo, members, ledger, transactions=transactions, audit=audit, clock=clock
    )

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        members=members,
        shifts_repo=shifts_repo,
        locks_repo=locks_repo,
        payroll_repo=payroll_repo,
        ledger=ledger,
        audit=audit,
        lock_manager=lock_manager,
        leave_ledger=leave_ledger,
        attendance_service=attendance_service,
        quick_mark_service=quick_mark_service,
        stats_service=stats_service,
        shift_service=ShiftService(shifts_repo),
        payroll_generator=payroll_generator,
        payroll_lifecycle=payroll_lifecycle,
        payroll_service=PayrollService(payroll_repo),
    )


def build_container(*, db_config: dict, overtime_threshold: float = STANDARD_SHIFT_HOURS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        transactions=conn,
        attendance_repo=MySQLAttendanceRepository(conn),
        members=MySQLMemberDirectory(conn),
        shifts_repo=MySQLShiftRepository(conn),
        locks_repo=MySQLLockRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        ledger=MySQLExpenseLedger(conn),
        audit=ChainedAuditSink(MySQLAuditSink(conn), LoggingAuditSink()),
        overtime_threshold=overtime_threshold,
        conn=conn,
    )
