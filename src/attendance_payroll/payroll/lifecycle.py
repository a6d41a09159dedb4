from __future__ import annotations

import logging
from typing import Optional

from ..auth.principal import Principal, ensure_same_tenant, require_privileged
from ..common.datetime_utils import Clock, SystemClock
from ..common.transactions import TransactionManager
from ..core.constants import DEFAULT_PAYMENT_MODE
from ..core.enums import PayrollStatus
from ..core.exceptions import ImmutableRecordError, InvalidTransitionError, NotFoundError
from ..integrations.audit import AuditEvent, AuditSink
from ..integrations.ledger import ExpenseEntry, ExpenseLedger
from ..members.repository import MemberDirectory
from ..sectors.profile import SectorProfile
from .model import PayrollRecord
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


class PayrollLifecycle:
    """DRAFT -> APPROVED -> PAID. PAID is terminal and immutable."""

    def __init__(
        self,
        payroll: PayrollRepository,
        members: MemberDirectory,
        ledger: ExpenseLedger,
        *,
        transactions: TransactionManager,
        audit: AuditSink,
        clock: Optional[Clock] = None,
    ):
        self._payroll = payroll
        self._members = members
        self._ledger = ledger
        self._tx = transactions
        self._audit = audit
        self._clock = clock or SystemClock()

    def approve(self, principal: Principal, profile: SectorProfile, payroll_id: int) -> PayrollRecord:
        require_privileged(principal, "approve payroll")
        with self._tx.atomic():
            record = self._load(principal, profile, payroll_id)
            if record.status != PayrollStatus.DRAFT:
                raise InvalidTransitionError(f"Only draft payroll can be approved (current: {record.status.value})")
            if not self._payroll.mark_approved(payroll_id):
                raise InvalidTransitionError("Payroll changed state concurrently; reload and retry")
            self._audit.record(
                AuditEvent(
                    tenant_id=principal.tenant_id,
                    module="payroll",
                    action="APPROVED_PAYROLL",
                    actor=principal.username,
                    details={"payroll_id": payroll_id, "member_id": record.member_id},
                )
            )
            approved = self._payroll.get_by_id(payroll_id)

        logger.info("payroll %s approved by %s", payroll_id, principal.username)
        return approved

    def pay(
        self,
        principal: Principal,
        profile: SectorProfile,
        payroll_id: int,
        payment_mode: Optional[str] = None,
    ) -> PayrollRecord:
        require_privileged(principal, "pay payroll")
        payment_mode = (payment_mode or "").strip() or DEFAULT_PAYMENT_MODE

        with self._tx.atomic():
            record = self._load(principal, profile, payroll_id)
            if record.status != PayrollStatus.APPROVED:
                raise InvalidTransitionError("Payroll must be approved before it can be paid")

            member = self._members.get_by_id(record.member_id)
            name = member.full_name if member else (record.member_name or f"Member {record.member_id}")
            paid_at = self._clock.now()

            transaction_ref = self._ledger.create_expense(
                ExpenseEntry(
                    tenant_id=principal.tenant_id,
                    amount=record.net_salary,
                    txn_date=paid_at,
                    label=f"Salary Payment - {name} ({record.month}/{record.year})",
                    member_id=record.member_id,
                    payment_mode=payment_mode,
                    created_by=principal.username,
                )
            )
            if not self._payroll.mark_paid(
                payroll_id=payroll_id,
                payment_mode=payment_mode,
                transaction_ref=transaction_ref,
                paid_at=paid_at,
            ):
                # Raising rolls back the ledger entry written above.
                raise InvalidTransitionError("Payroll changed state concurrently; reload and retry")

            self._audit.record(
                AuditEvent(
                    tenant_id=principal.tenant_id,
                    module="payroll",
                    action="PAID_PAYROLL",
                    actor=principal.username,
                    details={
                        "payroll_id": payroll_id,
                        "member_id": record.member_id,
                        "amount": str(record.net_salary),
                        "transaction_ref": transaction_ref,
                    },
                )
            )
            paid = self._payroll.get_by_id(payroll_id)

        logger.info("payroll %s paid (%s) by %s, ledger ref %s", payroll_id, payment_mode, principal.username, transaction_ref)
        return paid

    def _load(self, principal: Principal, profile: SectorProfile, payroll_id: int) -> PayrollRecord:
        record = self._payroll.get_by_id(payroll_id, for_update=True)
        if not record:
            raise NotFoundError("Payroll record not found")
        ensure_same_tenant(principal, record.tenant_id, what="payroll record")
        if record.sector != profile.sector:
            raise NotFoundError("Payroll record not found")
        if record.is_paid:
            raise ImmutableRecordError("Payroll is already paid and can no longer change")
        return record
