from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..auth.principal import Principal, require_privileged
from ..common.datetime_utils import Clock, SystemClock
from ..common.transactions import TransactionManager
from ..common.validators import require_date, require_month_year, require_non_empty
from ..core.enums import LockGranularity
from ..core.exceptions import LockedError, NotFoundError, ValidationError
from ..integrations.audit import AuditEvent, AuditSink
from ..sectors.profile import SectorProfile
from .model import AttendanceLock, LockScope
from .repository import LockRepository

logger = logging.getLogger(__name__)


class AttendanceLockManager:
    def __init__(
        self,
        locks: LockRepository,
        *,
        transactions: TransactionManager,
        audit: AuditSink,
        clock: Optional[Clock] = None,
    ):
        self._locks = locks
        self._tx = transactions
        self._audit = audit
        self._clock = clock or SystemClock()

    @staticmethod
    def scope_for(profile: SectorProfile, d: date) -> LockScope:
        return LockScope.for_date(profile.lock_granularity, d)

    @staticmethod
    def scope_from_request(
        profile: SectorProfile,
        *,
        lock_date: object = None,
        month: object = None,
        year: object = None,
    ) -> LockScope:
        """Build the sector's scope from API input (a date, or month and year)."""

        if profile.lock_granularity == LockGranularity.DATE:
            return LockScope.for_date(LockGranularity.DATE, require_date(lock_date))
        if month is None and year is None and lock_date:
            d = require_date(lock_date)
            return LockScope.for_month(d.month, d.year)
        m, y = require_month_year(month, year)
        return LockScope.for_month(m, y)

    def is_locked(self, tenant_id: int, profile: SectorProfile, scope: LockScope) -> bool:
        current = self._locks.get(tenant_id=tenant_id, sector=profile.sector, scope=scope)
        return bool(current and current.is_locked)

    def ensure_writable(self, principal: Principal, profile: SectorProfile, d: date) -> None:
        if principal.is_privileged:
            return
        scope = self.scope_for(profile, d)
        if self.is_locked(principal.tenant_id, profile, scope):
            raise LockedError(f"Attendance for {scope} is locked. Contact an admin to unlock.")

    def lock(self, principal: Principal, profile: SectorProfile, scope: LockScope) -> AttendanceLock:
        self._check_granularity(profile, scope)
        with self._tx.atomic():
            self._locks.save_locked(
                tenant_id=principal.tenant_id,
                sector=profile.sector,
                scope=scope,
                actor=principal.username,
                at=self._clock.now(),
            )
            self._audit.record(
                AuditEvent(
                    tenant_id=principal.tenant_id,
                    module=profile.sector.value,
                    action="LOCKED_ATTENDANCE",
                    actor=principal.username,
                    details={"scope": scope.key},
                )
            )
            current = self._locks.get(tenant_id=principal.tenant_id, sector=profile.sector, scope=scope)

        logger.info("tenant %s locked %s attendance for %s", principal.tenant_id, profile.sector.value, scope)
        return current

    def unlock(self, principal: Principal, profile: SectorProfile, scope: LockScope, reason: str) -> AttendanceLock:
        require_privileged(principal, "unlock attendance")
        reason = require_non_empty(reason, "reason")
        self._check_granularity(profile, scope)

        with self._tx.atomic():
            changed = self._locks.save_unlocked(
                tenant_id=principal.tenant_id,
                sector=profile.sector,
                scope=scope,
                actor=principal.username,
                reason=reason,
                at=self._clock.now(),
            )
            if not changed:
                raise NotFoundError(f"No lock recorded for {scope}")
            self._audit.record(
                AuditEvent(
                    tenant_id=principal.tenant_id,
                    module=profile.sector.value,
                    action="UNLOCKED_ATTENDANCE",
                    actor=principal.username,
                    details={"scope": scope.key, "reason": reason},
                )
            )
            current = self._locks.get(tenant_id=principal.tenant_id, sector=profile.sector, scope=scope)

        logger.info("tenant %s unlocked %s attendance for %s", principal.tenant_id, profile.sector.value, scope)
        return current

    def list_locks(self, principal: Principal, profile: SectorProfile, month: int, year: int) -> Sequence[AttendanceLock]:
        m, y = require_month_year(month, year)
        return self._locks.list_for_month(tenant_id=principal.tenant_id, sector=profile.sector, month=m, year=y)

    def locked_dates(self, principal: Principal, profile: SectorProfile, month: int, year: int) -> list[date]:
        return [
            lk.scope.lock_date
            for lk in self.list_locks(principal, profile, month, year)
            if lk.is_locked and lk.scope.lock_date is not None
        ]

    @staticmethod
    def _check_granularity(profile: SectorProfile, scope: LockScope) -> None:
        if scope.granularity != profile.lock_granularity:
            raise ValidationError(
                f"{profile.sector.value} attendance is locked per {profile.lock_granularity.value}, "
                f"not per {scope.granularity.value}"
            )
