from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LockGranularity, Sector


@dataclass(frozen=True)
class LockScope:
    """A single date or a (month, year) pair, depending on the sector."""

    granularity: LockGranularity
    month: int
    year: int
    lock_date: Optional[date] = None

    @classmethod
    def for_date(cls, granularity: LockGranularity, d: date) -> "LockScope":
        if granularity == LockGranularity.DATE:
            return cls(LockGranularity.DATE, d.month, d.year, d)
        return cls(LockGranularity.MONTH, d.month, d.year)

    @classmethod
    def for_month(cls, month: int, year: int) -> "LockScope":
        return cls(LockGranularity.MONTH, int(month), int(year))

    @property
    def key(self) -> str:
        if self.granularity == LockGranularity.DATE and self.lock_date is not None:
            return self.lock_date.strftime("%Y-%m-%d")
        return f"{self.year:04d}-{self.month:02d}"

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class AttendanceLock:
    tenant_id: int
    sector: Sector
    scope: LockScope
    is_locked: bool
    locked_by: Optional[str] = None
    locked_at: Optional[datetime] = None
    unlocked_by: Optional[str] = None
    unlocked_at: Optional[datetime] = None
    unlock_reason: Optional[str] = None
