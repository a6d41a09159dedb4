from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Sector
from .model import AttendanceLock, LockScope


class LockRepository(Protocol):
    def get(self, *, tenant_id: int, sector: Sector, scope: LockScope) -> Optional[AttendanceLock]:
        raise NotImplementedError

    def save_locked(self, *, tenant_id: int, sector: Sector, scope: LockScope, actor: str, at: datetime) -> None:
        """Insert or re-lock the scope."""

        raise NotImplementedError

    def save_unlocked(
        self, *, tenant_id: int, sector: Sector, scope: LockScope, actor: str, reason: str, at: datetime
    ) -> bool:
        raise NotImplementedError

    def list_for_month(self, *, tenant_id: int, sector: Sector, month: int, year: int) -> Sequence[AttendanceLock]:
        raise NotImplementedError
