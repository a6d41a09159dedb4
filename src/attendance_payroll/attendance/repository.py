from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus, Sector
from .model import AttendanceFilters, AttendanceRecord


class AttendanceRepository(Protocol):
    def get_by_id(self, record_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def find_by_key(
        self,
        *,
        tenant_id: int,
        sector: Sector,
        member_id: int,
        work_date: date,
        context_id: Optional[int] = None,
        for_update: bool = False,
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_member_date(
        self,
        *,
        tenant_id: int,
        sector: Sector,
        member_id: int,
        work_date: date,
        for_update: bool = False,
    ) -> Sequence[AttendanceRecord]:
        """All records of a member on a date, across contexts."""

        raise NotImplementedError

    def insert(self, record: AttendanceRecord, *, single_per_day: bool) -> int:
        """Persist a new record and return its id. ``record.record_id`` is ignored.

        ``single_per_day`` lets the store reject a second record for the same
        member/date with ``ConflictError``.
        """

        raise NotImplementedError

    def update(self, record: AttendanceRecord) -> bool:
        raise NotImplementedError

    def delete(self, record_id: int) -> bool:
        raise NotImplementedError

    def list_records(self, *, tenant_id: int, sector: Sector, filters: AttendanceFilters) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def count_by_status(
        self, *, tenant_id: int, sector: Sector, filters: AttendanceFilters
    ) -> dict[AttendanceStatus, int]:
        raise NotImplementedError
