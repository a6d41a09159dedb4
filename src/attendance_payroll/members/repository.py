from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveType, Sector
from .model import Member


class MemberDirectory(Protocol):
    def get_by_id(self, member_id: int) -> Optional[Member]:
        raise NotImplementedError

    def list_active(
        self,
        *,
        tenant_id: int,
        sector: Sector,
        role: Optional[str] = None,
        department: Optional[str] = None,
        member_id: Optional[int] = None,
    ) -> Sequence[Member]:
        raise NotImplementedError

    def decrement_leave_balance(self, *, member_id: int, leave_type: LeaveType) -> bool:
        """Take one unit of ``leave_type`` only if the balance is still positive."""

        raise NotImplementedError
