from __future__ import annotations

import logging

from ..core.enums import LeaveType
from ..core.exceptions import InsufficientBalanceError, NotFoundError
from ..members.repository import MemberDirectory

logger = logging.getLogger(__name__)


class LeaveBalanceLedger:
    """Validates and draws down CL/SL/EL balances held by the member directory.

    The charge is one-way: moving a day away from a leave status later does
    not credit the balance back.
    """

    def __init__(self, members: MemberDirectory):
        self._members = members

    def ensure_available(self, member_id: int, leave_type: LeaveType) -> None:
        member = self._members.get_by_id(member_id)
        if not member:
            raise NotFoundError("Member not found")
        if member.balance_for(leave_type) <= 0:
            raise InsufficientBalanceError(leave_type.value)

    def charge(self, member_id: int, leave_type: LeaveType) -> None:
        self.ensure_available(member_id, leave_type)
        # Conditional decrement: a concurrent charge may have drained the balance.
        if not self._members.decrement_leave_balance(member_id=member_id, leave_type=leave_type):
            raise InsufficientBalanceError(leave_type.value)
        logger.info("charged 1 %s to member %s", leave_type.value, member_id)
