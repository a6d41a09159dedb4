from __future__ import annotations

import logging
from datetime import time
from typing import Sequence

from ..auth.principal import Principal, ensure_same_tenant, require_privileged
from ..common.validators import require_non_empty
from ..core.enums import Sector
from ..core.exceptions import NotFoundError, ValidationError
from .model import Shift
from .repository import ShiftRepository

logger = logging.getLogger(__name__)


class ShiftService:
    def __init__(self, shifts: ShiftRepository):
        self._shifts = shifts

    def list_shifts(self, principal: Principal, sector: Sector) -> Sequence[Shift]:
        return self._shifts.list_for_tenant(tenant_id=principal.tenant_id, sector=sector)

    def create_shift(
        self,
        principal: Principal,
        sector: Sector,
        *,
        shift_name: str,
        start_time: time | None,
        end_time: time | None,
    ) -> Shift:
        require_privileged(principal, "manage shifts")
        name = require_non_empty(shift_name, "shift_name")
        if start_time is None or end_time is None:
            raise ValidationError("start_time and end_time are required")
        if start_time == end_time:
            raise ValidationError("A shift cannot start and end at the same time")

        shift_id = self._shifts.create(
            tenant_id=principal.tenant_id,
            sector=sector,
            shift_name=name,
            start_time=start_time,
            end_time=end_time,
        )
        logger.info("shift %s created for tenant %s (%s)", shift_id, principal.tenant_id, sector.value)
        return Shift(
            shift_id=shift_id,
            tenant_id=principal.tenant_id,
            sector=sector,
            shift_name=name,
            start_time=start_time,
            end_time=end_time,
        )

    def delete_shift(self, principal: Principal, shift_id: int) -> None:
        require_privileged(principal, "manage shifts")
        shift = self._shifts.get_by_id(shift_id)
        if not shift:
            raise NotFoundError("Shift not found")
        ensure_same_tenant(principal, shift.tenant_id, what="shift")
        self._shifts.delete(shift_id)
