from __future__ import annotations

from datetime import date
from typing import Optional

from ..auth.principal import Principal
from ..common.datetime_utils import Clock, SystemClock
from ..core.exceptions import TemporalPolicyError


class TemporalPolicy:
    """Non-privileged principals may only touch today or later."""

    def __init__(self, clock: Optional[Clock] = None):
        self._clock = clock or SystemClock()

    def ensure_allowed(self, principal: Principal, d: date) -> None:
        if principal.is_privileged:
            return
        if d < self._clock.today():
            raise TemporalPolicyError(
                f"Attendance for {d.strftime('%Y-%m-%d')} is in the past and can only be changed by an owner or admin"
            )
