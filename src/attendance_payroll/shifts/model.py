from __future__ import annotations

from dataclasses import dataclass
from datetime import time

from ..common.datetime_utils import duration_hours
from ..core.enums import Sector


@dataclass(frozen=True)
class Shift:
    """Named shift window a member can default to."""

    shift_id: int
    tenant_id: int
    sector: Sector
    shift_name: str
    start_time: time
    end_time: time

    @property
    def hours(self) -> float:
        return duration_hours(self.start_time, self.end_time)
