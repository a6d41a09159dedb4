from __future__ import annotations

from datetime import time
from typing import Optional, Protocol, Sequence

from ..core.enums import Sector
from .model import Shift


class ShiftRepository(Protocol):
    def list_for_tenant(self, *, tenant_id: int, sector: Sector) -> Sequence[Shift]:
        raise NotImplementedError

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        raise NotImplementedError

    def create(self, *, tenant_id: int, sector: Sector, shift_name: str, start_time: time, end_time: time) -> int:
        raise NotImplementedError

    def delete(self, shift_id: int) -> bool:
        raise NotImplementedError
