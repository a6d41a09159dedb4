from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from ..core.enums import LeaveType, LockGranularity, Sector
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class SectorProfile:
    """Which optional attendance behaviours apply to a sector.

    One generic attendance store serves every sector; the profile decides
    time tracking, shift overlap rules, lock scope, leave charging and
    wage estimation.
    """

    sector: Sector
    default_subject: str
    lock_granularity: LockGranularity
    tracks_time: bool = False
    shift_contexts: bool = False
    wage_aware: bool = False
    uses_default_shift: bool = False
    charged_leave_types: frozenset = field(default_factory=frozenset)

    def charges(self, leave_type: LeaveType | None) -> bool:
        return leave_type is not None and leave_type in self.charged_leave_types


ALL_LEAVE_TYPES = frozenset(LeaveType)

SECTOR_PROFILES: dict[Sector, SectorProfile] = {
    Sector.EDUCATION: SectorProfile(
        sector=Sector.EDUCATION,
        default_subject="Daily Attendance",
        lock_granularity=LockGranularity.DATE,
        charged_leave_types=ALL_LEAVE_TYPES,
    ),
    Sector.HOTEL: SectorProfile(
        sector=Sector.HOTEL,
        default_subject="Shift Duty",
        lock_granularity=LockGranularity.DATE,
        tracks_time=True,
        shift_contexts=True,
        wage_aware=True,
        uses_default_shift=True,
    ),
    Sector.MANUFACTURING: SectorProfile(
        sector=Sector.MANUFACTURING,
        default_subject="Production Shift",
        lock_granularity=LockGranularity.MONTH,
        wage_aware=True,
        charged_leave_types=ALL_LEAVE_TYPES,
    ),
    Sector.IT: SectorProfile(
        sector=Sector.IT,
        default_subject="Work Day",
        lock_granularity=LockGranularity.MONTH,
        tracks_time=True,
        wage_aware=True,
        charged_leave_types=ALL_LEAVE_TYPES,
    ),
}


def get_profile(sector: Union[Sector, str]) -> SectorProfile:
    try:
        return SECTOR_PROFILES[Sector(sector)]
    except (KeyError, ValueError) as e:
        raise ValidationError(f"Unknown sector: {sector}") from e
