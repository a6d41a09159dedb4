from __future__ import annotations

from enum import Enum
from typing import Optional


class Role(str, Enum):
    """Role of the authenticated principal inside a tenant."""

    OWNER = "owner"
    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"

    @property
    def is_privileged(self) -> bool:
        return self in (Role.OWNER, Role.ADMIN)


class Sector(str, Enum):
    EDUCATION = "education"
    HOTEL = "hotel"
    MANUFACTURING = "manufacturing"
    IT = "it"


class LeaveType(str, Enum):
    CL = "CL"
    SL = "SL"
    EL = "EL"


class AttendanceStatus(str, Enum):
    """Status buckets stored on an attendance record."""

    PRESENT = "present"
    ABSENT = "absent"
    LATE = "late"
    HALF_DAY = "half_day"
    PERMISSION = "permission"
    WEEK_OFF = "week_off"
    HOLIDAY = "holiday"
    CL = "CL"
    SL = "SL"
    EL = "EL"
    CO = "CO"
    OD = "OD"

    @classmethod
    def _missing_(cls, value):
        # Accept "half-day", "Present", "cl" and similar spellings.
        if isinstance(value, str):
            normalized = value.strip().replace("-", "_").lower()
            for member in cls:
                if member.value.lower() == normalized:
                    return member
        return None

    @property
    def leave_type(self) -> Optional[LeaveType]:
        try:
            return LeaveType(self.value)
        except ValueError:
            return None

    @property
    def counts_as_working_day(self) -> bool:
        return self not in (AttendanceStatus.WEEK_OFF, AttendanceStatus.HOLIDAY)


class LockGranularity(str, Enum):
    DATE = "date"
    MONTH = "month"


class PayrollStatus(str, Enum):
    DRAFT = "draft"
    APPROVED = "approved"
    PAID = "paid"


class WageType(str, Enum):
    MONTHLY = "monthly"
    DAILY = "daily"
    HOURLY = "hourly"
