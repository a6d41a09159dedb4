"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

STANDARD_SHIFT_HOURS = 8
PAYROLL_DAYS_PER_MONTH = 30
HALF_DAY_WEIGHT = Decimal("0.5")
DEFAULT_PAYMENT_MODE = "Cash"
SALARY_CATEGORY = "Salary"
MINUTES_PER_DAY = 24 * 60
