"""Velocity limits applied to every customer"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class LoadLimits:
    """Thresholds for accepted loads; reaching a threshold counts as exceeding it"""

    loads_per_day: int
    amount_per_day: Decimal
    amount_per_week: Decimal


LOAD_LIMITS = LoadLimits(
    loads_per_day=3,
    amount_per_day=Decimal("5000"),
    amount_per_week=Decimal("20000"),
)
