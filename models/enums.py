"""
Centralized Enum definitions for the project.
"""

from enum import Enum


class PriceStatus(str, Enum):
    """Where a live price sits inside its [floor, target] band"""

    TARGET = "target"  # at or near the ceiling
    INTERPOLATED = "interpolated"  # somewhere in between
    FLOOR = "floor"  # at or near the floor


class AdjustmentTrigger(str, Enum):
    """Accepted trigger markers for the adjustment endpoint"""

    CRON = "cron"
