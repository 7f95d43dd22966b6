"""Crop growth progress.

``now`` is always passed in; nothing here reads the clock.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from .models import FarmerCrop

SECONDS_PER_DAY = 24 * 60 * 60

# (upper bound %, label) for the progress legend
GROWTH_STAGES = [
    (25.0, "Early Growth"),
    (50.0, "Vegetative"),
    (75.0, "Flowering"),
    (100.0, "Maturity"),
]


@dataclass(frozen=True)
class GrowthProgress:
    days_grown: int
    growth_days: int
    percent: float

    @property
    def stage(self) -> str:
        return growth_stage(self.percent)

    @property
    def days_until_planting(self) -> int:
        return max(0, -self.days_grown)


def days_grown(planting_date: Optional[date], now: datetime) -> int:
    """Whole days since planting; negative if the planting date is still ahead."""
    if planting_date is None:
        return 0
    if isinstance(planting_date, datetime):
        planted = planting_date
    else:
        planted = datetime.combine(planting_date, time.min)
    if planted.tzinfo is None and now.tzinfo is not None:
        planted = planted.replace(tzinfo=now.tzinfo)
    elif planted.tzinfo is not None and now.tzinfo is None:
        planted = planted.replace(tzinfo=None)
    return math.floor((now - planted).total_seconds() / SECONDS_PER_DAY)


def progress_percent(days: int, growth_days: Optional[int]) -> float:
    """Share of the growth duration elapsed, in [0, 100]."""
    if not growth_days or growth_days <= 0:
        return 0.0
    return max(0.0, min(100.0, days / growth_days * 100.0))


def growth_progress(farmer_crop: FarmerCrop, now: datetime) -> GrowthProgress:
    days = days_grown(farmer_crop.planting_date, now)
    if farmer_crop.crop is None:
        return GrowthProgress(days_grown=days, growth_days=0, percent=0.0)
    growth_days = farmer_crop.crop.growth_days
    return GrowthProgress(days_grown=days, growth_days=growth_days,
                          percent=progress_percent(days, growth_days))


def growth_stage(percent: float) -> str:
    for upper, label in GROWTH_STAGES:
        if percent < upper:
            return label
    return GROWTH_STAGES[-1][1]
