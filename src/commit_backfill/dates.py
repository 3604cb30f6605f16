"""Rules for which calendar days receive no commits."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import FrozenSet, Union

SATURDAY = 5

DateLike = Union[date, datetime]


def _as_date(day: DateLike) -> date:
    # datetime is a subclass of date, so check it first
    if isinstance(day, datetime):
        return day.date()
    return day


def is_weekend(day: DateLike) -> bool:
    """Return True for Saturday and Sunday."""
    return _as_date(day).weekday() >= SATURDAY


def should_skip_date(day: DateLike) -> bool:
    """Default policy: weekends get no commits."""
    return is_weekend(day)


@dataclass(frozen=True)
class DatePolicy:
    """
    Configurable skip policy.

    Args:
        skip_weekends: Skip Saturdays and Sundays
        excluded_dates: Specific dates that never receive commits
    """

    skip_weekends: bool = True
    excluded_dates: FrozenSet[date] = frozenset()

    def should_skip(self, day: DateLike) -> bool:
        day = _as_date(day)
        if self.skip_weekends and is_weekend(day):
            return True
        return day in self.excluded_dates
