"""
Recurrence rule model.

A small, immutable description of a calendar schedule ("every 2 weeks on
Friday", "monthly on the 31st clamped to month end") backed by
dateutil's RFC 5545 rrule implementation.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from functools import cached_property
from typing import List, Optional, Tuple

from dateutil import rrule


class RuleFrequency(str, Enum):
    """Base frequency of a recurrence rule."""
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


_RRULE_FREQUENCIES = {
    RuleFrequency.WEEKLY: rrule.WEEKLY,
    RuleFrequency.MONTHLY: rrule.MONTHLY,
    RuleFrequency.YEARLY: rrule.YEARLY,
}


@dataclass(frozen=True)
class RecurrenceRule:
    """
    Immutable recurrence rule.

    Attributes:
        frequency: Base frequency (weekly, monthly, yearly)
        dtstart: Timezone-aware start of the schedule; no occurrence precedes it
        interval: Number of frequency periods between occurrences
        by_weekday: Day of week, 0 (Monday) to 6 (Sunday)
        by_month_day: Days of the month; negative values count from month end
        by_month: Month of the year, 1 to 12
        by_set_pos: Selects one occurrence out of each period's expanded set
            (-1 picks the last); used to clamp e.g. day 31 to month end
    """
    frequency: RuleFrequency
    dtstart: datetime
    interval: int = 1
    by_weekday: Optional[int] = None
    by_month_day: Tuple[int, ...] = field(default_factory=tuple)
    by_month: Optional[int] = None
    by_set_pos: Optional[int] = None

    def __post_init__(self):
        if self.dtstart.tzinfo is None:
            raise ValueError("dtstart must be timezone-aware")
        if self.interval < 1:
            raise ValueError(f"interval must be at least 1, got {self.interval}")
        if self.by_weekday is not None and not (0 <= self.by_weekday <= 6):
            raise ValueError(f"by_weekday must be between 0 (Monday) and 6 (Sunday), got {self.by_weekday}")
        for day in self.by_month_day:
            if day == 0 or not (-31 <= day <= 31):
                raise ValueError(f"by_month_day values must be between -31 and 31 excluding 0, got {day}")
        if self.by_month is not None and not (1 <= self.by_month <= 12):
            raise ValueError(f"by_month must be between 1 and 12, got {self.by_month}")
        if self.by_set_pos is not None and self.by_set_pos == 0:
            raise ValueError("by_set_pos must be non-zero")

    @cached_property
    def _rule(self) -> rrule.rrule:
        kwargs = {
            'dtstart': self.dtstart,
            'interval': self.interval,
        }
        if self.by_weekday is not None:
            kwargs['byweekday'] = self.by_weekday
        if self.by_month_day:
            kwargs['bymonthday'] = self.by_month_day
        if self.by_month is not None:
            kwargs['bymonth'] = self.by_month
        if self.by_set_pos is not None:
            kwargs['bysetpos'] = self.by_set_pos
        return rrule.rrule(_RRULE_FREQUENCIES[self.frequency], **kwargs)

    def between(self, start: datetime, end: datetime, inc: bool = False) -> List[datetime]:
        """Return all occurrences between start and end, in ascending order."""
        return self._rule.between(start, end, inc=inc)

    def after(self, dt: datetime, inc: bool = False) -> Optional[datetime]:
        """Return the first occurrence after dt, or None if the schedule has ended."""
        return self._rule.after(dt, inc=inc)

    def __str__(self) -> str:
        return str(self._rule)
