"""
Candidate recurrence windows.

For a given anchor date, enumerates every schedule a recurring series could
plausibly follow. Every cluster is scored against the full set; the
detection service keeps whichever fits best.

Each window carries a fuzz tolerance in days: how far an actual posting
date may drift from the ideal schedule date (weekends, holidays,
processing delays). Less frequent cadences get more slack.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Dict, List, Tuple

from models.recurrence_rule import RecurrenceRule, RuleFrequency
from models.recurring_transaction import WindowType
from utils.temporal_utils import midnight, month_day_params

logger = logging.getLogger(__name__)

WEEKLY_FUZZ = 2
SEMI_MONTHLY_FUZZ = 3
MONTHLY_FUZZ = 5
LONG_FUZZ = 7


@dataclass(frozen=True)
class Window:
    """A candidate schedule: window type, rule and date tolerance in days."""
    type: WindowType
    rule: RecurrenceRule
    fuzzy: int


def _candidate_specs(anchor: datetime) -> List[Tuple[WindowType, int, Dict[str, Any]]]:
    weekday = anchor.weekday()
    month_days, set_pos = month_day_params(anchor.day)

    def monthly(interval: int) -> Dict[str, Any]:
        return {
            'frequency': RuleFrequency.MONTHLY,
            'interval': interval,
            'by_month_day': month_days,
            'by_set_pos': set_pos,
        }

    return [
        (WindowType.WEEKLY, WEEKLY_FUZZ, {
            'frequency': RuleFrequency.WEEKLY, 'interval': 1, 'by_weekday': weekday,
        }),
        (WindowType.BI_WEEKLY, WEEKLY_FUZZ, {
            'frequency': RuleFrequency.WEEKLY, 'interval': 2, 'by_weekday': weekday,
        }),
        (WindowType.SEMI_MONTHLY, SEMI_MONTHLY_FUZZ, {
            'frequency': RuleFrequency.MONTHLY, 'interval': 1, 'by_month_day': (1, 15),
        }),
        (WindowType.SEMI_MONTHLY, SEMI_MONTHLY_FUZZ, {
            'frequency': RuleFrequency.MONTHLY, 'interval': 1, 'by_month_day': (15, -1),
        }),
        (WindowType.MONTHLY, MONTHLY_FUZZ, monthly(1)),
        (WindowType.BI_MONTHLY, MONTHLY_FUZZ, monthly(2)),
        (WindowType.QUARTERLY, MONTHLY_FUZZ, monthly(3)),
        (WindowType.SEMI_ANNUALLY, LONG_FUZZ, monthly(6)),
        (WindowType.ANNUALLY, LONG_FUZZ, {
            'frequency': RuleFrequency.YEARLY,
            'interval': 1,
            'by_month': anchor.month,
            'by_month_day': month_days,
            'by_set_pos': set_pos,
        }),
    ]


def get_windows_for_date(anchor: datetime, tz: tzinfo) -> List[Window]:
    """
    Build every candidate window anchored at the given date.

    All rules start at local midnight of the anchor's calendar day in tz.
    A candidate whose rule cannot be built is logged and left out.

    Args:
        anchor: Date of the first transaction in a cluster
        tz: Timezone the schedule is expressed in

    Returns:
        Windows in a fixed order (weekly first, annually last)
    """
    start = midnight(anchor, tz)
    windows = []
    for window_type, fuzzy, params in _candidate_specs(start):
        try:
            rule = RecurrenceRule(dtstart=start, **params)
        except ValueError as e:
            logger.warning(f"Skipping {window_type.value} window anchored at {start.date()}: {e}")
            continue
        windows.append(Window(type=window_type, rule=rule, fuzzy=fuzzy))
    return windows
