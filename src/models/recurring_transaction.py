"""
Recurring Transaction Models.

This module provides the window type enum and the Pydantic model emitted
for each cluster of transactions that matches a recurrence schedule.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.recurrence_rule import RecurrenceRule

CONFIDENCE_ERROR_MESSAGE = "confidence must not exceed 1.0"


class WindowType(str, Enum):
    """Candidate recurrence cadence evaluated against a cluster."""
    WEEKLY = "weekly"                 # every week on the same weekday
    BI_WEEKLY = "bi_weekly"           # every other week
    SEMI_MONTHLY = "semi_monthly"     # two fixed days per month
    MONTHLY = "monthly"               # same day of month
    BI_MONTHLY = "bi_monthly"         # every other month
    QUARTERLY = "quarterly"           # every 3 months
    SEMI_ANNUALLY = "semi_annually"   # every 6 months
    ANNUALLY = "annually"             # once a year


class RecurringTransaction(BaseModel):
    """
    A detected recurring series.

    `first_occurrence` and `last_occurrence` are the first and last schedule
    dates that matched a transaction; `next_occurrence` is the predicted
    date following the last match. `matches` holds the ids of the matched
    transactions in schedule order.
    """
    name: str
    window: WindowType
    rule: RecurrenceRule
    first_occurrence: datetime = Field(alias="first")
    last_occurrence: datetime = Field(alias="last")
    next_occurrence: datetime = Field(alias="next")
    ended: bool = False
    confidence: float
    matches: List[int] = Field(default_factory=list)

    model_config = ConfigDict(
        populate_by_name=True,
        arbitrary_types_allowed=True,
        frozen=True,
        use_enum_values=False
    )

    @field_validator('confidence')
    @classmethod
    def check_confidence(cls, v: float) -> float:
        if v > 1.0:
            raise ValueError(CONFIDENCE_ERROR_MESSAGE)
        return v

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dict for callers that persist results."""
        return {
            'name': self.name,
            'window': self.window.value,
            'rule': str(self.rule),
            'first': self.first_occurrence.isoformat(),
            'last': self.last_occurrence.isoformat(),
            'next': self.next_occurrence.isoformat(),
            'ended': self.ended,
            'confidence': self.confidence,
            'matches': list(self.matches),
        }
