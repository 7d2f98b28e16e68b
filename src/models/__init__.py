"""
Models package for recurring transaction detection.
"""

from .transaction import Transaction

from .recurrence_rule import (
    RecurrenceRule,
    RuleFrequency,
)

from .recurring_transaction import (
    RecurringTransaction,
    WindowType,
)

__all__ = [
    'Transaction',
    'RecurrenceRule',
    'RuleFrequency',
    'RecurringTransaction',
    'WindowType',
]
