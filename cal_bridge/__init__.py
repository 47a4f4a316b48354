"""
cal-bridge - seed and tear down Apple Calendar and Reminders state for UI tests.
"""

from .bridge import CalendarBridge
from .core import (
    AccessResult, DateWindow, EventItem, EventSpan, ItemCategory,
    OperationResult, ReminderItem
)

__version__ = "1.0.0"

__all__ = [
    'CalendarBridge',
    'AccessResult',
    'DateWindow',
    'EventItem',
    'EventSpan',
    'ItemCategory',
    'OperationResult',
    'ReminderItem'
]
