"""
Utility functions for cal-bridge.
"""

from .date import (
    parse_date, parse_datetime, format_date, ensure_aware, shift_years,
    start_of_day
)
from .macos import is_macos, has_eventkit, set_process_name, wait_for

__all__ = [
    # Date utilities
    'parse_date',
    'parse_datetime',
    'format_date',
    'ensure_aware',
    'shift_years',
    'start_of_day',
    # macOS helpers
    'is_macos',
    'has_eventkit',
    'set_process_name',
    'wait_for'
]
