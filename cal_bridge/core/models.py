"""
Domain models for cal-bridge.

Calendar items are a tagged union of ``EventItem`` and ``ReminderItem``; each
variant knows its own ``ItemCategory`` so operations can check the pairing
before touching the store.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional, Union

from .exceptions import ConfigurationError
from ..utils.date import ensure_aware, parse_date, parse_datetime, shift_years, start_of_day


class ItemCategory(Enum):
    """Store partition an operation targets."""

    EVENT = "event"
    REMINDER = "reminder"

    @classmethod
    def parse(cls, value: str) -> ItemCategory:
        normalized = (value or "").strip().lower()
        if normalized.endswith("s"):
            normalized = normalized[:-1]
        return cls(normalized)


class AuthorizationStatus(Enum):
    """Authorization state for one category, using EventKit's codes."""

    NOT_DETERMINED = 0
    RESTRICTED = 1
    DENIED = 2
    AUTHORIZED = 3

    @classmethod
    def from_code(cls, code: int) -> AuthorizationStatus:
        try:
            return cls(int(code))
        except ValueError:
            # Write-only access (4 on macOS 14+) cannot enumerate items to remove.
            return cls.DENIED


class EventSpan(Enum):
    """Whether a change to a recurring event hits one occurrence or all future ones."""

    THIS_EVENT = 0
    FUTURE_EVENTS = 1


class Priority(Enum):
    """Reminder priority levels."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    def to_eventkit(self) -> int:
        return {Priority.HIGH: 1, Priority.MEDIUM: 5, Priority.LOW: 9}[self]

    @classmethod
    def from_eventkit(cls, value: int) -> Optional[Priority]:
        if value == 0:
            return None
        if value <= 4:
            return cls.HIGH
        if value == 5:
            return cls.MEDIUM
        return cls.LOW


@dataclass(frozen=True)
class DateWindow:
    """Half-open ``[start, end)`` range used to scope removals."""

    start: datetime
    end: datetime

    def __post_init__(self):
        start = ensure_aware(self.start)
        end = ensure_aware(self.end)
        if end < start:
            raise ConfigurationError(
                f"Date window ends before it starts: {start.isoformat()} > {end.isoformat()}"
            )
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @classmethod
    def default(cls, now: Optional[datetime] = None) -> DateWindow:
        """One year ago up to one year from now."""
        now = ensure_aware(now or datetime.now())
        return cls(start=shift_years(now, -1), end=shift_years(now, 1))

    @classmethod
    def around(cls, days_back: int, days_ahead: int,
               now: Optional[datetime] = None) -> DateWindow:
        now = ensure_aware(now or datetime.now())
        return cls(start=now - timedelta(days=days_back), end=now + timedelta(days=days_ahead))

    def contains(self, moment: Optional[Union[datetime, date]]) -> bool:
        if moment is None:
            return False
        if not isinstance(moment, datetime):
            moment = start_of_day(moment)
        moment = ensure_aware(moment)
        return self.start <= moment < self.end


@dataclass
class EventItem:
    """A calendar event."""

    title: str
    start: datetime
    end: datetime
    all_day: bool = False
    location: Optional[str] = None
    notes: Optional[str] = None
    calendar_id: Optional[str] = None
    identifier: Optional[str] = None
    native: Any = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        self.start = ensure_aware(self.start)
        self.end = ensure_aware(self.end)

    @property
    def category(self) -> ItemCategory:
        return ItemCategory.EVENT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
            "all_day": self.all_day,
            "location": self.location,
            "notes": self.notes,
            "calendar_id": self.calendar_id,
            "identifier": self.identifier,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> EventItem:
        start = parse_datetime(data.get("start"))
        if start is None:
            raise ValueError(f"Event '{data.get('title', '')}' has no valid start")
        end = parse_datetime(data.get("end")) or start
        return cls(
            title=data.get("title", ""),
            start=start,
            end=end,
            all_day=bool(data.get("all_day", False)),
            location=data.get("location"),
            notes=data.get("notes"),
            calendar_id=data.get("calendar_id"),
            identifier=data.get("identifier"),
        )


@dataclass
class ReminderItem:
    """A reminder; dates are optional."""

    title: str
    due_date: Optional[date] = None
    priority: Optional[Priority] = None
    notes: Optional[str] = None
    completed: bool = False
    list_id: Optional[str] = None
    identifier: Optional[str] = None
    native: Any = field(default=None, repr=False, compare=False)

    @property
    def category(self) -> ItemCategory:
        return ItemCategory.REMINDER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "priority": self.priority.value if self.priority else None,
            "notes": self.notes,
            "completed": self.completed,
            "list_id": self.list_id,
            "identifier": self.identifier,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ReminderItem:
        priority = None
        priority_value = data.get("priority")
        if priority_value:
            try:
                priority = Priority(str(priority_value).lower())
            except ValueError:
                priority = None

        return cls(
            title=data.get("title", ""),
            due_date=parse_date(data.get("due_date")),
            priority=priority,
            notes=data.get("notes"),
            completed=bool(data.get("completed", False)),
            list_id=data.get("list_id"),
            identifier=data.get("identifier"),
        )


CalendarItem = Union[EventItem, ReminderItem]


@dataclass
class EventPredicate:
    start: datetime
    end: datetime
    calendars: Optional[List[str]] = None
    native: Any = field(default=None, repr=False, compare=False)


@dataclass
class ReminderPredicate:
    calendars: Optional[List[str]] = None
    native: Any = field(default=None, repr=False, compare=False)


class AccessResult(NamedTuple):
    """Outcome of an authorization request."""

    granted: bool
    error: Optional[Exception]
    store: Any


class OperationResult(NamedTuple):
    """Outcome of a batch add or remove."""

    success: bool
    error: Optional[Exception]

    @classmethod
    def ok(cls) -> OperationResult:
        return cls(True, None)

    @classmethod
    def failed(cls, error: Exception) -> OperationResult:
        return cls(False, error)
