"""
Interface the bridge expects from a calendar/reminder store.

A ``StoreProvider`` answers authorization queries and hands out fresh store
handles. A ``CalendarStore`` handle stages saves and removals and applies
them on ``commit()``; ``rollback()`` throws away whatever is staged.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, List, Optional

from ..core.models import (
    AuthorizationStatus, CalendarItem, EventItem, EventPredicate, EventSpan,
    ItemCategory, ReminderItem, ReminderPredicate
)

AccessCallback = Callable[[bool, Optional[Exception]], None]
EventVisitor = Callable[[EventItem], None]
RemindersCallback = Callable[[Optional[List[ReminderItem]], Optional[Exception]], None]


class CalendarStore(ABC):
    """One handle onto the calendar database."""

    @abstractmethod
    def request_access(self, category: ItemCategory, callback: AccessCallback) -> None:
        """Prompt for access; ``callback`` may run on any thread."""

    @abstractmethod
    def save(self, item: CalendarItem, span: Optional[EventSpan] = None,
             commit: bool = False) -> None:
        """Stage (or with ``commit`` apply) a save. Raises ``StoreSaveFailure``."""

    @abstractmethod
    def remove(self, item: CalendarItem, span: Optional[EventSpan] = None,
               commit: bool = False) -> None:
        """Stage (or with ``commit`` apply) a removal. Raises ``StoreRemoveFailure``."""

    @abstractmethod
    def commit(self) -> None:
        """Apply everything staged. Raises ``StoreCommitFailure``."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard staged changes."""

    @abstractmethod
    def predicate_for_events(self, start: datetime, end: datetime,
                             calendars: Optional[List[str]] = None) -> EventPredicate:
        pass

    @abstractmethod
    def predicate_for_reminders(self, calendars: Optional[List[str]] = None) -> ReminderPredicate:
        pass

    @abstractmethod
    def enumerate_events(self, predicate: EventPredicate, visitor: EventVisitor) -> None:
        """Call ``visitor`` synchronously for every matching event."""

    @abstractmethod
    def fetch_reminders(self, predicate: ReminderPredicate,
                        callback: RemindersCallback) -> None:
        """
        Fetch reminders; ``callback(reminders, error)`` may run on another thread.

        Failures before the fetch starts are raised. Failures once it is under
        way arrive as ``callback(None, error)``.
        """


class StoreProvider(ABC):
    """Source of store handles and authorization status."""

    @abstractmethod
    def authorization_status(self, category: ItemCategory) -> AuthorizationStatus:
        pass

    @abstractmethod
    def open_store(self) -> CalendarStore:
        """Create a fresh store handle."""
