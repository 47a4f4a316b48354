"""
In-process calendar store.

``MemoryDevice`` plays the part of the device database: it owns committed
events and reminders plus per-category authorization. Every ``MemoryStore``
handle opened from it keeps its own staged changes until ``commit()``, the
same way separate ``EKEventStore`` instances share one database.

Failure hooks (``fail_save``, ``fail_remove``, ``fail_commit``,
``fail_fetch``) make it possible to exercise error paths without a device.
"""

import logging
import threading
from dataclasses import replace
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Set, Tuple
from uuid import uuid4

from ..core.exceptions import (
    StoreCommitFailure, StoreFetchFailure, StoreRemoveFailure, StoreSaveFailure
)
from ..core.models import (
    AuthorizationStatus, CalendarItem, EventItem, EventPredicate, EventSpan,
    ItemCategory, ReminderItem, ReminderPredicate
)
from .base import (
    AccessCallback, CalendarStore, EventVisitor, RemindersCallback, StoreProvider
)


class MemoryDevice(StoreProvider):
    """Shared committed state and authorization for memory stores."""

    def __init__(self, authorized: Iterable[ItemCategory] = (),
                 grant_on_request: bool = True,
                 request_error: Optional[Exception] = None,
                 async_callbacks: bool = True,
                 logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.grant_on_request = grant_on_request
        self.request_error = request_error
        self.async_callbacks = async_callbacks

        self._lock = threading.RLock()
        self._status: Dict[ItemCategory, AuthorizationStatus] = {
            category: AuthorizationStatus.NOT_DETERMINED for category in ItemCategory
        }
        for category in authorized:
            self._status[category] = AuthorizationStatus.AUTHORIZED

        self._events: Dict[str, EventItem] = {}
        self._reminders: Dict[str, ReminderItem] = {}

        self.fail_save: Set[str] = set()
        self.fail_remove: Set[str] = set()
        self.fail_commit = False
        self.fail_fetch = False

        self.commit_count = 0
        self.rollback_count = 0
        self.prompt_count = 0
        self.stores_opened = 0
        self.applied: List[Tuple[str, str, Optional[EventSpan]]] = []

    # Provider interface

    def authorization_status(self, category: ItemCategory) -> AuthorizationStatus:
        with self._lock:
            return self._status[category]

    def open_store(self) -> 'MemoryStore':
        with self._lock:
            self.stores_opened += 1
        return MemoryStore(self, logger=self.logger)

    # Device-side helpers

    def set_status(self, category: ItemCategory, status: AuthorizationStatus) -> None:
        with self._lock:
            self._status[category] = status

    def insert(self, *items: CalendarItem) -> List[CalendarItem]:
        """Put items straight into committed state, bypassing authorization."""
        stored = []
        with self._lock:
            for item in items:
                if item.identifier is None:
                    item = replace(item, identifier=str(uuid4()))
                self._partition(item.category)[item.identifier] = item
                stored.append(item)
        return stored

    def events(self) -> List[EventItem]:
        with self._lock:
            return sorted(self._events.values(), key=lambda e: e.start)

    def reminders(self) -> List[ReminderItem]:
        with self._lock:
            return list(self._reminders.values())

    def _partition(self, category: ItemCategory) -> Dict:
        if category is ItemCategory.EVENT:
            return self._events
        return self._reminders

    def _dispatch(self, fn, *args) -> None:
        if self.async_callbacks:
            threading.Thread(target=fn, args=args, daemon=True).start()
        else:
            fn(*args)


class MemoryStore(CalendarStore):
    """A handle onto a ``MemoryDevice`` with its own staged changes."""

    def __init__(self, device: MemoryDevice, logger: Optional[logging.Logger] = None):
        self.device = device
        self.logger = logger or logging.getLogger(__name__)
        self._staged: List[Tuple[str, CalendarItem, Optional[EventSpan], CalendarItem]] = []

    @property
    def staged(self) -> List[Tuple[str, CalendarItem, Optional[EventSpan]]]:
        return [(action, item, span) for action, item, span, _ in self._staged]

    def request_access(self, category: ItemCategory, callback: AccessCallback) -> None:
        device = self.device
        with device._lock:
            device.prompt_count += 1
            current = device._status[category]
            if current is AuthorizationStatus.NOT_DETERMINED:
                current = (AuthorizationStatus.AUTHORIZED if device.grant_on_request
                           else AuthorizationStatus.DENIED)
                device._status[category] = current
        granted = current is AuthorizationStatus.AUTHORIZED
        self.logger.debug("Access prompt for %s answered: %s", category.value, granted)
        device._dispatch(callback, granted, device.request_error)

    def _check_authorized(self, category: ItemCategory, failure):
        if self.device.authorization_status(category) is not AuthorizationStatus.AUTHORIZED:
            raise failure(f"Not authorized for {category.value}s")

    def _staged_copy(self, item: CalendarItem) -> Optional[CalendarItem]:
        for action, staged, _, source in self._staged:
            if action != "save":
                continue
            if source is item or (item.identifier is not None and staged.identifier == item.identifier):
                return staged
        return None

    def save(self, item: CalendarItem, span: Optional[EventSpan] = None,
             commit: bool = False) -> None:
        self._check_authorized(item.category, StoreSaveFailure)
        if item.title in self.device.fail_save:
            raise StoreSaveFailure(f"Failed to save '{item.title}'")
        # The caller's item is left untouched; the device only sees the copy.
        stored = replace(item, identifier=item.identifier or str(uuid4()))
        self._staged.append(("save", stored, span, item))
        if commit:
            self.commit()

    def remove(self, item: CalendarItem, span: Optional[EventSpan] = None,
               commit: bool = False) -> None:
        self._check_authorized(item.category, StoreRemoveFailure)
        if item.title in self.device.fail_remove:
            raise StoreRemoveFailure(f"Failed to remove '{item.title}'")
        target = self._staged_copy(item)
        if target is None:
            with self.device._lock:
                target = self.device._partition(item.category).get(item.identifier)
        if target is None:
            raise StoreRemoveFailure(f"No such {item.category.value}: {item.identifier}")
        self._staged.append(("remove", target, span, item))
        if commit:
            self.commit()

    def commit(self) -> None:
        device = self.device
        if device.fail_commit:
            raise StoreCommitFailure("Commit rejected by store")

        with device._lock:
            for action, item, span, _ in self._staged:
                partition = device._partition(item.category)
                if action == "save":
                    partition[item.identifier] = item
                else:
                    partition.pop(item.identifier, None)
                device.applied.append((action, item.identifier, span))
            device.commit_count += 1
        self.logger.debug("Committed %d staged change(s)", len(self._staged))
        self._staged = []

    def rollback(self) -> None:
        if self._staged:
            self.logger.debug("Discarding %d staged change(s)", len(self._staged))
        self._staged = []
        with self.device._lock:
            self.device.rollback_count += 1

    def predicate_for_events(self, start: datetime, end: datetime,
                             calendars: Optional[List[str]] = None) -> EventPredicate:
        return EventPredicate(start=start, end=end, calendars=calendars)

    def predicate_for_reminders(self, calendars: Optional[List[str]] = None) -> ReminderPredicate:
        return ReminderPredicate(calendars=calendars)

    def enumerate_events(self, predicate: EventPredicate, visitor: EventVisitor) -> None:
        if self.device.fail_fetch:
            raise StoreFetchFailure("Event enumeration failed")
        self._check_authorized(ItemCategory.EVENT, StoreFetchFailure)
        for event in self.device.events():
            if predicate.calendars is not None and event.calendar_id not in predicate.calendars:
                continue
            # Overlap match, as EventKit's date-range predicate does.
            if event.start < predicate.end and event.end >= predicate.start:
                visitor(event)

    def fetch_reminders(self, predicate: ReminderPredicate,
                        callback: RemindersCallback) -> None:
        if self.device.fail_fetch:
            raise StoreFetchFailure("Reminder fetch failed")
        self._check_authorized(ItemCategory.REMINDER, StoreFetchFailure)
        reminders = [
            r for r in self.device.reminders()
            if predicate.calendars is None or r.list_id in predicate.calendars
        ]
        self.device._dispatch(callback, reminders, None)
