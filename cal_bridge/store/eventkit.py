"""Apple Calendar and Reminders store using EventKit."""

import logging
from typing import Any, List, Optional

from ..core.exceptions import (
    AuthorizationDenied, EventKitImportError, StoreCommitFailure, StoreFetchFailure,
    StoreRemoveFailure, StoreSaveFailure, UnsupportedItemForCategory
)
from ..core.models import (
    AuthorizationStatus, CalendarItem, EventItem, EventPredicate, EventSpan,
    ItemCategory, Priority, ReminderItem, ReminderPredicate
)
from ..utils.date import from_timestamp, to_timestamp
from .base import (
    AccessCallback, CalendarStore, EventVisitor, RemindersCallback, StoreProvider
)


def _load_eventkit():
    """Import EventKit and Foundation, raising EventKitImportError if missing."""
    try:
        import EventKit
        import Foundation
    except ImportError as e:
        raise EventKitImportError(
            "EventKit not available. Please install PyObjC framework:\n"
            "  pip install pyobjc pyobjc-framework-EventKit\n"
            f"Import error details: {e}"
        )
    return EventKit, Foundation


def _describe(error: Any) -> str:
    if error is None:
        return "unknown error"
    if hasattr(error, "localizedDescription"):
        return str(error.localizedDescription())
    return str(error)


class EventKitProvider(StoreProvider):
    """Provider backed by ``EKEventStore``."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self._EventKit, self._Foundation = _load_eventkit()

    def entity_type(self, category: ItemCategory) -> int:
        if category is ItemCategory.EVENT:
            return self._EventKit.EKEntityTypeEvent
        return self._EventKit.EKEntityTypeReminder

    def authorization_status(self, category: ItemCategory) -> AuthorizationStatus:
        status = self._EventKit.EKEventStore.authorizationStatusForEntityType_(
            self.entity_type(category)
        )
        return AuthorizationStatus.from_code(int(status))

    def open_store(self) -> 'EventKitStore':
        native = self._EventKit.EKEventStore.alloc().init()
        self.logger.debug("EventKit store created")
        return EventKitStore(native, self, logger=self.logger)


class EventKitStore(CalendarStore):
    """Wraps one ``EKEventStore``; staged changes live inside EventKit until commit."""

    def __init__(self, native, provider: EventKitProvider,
                 logger: Optional[logging.Logger] = None):
        self.native = native
        self.provider = provider
        self.logger = logger or logging.getLogger(__name__)
        self._EventKit = provider._EventKit
        self._Foundation = provider._Foundation

    def _nsdate(self, value):
        return self._Foundation.NSDate.dateWithTimeIntervalSince1970_(to_timestamp(value))

    def _calendars(self, category: ItemCategory, identifiers: Optional[List[str]]):
        if identifiers is None:
            return None
        all_cals = self.native.calendarsForEntityType_(self.provider.entity_type(category)) or []
        return [c for c in all_cals if str(c.calendarIdentifier()) in identifiers]

    # Authorization

    def request_access(self, category: ItemCategory, callback: AccessCallback) -> None:
        def completion(granted, error):
            callback(bool(granted), None if error is None else AuthorizationDenied(_describe(error)))

        # macOS 14 replaced requestAccessToEntityType_completion_ with full-access requests.
        if category is ItemCategory.EVENT and hasattr(self.native, "requestFullAccessToEventsWithCompletion_"):
            self.native.requestFullAccessToEventsWithCompletion_(completion)
        elif category is ItemCategory.REMINDER and hasattr(self.native, "requestFullAccessToRemindersWithCompletion_"):
            self.native.requestFullAccessToRemindersWithCompletion_(completion)
        else:
            self.native.requestAccessToEntityType_completion_(
                self.provider.entity_type(category), completion
            )

    # Conversion

    def _event_from_native(self, event) -> EventItem:
        calendar = event.calendar()
        return EventItem(
            title=str(event.title() or ''),
            start=from_timestamp(event.startDate().timeIntervalSince1970()),
            end=from_timestamp(event.endDate().timeIntervalSince1970()),
            all_day=bool(event.isAllDay()),
            location=str(event.location()) if event.location() else None,
            notes=str(event.notes()) if event.notes() else None,
            calendar_id=str(calendar.calendarIdentifier()) if calendar else None,
            identifier=str(event.eventIdentifier()),
            native=event,
        )

    def _reminder_from_native(self, reminder) -> ReminderItem:
        from datetime import date

        due_date = None
        components = reminder.dueDateComponents()
        if components:
            try:
                due_date = date(int(components.year()), int(components.month()), int(components.day()))
            except (ValueError, OverflowError):
                # Missing fields come back as NSDateComponentUndefined.
                due_date = None

        calendar = reminder.calendar()
        return ReminderItem(
            title=str(reminder.title() or ''),
            due_date=due_date,
            priority=Priority.from_eventkit(int(reminder.priority())),
            notes=str(reminder.notes()) if reminder.notes() else None,
            completed=bool(reminder.isCompleted()),
            list_id=str(calendar.calendarIdentifier()) if calendar else None,
            identifier=str(reminder.calendarItemIdentifier()),
            native=reminder,
        )

    def _native_event(self, item: EventItem):
        if item.native is not None:
            return item.native
        event = self._EventKit.EKEvent.eventWithEventStore_(self.native)
        event.setTitle_(item.title)
        event.setStartDate_(self._nsdate(item.start))
        event.setEndDate_(self._nsdate(item.end))
        event.setAllDay_(item.all_day)
        if item.location:
            event.setLocation_(item.location)
        if item.notes:
            event.setNotes_(item.notes)
        calendar = None
        if item.calendar_id:
            calendar = self.native.calendarWithIdentifier_(item.calendar_id)
        event.setCalendar_(calendar or self.native.defaultCalendarForNewEvents())
        item.native = event
        return event

    def _native_reminder(self, item: ReminderItem):
        if item.native is not None:
            return item.native
        reminder = self._EventKit.EKReminder.reminderWithEventStore_(self.native)
        reminder.setTitle_(item.title)
        if item.due_date:
            components = self._Foundation.NSDateComponents.alloc().init()
            components.setYear_(item.due_date.year)
            components.setMonth_(item.due_date.month)
            components.setDay_(item.due_date.day)
            reminder.setDueDateComponents_(components)
        if item.priority:
            reminder.setPriority_(item.priority.to_eventkit())
        if item.notes:
            reminder.setNotes_(item.notes)
        reminder.setCompleted_(item.completed)
        calendar = None
        if item.list_id:
            calendar = self.native.calendarWithIdentifier_(item.list_id)
        reminder.setCalendar_(calendar or self.native.defaultCalendarForNewReminders())
        item.native = reminder
        return reminder

    # Staging

    def save(self, item: CalendarItem, span: Optional[EventSpan] = None,
             commit: bool = False) -> None:
        span = span or EventSpan.FUTURE_EVENTS
        if isinstance(item, EventItem):
            event = self._native_event(item)
            success, error = self.native.saveEvent_span_commit_error_(event, span.value, commit, None)
            if success:
                item.identifier = str(event.eventIdentifier())
        elif isinstance(item, ReminderItem):
            reminder = self._native_reminder(item)
            success, error = self.native.saveReminder_commit_error_(reminder, commit, None)
            if success:
                item.identifier = str(reminder.calendarItemIdentifier())
        else:
            raise UnsupportedItemForCategory(item)

        if not success:
            self.logger.error("Failed to save '%s': %s", item.title, _describe(error))
            raise StoreSaveFailure(f"Failed to save '{item.title}': {_describe(error)}")

    def remove(self, item: CalendarItem, span: Optional[EventSpan] = None,
               commit: bool = False) -> None:
        span = span or EventSpan.FUTURE_EVENTS
        if isinstance(item, EventItem):
            success, error = self.native.removeEvent_span_commit_error_(
                self._native_event(item), span.value, commit, None
            )
        elif isinstance(item, ReminderItem):
            success, error = self.native.removeReminder_commit_error_(
                self._native_reminder(item), commit, None
            )
        else:
            raise UnsupportedItemForCategory(item)

        if not success:
            self.logger.error("Failed to remove '%s': %s", item.title, _describe(error))
            raise StoreRemoveFailure(f"Failed to remove '{item.title}': {_describe(error)}")

    def commit(self) -> None:
        success, error = self.native.commit_(None)
        if not success:
            raise StoreCommitFailure(f"EventKit commit failed: {_describe(error)}")

    def rollback(self) -> None:
        self.native.reset()

    # Queries

    def predicate_for_events(self, start, end, calendars: Optional[List[str]] = None) -> EventPredicate:
        native = self.native.predicateForEventsWithStartDate_endDate_calendars_(
            self._nsdate(start), self._nsdate(end),
            self._calendars(ItemCategory.EVENT, calendars)
        )
        return EventPredicate(start=start, end=end, calendars=calendars, native=native)

    def predicate_for_reminders(self, calendars: Optional[List[str]] = None) -> ReminderPredicate:
        native = self.native.predicateForRemindersInCalendars_(
            self._calendars(ItemCategory.REMINDER, calendars)
        )
        return ReminderPredicate(calendars=calendars, native=native)

    def enumerate_events(self, predicate: EventPredicate, visitor: EventVisitor) -> None:
        def block(event, stop):
            visitor(self._event_from_native(event))

        try:
            self.native.enumerateEventsMatchingPredicate_usingBlock_(predicate.native, block)
        except Exception as e:
            self.logger.error(f"Failed to enumerate events: {e}")
            raise StoreFetchFailure(f"Failed to enumerate events: {e}") from e

    def fetch_reminders(self, predicate: ReminderPredicate,
                        callback: RemindersCallback) -> None:
        def completion(fetched):
            try:
                reminders = [self._reminder_from_native(r) for r in (fetched or [])]
            except Exception as e:
                self.logger.error(f"Failed to convert fetched reminders: {e}")
                error = StoreFetchFailure(f"Failed to convert fetched reminders: {e}")
                error.__cause__ = e
                callback(None, error)
                return
            callback(reminders, None)

        try:
            self.native.fetchRemindersMatchingPredicate_completion_(predicate.native, completion)
        except Exception as e:
            self.logger.error(f"Failed to fetch reminders: {e}")
            raise StoreFetchFailure(f"Failed to fetch reminders: {e}") from e
