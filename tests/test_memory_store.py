"""
Tests for the in-process store (cal_bridge/store/memory.py).

Validates staging, commit and rollback semantics shared by every bridge test.
"""

from datetime import datetime, timedelta, timezone

import pytest

from cal_bridge.core.exceptions import (
    StoreCommitFailure, StoreFetchFailure, StoreRemoveFailure, StoreSaveFailure
)
from cal_bridge.core.models import (
    AuthorizationStatus, EventSpan, ItemCategory, ReminderItem
)
from cal_bridge.store.memory import MemoryDevice
from tests.conftest import make_event

START = datetime(2025, 5, 1, 9, tzinfo=timezone.utc)


class TestStaging:
    def test_save_is_invisible_until_commit(self, device):
        store = device.open_store()
        store.save(make_event("Draft", START))

        assert device.events() == []
        store.commit()
        assert [e.title for e in device.events()] == ["Draft"]

    def test_save_with_commit_applies_immediately(self, device):
        device.open_store().save(ReminderItem(title="Now"), commit=True)

        assert [r.title for r in device.reminders()] == ["Now"]
        assert device.commit_count == 1

    def test_save_stages_a_copy_with_identifier(self, device):
        event = make_event("Tagged", START)
        store = device.open_store()
        store.save(event)
        store.rollback()

        assert event.identifier is None

        store.save(event, commit=True)
        stored, = device.events()
        assert stored.identifier
        assert stored is not event
        assert event.identifier is None

    def test_rollback_discards_staged_changes(self, device):
        store = device.open_store()
        store.save(make_event("Temp", START))
        store.rollback()
        store.commit()

        assert device.events() == []

    def test_handles_stage_independently(self, device):
        first = device.open_store()
        second = device.open_store()
        first.save(make_event("Mine", START))

        second.commit()

        assert device.events() == []

    def test_applied_log_records_span(self, device):
        store = device.open_store()
        store.save(make_event("Span", START), span=EventSpan.THIS_EVENT, commit=True)

        assert device.applied[0][0] == "save"
        assert device.applied[0][2] is EventSpan.THIS_EVENT


class TestRemoval:
    def test_remove_unknown_item_fails(self, device):
        with pytest.raises(StoreRemoveFailure):
            device.open_store().remove(make_event("Ghost", START))

    def test_remove_item_staged_on_same_handle(self, device):
        store = device.open_store()
        event = make_event("Short-lived", START)
        store.save(event)
        store.remove(event)
        store.commit()

        assert device.events() == []

    def test_remove_committed_item(self, device):
        stored, = device.insert(ReminderItem(title="Old"))

        device.open_store().remove(stored, commit=True)

        assert device.reminders() == []


class TestAuthorization:
    def test_status_defaults_to_not_determined(self):
        device = MemoryDevice()
        for category in ItemCategory:
            assert device.authorization_status(category) is AuthorizationStatus.NOT_DETERMINED

    def test_prompt_records_answer(self):
        answers = []
        device = MemoryDevice(grant_on_request=False, async_callbacks=False)

        device.open_store().request_access(ItemCategory.EVENT, lambda g, e: answers.append(g))

        assert answers == [False]
        assert device.authorization_status(ItemCategory.EVENT) is AuthorizationStatus.DENIED

    def test_prompt_does_not_override_restriction(self):
        answers = []
        device = MemoryDevice(async_callbacks=False)
        device.set_status(ItemCategory.REMINDER, AuthorizationStatus.RESTRICTED)

        device.open_store().request_access(ItemCategory.REMINDER, lambda g, e: answers.append(g))

        assert answers == [False]

    def test_unauthorized_save_fails(self):
        device = MemoryDevice(async_callbacks=False)

        with pytest.raises(StoreSaveFailure):
            device.open_store().save(ReminderItem(title="Nope"))


class TestFailureHooks:
    def test_fail_commit(self, device):
        device.fail_commit = True
        store = device.open_store()
        store.save(make_event("Stuck", START))

        with pytest.raises(StoreCommitFailure):
            store.commit()
        assert device.commit_count == 0

    def test_fail_fetch(self, device):
        device.fail_fetch = True
        store = device.open_store()

        with pytest.raises(StoreFetchFailure):
            store.fetch_reminders(store.predicate_for_reminders(), lambda items, error: None)


class TestQueries:
    def test_enumerate_filters_by_calendar(self, device):
        device.insert(make_event("Work", START), make_event("Home", START))
        device.events()[0].calendar_id = "work"
        store = device.open_store()
        seen = []

        predicate = store.predicate_for_events(
            datetime(2025, 1, 1, tzinfo=timezone.utc),
            datetime(2026, 1, 1, tzinfo=timezone.utc),
            calendars=["work"],
        )
        store.enumerate_events(predicate, seen.append)

        assert len(seen) == 1
        assert seen[0].calendar_id == "work"

    def test_fetch_reminders_by_list(self, device):
        device.insert(ReminderItem(title="a", list_id="inbox"), ReminderItem(title="b", list_id="later"))
        store = device.open_store()
        fetched = []

        store.fetch_reminders(store.predicate_for_reminders(["later"]),
                             lambda items, error: fetched.extend(items))

        assert [r.title for r in fetched] == ["b"]

    def test_enumerate_matches_overlapping_events(self, device):
        window_start = datetime(2025, 6, 1, tzinfo=timezone.utc)
        window_end = datetime(2025, 7, 1, tzinfo=timezone.utc)
        device.insert(
            make_event("spans start", window_start - timedelta(hours=1), hours=2),
            make_event("ends before", window_start - timedelta(hours=3), hours=1),
            make_event("starts at end", window_end),
        )
        store = device.open_store()
        seen = []

        store.enumerate_events(store.predicate_for_events(window_start, window_end), seen.append)

        assert [e.title for e in seen] == ["spans start"]
