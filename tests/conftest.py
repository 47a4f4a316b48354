#!/usr/bin/env python3
"""
Global pytest configuration and fixtures.

This module provides:
- Platform-specific test skipping (macOS/EventKit tests)
- A synchronous executor so bridge futures resolve before assertions
- Memory device and bridge fixtures
"""

import os
import platform
import sys
from concurrent.futures import Executor, Future
from datetime import datetime, timedelta, timezone

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from cal_bridge.bridge import CalendarBridge
from cal_bridge.core.models import DateWindow, EventItem, ItemCategory, ReminderItem
from cal_bridge.store.memory import MemoryDevice

HAS_EVENTKIT = False

try:
    if platform.system() == "Darwin":
        import objc
        import EventKit
        HAS_EVENTKIT = True
except ImportError:
    pass


WINDOW = DateWindow(
    start=datetime(2025, 1, 1, tzinfo=timezone.utc),
    end=datetime(2026, 1, 1, tzinfo=timezone.utc),
)


def pytest_configure(config):
    """Configure pytest environment."""
    config.addinivalue_line("markers", "macos: test requires macOS")
    config.addinivalue_line("markers", "eventkit: test requires EventKit framework")


def pytest_collection_modifyitems(config, items):
    """
    Modify test collection to skip platform-specific tests.

    Automatically skip macOS/EventKit tests on non-Darwin platforms.
    """
    skip_macos = pytest.mark.skip(reason="macOS/EventKit tests require Darwin platform")
    skip_eventkit = pytest.mark.skip(reason="Test requires EventKit framework")

    for item in items:
        if "macos" in item.keywords and platform.system() != "Darwin":
            item.add_marker(skip_macos)

        if "eventkit" in item.keywords and not HAS_EVENTKIT:
            item.add_marker(skip_eventkit)


class InlineExecutor(Executor):
    """Runs submitted work immediately on the calling thread."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, *args, **kwargs):
        self.submitted += 1
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as exc:
            future.set_exception(exc)
        return future


def make_event(title: str, start: datetime, hours: int = 1) -> EventItem:
    return EventItem(title=title, start=start, end=start + timedelta(hours=hours))


@pytest.fixture
def inline_executor() -> InlineExecutor:
    return InlineExecutor()


@pytest.fixture
def device() -> MemoryDevice:
    """A device with both categories authorized and synchronous callbacks."""
    return MemoryDevice(authorized=list(ItemCategory), async_callbacks=False)


@pytest.fixture
def bridge(device, inline_executor) -> CalendarBridge:
    """A bridge over ``device`` that already holds a store handle."""
    bridge = CalendarBridge(device, window=WINDOW, executor=inline_executor)
    bridge.request_access(ItemCategory.EVENT).result()
    return bridge


@pytest.fixture
def sample_events():
    return [
        make_event("Standup", datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc)),
        make_event("Review", datetime(2025, 3, 4, 14, 0, tzinfo=timezone.utc)),
    ]


@pytest.fixture
def sample_reminders():
    return [
        ReminderItem(title="Buy milk"),
        ReminderItem(title="File taxes", due_date=datetime(2025, 4, 15).date()),
    ]
