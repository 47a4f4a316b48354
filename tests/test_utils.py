"""
Tests for utility modules (cal_bridge/utils/*).
"""

import json
from concurrent.futures import Future
from datetime import date, datetime, timezone
from unittest.mock import patch

import pytest

from cal_bridge.core.exceptions import ConfigurationError
from cal_bridge.core.models import EventItem, ItemCategory, ReminderItem
from cal_bridge.utils.date import (
    ensure_aware, format_date, from_timestamp, parse_date, parse_datetime,
    shift_years, to_timestamp
)
from cal_bridge.utils.items import items_from_data, load_items
from cal_bridge.utils.macos import set_process_name, wait_for


class TestDateUtils:
    def test_parse_date(self):
        assert parse_date("2025-01-31") == date(2025, 1, 31)
        assert parse_date("2025-01-31T10:00:00") == date(2025, 1, 31)
        assert parse_date("31/01/2025") is None
        assert parse_date(None) is None

    def test_parse_datetime_variants(self):
        assert parse_datetime("2025-01-31T10:00:00Z") == datetime(2025, 1, 31, 10, tzinfo=timezone.utc)
        assert parse_datetime("2025-01-31").tzinfo is not None
        assert parse_datetime("not a date") is None
        assert parse_datetime("") is None

    def test_ensure_aware_keeps_aware_values(self):
        value = datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert ensure_aware(value) is value
        assert ensure_aware(datetime(2025, 1, 1)).tzinfo is not None

    def test_shift_years_leap_day(self):
        assert shift_years(datetime(2024, 2, 29), 1) == datetime(2025, 2, 28)
        assert shift_years(datetime(2024, 2, 29), 4) == datetime(2028, 2, 29)

    def test_timestamp_round_trip(self):
        value = datetime(2025, 3, 1, 12, 30, tzinfo=timezone.utc)
        assert from_timestamp(to_timestamp(value)) == value

    def test_format_date(self):
        assert format_date(date(2025, 2, 3)) == "2025-02-03"
        assert format_date(None) is None


class TestSeedItems:
    def test_events_from_list(self):
        items = items_from_data(
            [{"title": "A", "start": "2025-01-01T09:00:00Z", "end": "2025-01-01T10:00:00Z"}],
            ItemCategory.EVENT,
        )
        assert len(items) == 1
        assert isinstance(items[0], EventItem)

    def test_reminders_from_wrapped_object(self):
        items = items_from_data({"items": [{"title": "R"}]}, ItemCategory.REMINDER)
        assert items == [ReminderItem(title="R")]

    def test_invalid_entries(self):
        with pytest.raises(ConfigurationError):
            items_from_data("nope", ItemCategory.EVENT)
        with pytest.raises(ConfigurationError):
            items_from_data([42], ItemCategory.EVENT)
        with pytest.raises(ConfigurationError):
            items_from_data([{"title": "no start"}], ItemCategory.EVENT)

    def test_load_items_from_file(self, tmp_path):
        path = tmp_path / "reminders.json"
        path.write_text(json.dumps([{"title": "One"}, {"title": "Two", "due_date": "2025-02-01"}]))

        items = load_items(str(path), ItemCategory.REMINDER)

        assert [r.title for r in items] == ["One", "Two"]
        assert items[1].due_date == date(2025, 2, 1)

    def test_load_items_missing_or_broken_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_items(str(tmp_path / "missing.json"), ItemCategory.EVENT)

        broken = tmp_path / "broken.json"
        broken.write_text("[")
        with pytest.raises(ConfigurationError):
            load_items(str(broken), ItemCategory.EVENT)


class TestMacosHelpers:
    def test_set_process_name_is_noop_off_macos(self):
        with patch('cal_bridge.utils.macos.platform.system', return_value="Linux"):
            assert set_process_name("cal-bridge") is False

    def test_wait_for_completed_future(self):
        future = Future()
        future.set_result("done")
        assert wait_for(future, 1) == "done"
