"""
Load seed items from JSON files.

A seed file is either a list of item objects or ``{"items": [...]}``.
Event objects need ``start`` (and usually ``end``); reminder objects may
carry ``due_date``, ``priority`` and ``completed``.
"""

import json
import logging
from typing import List

from ..core.exceptions import ConfigurationError
from ..core.models import CalendarItem, EventItem, ItemCategory, ReminderItem

logger = logging.getLogger(__name__)


def items_from_data(data, category: ItemCategory) -> List[CalendarItem]:
    if isinstance(data, dict):
        data = data.get("items", [])
    if not isinstance(data, list):
        raise ConfigurationError("Seed data must be a list of items")

    factory = EventItem.from_dict if category is ItemCategory.EVENT else ReminderItem.from_dict
    items = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Seed item {index} is not an object")
        try:
            items.append(factory(entry))
        except ValueError as e:
            raise ConfigurationError(f"Seed item {index}: {e}") from e
    return items


def load_items(path: str, category: ItemCategory) -> List[CalendarItem]:
    """Read ``category`` items from a JSON seed file."""
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except FileNotFoundError:
        raise ConfigurationError(f"Seed file not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Seed file {path} is not valid JSON: {e}") from e

    items = items_from_data(data, category)
    logger.debug("Loaded %d %s(s) from %s", len(items), category.value, path)
    return items
