"""Authorize command - request calendar or reminders access up front."""

from typing import Optional

from ..core.models import ItemCategory
from .base import BridgeCommand


class AuthorizeCommand(BridgeCommand):
    """Trigger the permission prompt so later runs take the fast path."""

    def run(self, category: Optional[ItemCategory] = None) -> bool:
        return self.run_safely(lambda: self._authorize_all(category))

    def _authorize_all(self, category: Optional[ItemCategory]) -> bool:
        categories = [category] if category else list(ItemCategory)
        with self.open_bridge() as bridge:
            granted = True
            for cat in categories:
                if self.authorize(bridge, cat):
                    print(f"Access to {cat.value}s granted.")
                else:
                    granted = False
            return granted
