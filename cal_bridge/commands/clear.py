"""Clear command - remove everything in the configured window."""

from typing import Optional

from ..core.models import ItemCategory
from .base import BridgeCommand


class ClearCommand(BridgeCommand):
    """Tear down events and/or reminders after a test run."""

    def run(self, category: Optional[ItemCategory] = None) -> bool:
        return self.run_safely(lambda: self._clear(category))

    def _clear(self, category: Optional[ItemCategory]) -> bool:
        categories = [category] if category else list(ItemCategory)
        success = True
        with self.open_bridge() as bridge:
            window = bridge.window
            for cat in categories:
                if not self.authorize(bridge, cat):
                    success = False
                    continue

                result = self.wait(bridge.remove_all(cat))
                if result is None:
                    success = False
                elif result.success:
                    print(f"Removed {cat.value}s between {window.start:%Y-%m-%d} and {window.end:%Y-%m-%d}.")
                else:
                    print(f"No {cat.value}s were removed: {result.error}")
                    success = False
        return success
