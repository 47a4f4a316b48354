"""Seed command - insert items from a JSON file in one commit."""

from ..core.models import ItemCategory
from ..utils.items import load_items
from .base import BridgeCommand


class SeedCommand(BridgeCommand):
    """Add every item in a seed file, or none of them."""

    def run(self, category: ItemCategory, file_path: str, dry_run: bool = False) -> bool:
        return self.run_safely(lambda: self._seed(category, file_path, dry_run))

    def _seed(self, category: ItemCategory, file_path: str, dry_run: bool) -> bool:
        items = load_items(file_path, category)
        print(f"Loaded {len(items)} {category.value}(s) from {file_path}.")

        if dry_run:
            for item in items:
                print(f"  - {item.title}")
            return True

        with self.open_bridge() as bridge:
            if not self.authorize(bridge, category):
                return False
            result = self.wait(bridge.add_all(items, category))

        if result is None:
            return False
        if not result.success:
            print(f"Nothing was added: {result.error}")
            return False
        print(f"Added {len(items)} {category.value}(s).")
        return True
