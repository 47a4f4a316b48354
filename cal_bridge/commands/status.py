"""Status command - report authorization for events and reminders."""

from typing import Optional

from ..core.models import AuthorizationStatus, ItemCategory
from .base import BridgeCommand


class StatusCommand(BridgeCommand):
    """Print the authorization status of each category."""

    def run(self, category: Optional[ItemCategory] = None) -> bool:
        return self.run_safely(lambda: self._report(category))

    def _report(self, category: Optional[ItemCategory]) -> bool:
        categories = [category] if category else list(ItemCategory)
        all_authorized = True
        for cat in categories:
            status = self.provider.authorization_status(cat)
            label = status.name.replace('_', ' ').lower()
            print(f"{cat.value}s: {label}")
            all_authorized = all_authorized and status is AuthorizationStatus.AUTHORIZED

        window = self.config.window()
        print(f"Removal window: {window.start.isoformat()} to {window.end.isoformat()}")
        if self.config.bound_reminders:
            print("Reminders are limited to the window by due date.")
        return all_authorized
