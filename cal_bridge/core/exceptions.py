"""
Exception classes for cal-bridge.

Callers receive these through an operation's result rather than as raised
exceptions. The hierarchy is informative only; do not rely on it for control
flow across releases.
"""


class CalendarBridgeError(Exception):
    """Base exception for all cal-bridge errors."""
    pass


class ConfigurationError(CalendarBridgeError):
    """Raised when configuration is invalid."""
    pass


class AuthorizationDenied(CalendarBridgeError):
    """Raised when access to events or reminders was not granted."""
    pass


class NotAuthorizedError(AuthorizationDenied):
    """Raised when an operation needs a store handle and none was obtained yet."""
    pass


class EventKitImportError(CalendarBridgeError):
    """Raised when EventKit/PyObjC dependencies are not available."""
    pass


class UnsupportedItemForCategory(CalendarBridgeError):
    """Raised when an item's kind does not match the requested category."""

    def __init__(self, item=None, category=None):
        self.item = item
        self.category = category
        super().__init__("Unsupported item")


class StoreError(CalendarBridgeError):
    """Base exception for failures reported by the calendar store."""
    pass


class StoreSaveFailure(StoreError):
    pass


class StoreRemoveFailure(StoreError):
    pass


class StoreCommitFailure(StoreError):
    pass


class StoreFetchFailure(StoreError):
    pass


class StoreOpenFailure(StoreError):
    """Raised when a store handle could not be created."""
    pass
