"""
Core module for cal-bridge - contains domain models, configuration, and exceptions.
"""

from .models import (
    AccessResult,
    AuthorizationStatus,
    CalendarItem,
    DateWindow,
    EventItem,
    EventSpan,
    ItemCategory,
    OperationResult,
    Priority,
    ReminderItem
)

from .exceptions import (
    CalendarBridgeError,
    ConfigurationError,
    AuthorizationDenied,
    NotAuthorizedError,
    EventKitImportError,
    UnsupportedItemForCategory,
    StoreError,
    StoreSaveFailure,
    StoreRemoveFailure,
    StoreCommitFailure,
    StoreFetchFailure,
    StoreOpenFailure
)

from .config import BridgeConfig, load_config, save_config

__all__ = [
    # Models
    'AccessResult',
    'AuthorizationStatus',
    'CalendarItem',
    'DateWindow',
    'EventItem',
    'EventSpan',
    'ItemCategory',
    'OperationResult',
    'Priority',
    'ReminderItem',
    # Exceptions
    'CalendarBridgeError',
    'ConfigurationError',
    'AuthorizationDenied',
    'NotAuthorizedError',
    'EventKitImportError',
    'UnsupportedItemForCategory',
    'StoreError',
    'StoreSaveFailure',
    'StoreRemoveFailure',
    'StoreCommitFailure',
    'StoreFetchFailure',
    'StoreOpenFailure',
    # Configuration
    'BridgeConfig',
    'load_config',
    'save_config'
]
