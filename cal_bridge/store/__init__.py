"""Calendar store backends."""

from .base import CalendarStore, StoreProvider
from .memory import MemoryDevice, MemoryStore


def get_provider(backend: str, logger=None) -> StoreProvider:
    """Create the provider named in configuration."""
    if backend == "memory":
        return MemoryDevice(logger=logger)
    # Imported lazily; PyObjC only exists on macOS.
    from .eventkit import EventKitProvider
    return EventKitProvider(logger=logger)


__all__ = ['CalendarStore', 'StoreProvider', 'MemoryDevice', 'MemoryStore', 'get_provider']
