"""Shared plumbing for commands that drive a CalendarBridge."""

import concurrent.futures
import logging
from typing import Optional

from ..bridge import CalendarBridge
from ..core.config import BridgeConfig
from ..core.exceptions import CalendarBridgeError
from ..core.models import ItemCategory
from ..store import StoreProvider, get_provider
from ..utils.macos import wait_for


class BridgeCommand:
    """Base for commands; subclasses implement ``run``."""

    def __init__(self, config: BridgeConfig, verbose: bool = False,
                 provider: Optional[StoreProvider] = None):
        self.config = config
        self.verbose = verbose
        self.logger = logging.getLogger(__name__)
        if verbose:
            self.logger.setLevel(logging.DEBUG)
        self._provider = provider

    @property
    def provider(self) -> StoreProvider:
        if self._provider is None:
            self._provider = get_provider(self.config.backend, logger=self.logger)
        return self._provider

    def open_bridge(self) -> CalendarBridge:
        return CalendarBridge.from_config(self.config, self.provider)

    def wait(self, future):
        """Wait for a bridge result; None if it did not arrive in time."""
        try:
            return wait_for(future, self.config.authorization_timeout)
        except (TimeoutError, concurrent.futures.TimeoutError):
            print(f"Timed out after {self.config.authorization_timeout:g} seconds. "
                  "Check for a pending permission prompt and try again.")
            return None

    def authorize(self, bridge: CalendarBridge, category: ItemCategory) -> bool:
        result = self.wait(bridge.request_access(category))
        if result is None:
            return False
        if not result.granted:
            print(f"Access to {category.value}s was not granted: {result.error}")
            return False
        return True

    def run_safely(self, action) -> bool:
        try:
            return action()
        except CalendarBridgeError as exc:
            self.logger.error("Command failed: %s", exc)
            print(f"Error: {exc}")
            return False
