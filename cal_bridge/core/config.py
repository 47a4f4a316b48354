"""
Configuration management for cal-bridge.

Settings live in a small JSON file. A missing or unreadable file means
defaults, so a fresh test host needs no setup.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from ..utils.date import parse_datetime
from .exceptions import ConfigurationError
from .models import DateWindow, EventSpan

CONFIG_ENV_VAR = "CAL_BRIDGE_CONFIG"
WORKING_DIR_NAME = ".cal-bridge"
CONFIG_FILE = "config.json"

BACKENDS = ("eventkit", "memory")

logger = logging.getLogger(__name__)


def _normalize_path(path: str) -> str:
    """Expand user and convert to absolute path."""
    return os.path.abspath(os.path.expanduser(path))


@dataclass
class BridgeConfig:
    """Settings used to construct a CalendarBridge."""

    span: EventSpan = EventSpan.FUTURE_EVENTS
    window_days_back: int = 365
    window_days_ahead: int = 365
    window_start: Optional[datetime] = None
    window_end: Optional[datetime] = None
    bound_reminders: bool = False
    authorization_timeout: float = 30.0
    backend: str = "eventkit"

    def __post_init__(self):
        if self.backend not in BACKENDS:
            raise ConfigurationError(
                f"Unknown backend '{self.backend}' (expected one of: {', '.join(BACKENDS)})"
            )
        if self.window_days_back < 0 or self.window_days_ahead < 0:
            raise ConfigurationError("Window day counts must not be negative")
        if self.authorization_timeout <= 0:
            raise ConfigurationError("authorization_timeout must be positive")

    def window(self, now: Optional[datetime] = None) -> DateWindow:
        """
        Resolve the removal window.

        Explicit ``window_start``/``window_end`` win over the day counts. With
        the default counts this is one calendar year either side of now.
        """
        if self.window_start or self.window_end:
            computed = self._relative_window(now)
            return DateWindow(
                start=self.window_start or computed.start,
                end=self.window_end or computed.end,
            )
        return self._relative_window(now)

    def _relative_window(self, now: Optional[datetime]) -> DateWindow:
        if self.window_days_back == 365 and self.window_days_ahead == 365:
            return DateWindow.default(now)
        return DateWindow.around(self.window_days_back, self.window_days_ahead, now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "span": self.span.name.lower(),
            "window": {
                "days_back": self.window_days_back,
                "days_ahead": self.window_days_ahead,
                "start": self.window_start.isoformat() if self.window_start else None,
                "end": self.window_end.isoformat() if self.window_end else None,
            },
            "bound_reminders": self.bound_reminders,
            "authorization_timeout": self.authorization_timeout,
            "backend": self.backend,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> BridgeConfig:
        span_name = str(data.get("span", "future_events")).upper()
        try:
            span = EventSpan[span_name]
        except KeyError:
            raise ConfigurationError(f"Unknown event span '{data.get('span')}'")

        window = data.get("window", {}) or {}
        return cls(
            span=span,
            window_days_back=int(window.get("days_back", 365)),
            window_days_ahead=int(window.get("days_ahead", 365)),
            window_start=parse_datetime(window.get("start")),
            window_end=parse_datetime(window.get("end")),
            bound_reminders=bool(data.get("bound_reminders", False)),
            authorization_timeout=float(data.get("authorization_timeout", 30.0)),
            backend=data.get("backend", "eventkit"),
        )

    @classmethod
    def load_from_file(cls, config_path: str) -> BridgeConfig:
        config_path = _normalize_path(config_path)
        if not os.path.exists(config_path):
            return cls()

        try:
            with open(config_path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable config file %s", config_path)
            return cls()

        return cls.from_dict(data)

    def save_to_file(self, config_path: str) -> None:
        config_path = _normalize_path(config_path)
        os.makedirs(os.path.dirname(config_path), exist_ok=True)
        with open(config_path, "w", encoding="utf-8") as handle:
            json.dump(self.to_dict(), handle, indent=2)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(_normalize_path(override))
    return Path.home() / WORKING_DIR_NAME / CONFIG_FILE


def load_config(config_path: Optional[str] = None) -> BridgeConfig:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        BridgeConfig object
    """
    if config_path is None:
        config_path = str(get_default_config_path())
    return BridgeConfig.load_from_file(config_path)


def save_config(config: BridgeConfig, config_path: Optional[str] = None):
    """
    Save configuration to file.

    Args:
        config: BridgeConfig object to save
        config_path: Optional path to save to. Uses default if not provided.
    """
    if config_path is None:
        config_path = str(get_default_config_path())
    config.save_to_file(config_path)
