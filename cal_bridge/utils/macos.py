"""macOS-specific helpers."""

from __future__ import annotations

import logging
import platform
import time
from typing import Optional


def is_macos() -> bool:
    return platform.system() == "Darwin"


def has_eventkit() -> bool:
    """True when PyObjC's EventKit bindings can be imported."""
    if not is_macos():
        return False
    try:
        import EventKit  # type: ignore  # noqa: F401
    except ImportError:
        return False
    return True


def set_process_name(name: str, logger: Optional[logging.Logger] = None) -> bool:
    """Set the process name shown in the calendar permission prompt."""
    if not is_macos():
        return False

    try:
        from Foundation import NSProcessInfo  # type: ignore
    except ImportError:
        if logger:
            logger.debug("PyObjC not installed; cannot set process name")
        return False

    try:
        process_info = NSProcessInfo.processInfo()
        if process_info.processName() == name:
            return True
        process_info.setProcessName_(name)
        return True
    except Exception as exc:  # pragma: no cover - depends on the host
        if logger:
            logger.warning("Failed to set process name: %s", exc)
        return False


def wait_for(future, timeout: float):
    """
    Wait for a future, running the main run loop meanwhile on macOS.

    EventKit permission prompts and fetch callbacks need a live run loop
    when the waiting thread is the main thread.

    Raises:
        TimeoutError: If the future is not done within ``timeout`` seconds
    """
    try:
        from Foundation import NSDate, NSRunLoop  # type: ignore
    except ImportError:
        return future.result(timeout=timeout)

    deadline = time.time() + timeout
    while not future.done():
        if time.time() > deadline:
            raise TimeoutError(f"Timed out after {timeout} seconds")
        NSRunLoop.currentRunLoop().runUntilDate_(NSDate.dateWithTimeIntervalSinceNow_(0.1))
    return future.result()
