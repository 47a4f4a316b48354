"""
Command implementations for cal-bridge.
"""

from .status import StatusCommand
from .authorize import AuthorizeCommand
from .seed import SeedCommand
from .clear import ClearCommand

__all__ = [
    'StatusCommand',
    'AuthorizeCommand',
    'SeedCommand',
    'ClearCommand',
]
