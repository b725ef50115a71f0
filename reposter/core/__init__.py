"""Core relay system for the reposter bot."""

from .access import is_admin, is_unconfigured
from .errors import ErrorReporter
from .relay import RelayEngine, RelayResult, FORWARD_DELAY

__all__ = [
    "is_admin",
    "is_unconfigured",
    "ErrorReporter",
    "RelayEngine",
    "RelayResult",
    "FORWARD_DELAY"
]
