"""
Logging module - Structured logging system.

HUMAN level (25) for user-facing notices on stderr, HumanLogHandler and
the HumanLog helper; technical logs through structlog.
"""

from .human import HumanLog, HumanLogHandler
from .levels import HUMAN
from .setup import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
    "HUMAN",
    "HumanLog",
    "HumanLogHandler",
]
