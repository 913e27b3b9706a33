"""
Utility modules for Qara.
"""

from .logging import get_logger, setup_logging
from .rich_logging import QaraConsole, console, setup_rich_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "QaraConsole",
    "console",
    "setup_rich_logging",
]
