"""
Core configuration for Qara.
"""

from .config import QaraConfig, get_config, reset_config

__all__ = [
    "QaraConfig",
    "get_config",
    "reset_config",
]
