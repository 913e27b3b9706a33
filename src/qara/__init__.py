"""
Qara - Natural Language Skill Router
Trie-based routing to skills and a parallel multi-phase research pipeline
"""

# Setup rich tracebacks globally
from .utils.rich_logging import setup_rich_logging
setup_rich_logging()

from .core.config import QaraConfig
from .exceptions import ConfigurationError, LLMError, NoRouteError, QaraError
from .observability.emitter import EventEmitter
from .runtime import ExecuteOptions, ExecuteResult, QaraRuntime, create_runtime

__version__ = "2.0.0"

__all__ = [
    "QaraRuntime",
    "create_runtime",
    "ExecuteOptions",
    "ExecuteResult",
    "EventEmitter",
    "QaraConfig",
    "QaraError",
    "NoRouteError",
    "LLMError",
    "ConfigurationError",
]
