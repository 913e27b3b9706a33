"""
Observability for Qara.

Provides the hierarchical event emitter and listeners that consume its
live event stream.
"""

from .emitter import EventEmitter, EventListener
from .listeners import EventCollector, JsonlEventSink, console_logger, json_logger

__all__ = [
    "EventEmitter",
    "EventListener",
    "EventCollector",
    "JsonlEventSink",
    "console_logger",
    "json_logger",
]
