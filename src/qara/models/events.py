"""
Trace event model.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .enums import EventType, Lane


class Event(BaseModel):
    """A single write-once trace event.

    ``parent_id`` links the event into a tree rooted at the scope that was
    active when it was emitted.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: int = Field(..., description="Milliseconds since the epoch")
    type: EventType
    lane: Lane
    parent_id: str | None = None
    session_id: str | None = None
    data: dict[str, Any] = Field(default_factory=dict)
