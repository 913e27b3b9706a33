"""
Event listeners: console and JSON output, a JSONL file sink, and an
in-memory collector for rendering a run after the fact.
"""

import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..models.enums import EventType
from ..models.events import Event
from ..utils.logging import get_logger

logger = get_logger(__name__)

_stderr_console = Console(stderr=True)

LANE_STYLES = {
    "router": "cyan",
    "orchestrator": "magenta",
    "research": "blue",
    "llm": "yellow",
    "system": "dim",
}


def console_logger(event: Event) -> None:
    """Print one line per event to stderr, indented when it has a parent."""
    prefix = "  └─" if event.parent_id else "●"
    style = LANE_STYLES.get(event.lane.value, "white")
    _stderr_console.print(
        f"{prefix} [{style}]\\[{event.lane.value}][/{style}] {event.type.value} "
        f"[dim]{escape(json.dumps(event.data, default=str))}[/dim]"
    )


def json_logger(event: Event) -> None:
    """Print the event as one JSON object per line on stdout."""
    print(event.model_dump_json())


class JsonlEventSink:
    """
    Appends every event to a JSONL file.

    Example:
        sink = JsonlEventSink(Path("./logs/events.jsonl"))
        unsubscribe = emitter.subscribe(sink)
        ...
        unsubscribe()
        sink.close()
    """

    def __init__(self, log_file: Path | str):
        self.log_file = Path(log_file)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self._handle = self.log_file.open("a", encoding="utf-8")

    def __call__(self, event: Event) -> None:
        self._handle.write(event.model_dump_json() + "\n")
        self._handle.flush()

    def close(self) -> None:
        if not self._handle.closed:
            self._handle.close()

    @staticmethod
    def load(log_file: Path | str) -> list[Event]:
        """Read events back from a JSONL file, skipping malformed lines."""
        path = Path(log_file)
        if not path.exists():
            return []

        events = []
        with path.open("r", encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    events.append(Event.model_validate_json(line))
                except ValueError as e:
                    logger.warning("failed_to_parse_event_line", error=str(e))
        return events


class EventCollector:
    """Retains received events in emission order."""

    def __init__(self):
        self.events: list[Event] = []

    def __call__(self, event: Event) -> None:
        self.events.append(event)

    def __len__(self) -> int:
        return len(self.events)

    def clear(self) -> None:
        self.events.clear()

    def by_type(self, event_type: EventType) -> list[Event]:
        return [e for e in self.events if e.type == event_type]

    def get(self, event_id: str) -> Event | None:
        for event in self.events:
            if event.id == event_id:
                return event
        return None

    def children_of(self, parent_id: str | None) -> list[Event]:
        return [e for e in self.events if e.parent_id == parent_id]

    def roots(self) -> list[Event]:
        """Events whose parent is absent from the collection."""
        ids = {e.id for e in self.events}
        return [e for e in self.events if e.parent_id is None or e.parent_id not in ids]
