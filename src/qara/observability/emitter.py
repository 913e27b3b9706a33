"""
Hierarchical event emitter.

Events are delivered synchronously to subscribed listeners and linked into a
tree through ``parent_id``. The active session and the current
parent are held in one module-level ``contextvars.ContextVar`` rather than on
the emitter: every asyncio task works on its own copy of the context, so
concurrent runs sharing an emitter never see each other's sessions or scopes.

Parent resolution for a new event, in order:
1. ``parent_id`` passed explicitly to ``emit``/``scope``
2. the innermost open scope of the calling context
3. the root event of the active session

The emitter keeps no history; subscribers retain what they need.
"""

import time
import uuid
from collections.abc import Awaitable, Callable, Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from typing import Any, TypeVar

from ..models.enums import EventType, Lane
from ..models.events import Event
from ..utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

EventListener = Callable[[Event], None]


@dataclass(frozen=True)
class TraceState:
    """Per-context tracing state of one emitter."""

    session_id: str | None = None
    session_root: str | None = None
    parent: str | None = None
    previous: "TraceState | None" = None


_EMPTY_STATE = TraceState()

# Emitter key -> state. Never mutated in place; every change sets a new mapping.
_trace_states: ContextVar[Mapping[str, TraceState]] = ContextVar(
    "qara_trace_states", default={}
)


def generate_id() -> str:
    """Short unique event id."""
    return uuid.uuid4().hex[:16]


class EventEmitter:
    """
    Session-scoped event bus with context-local parent tracking.

    Example:
        emitter = EventEmitter()
        unsubscribe = emitter.subscribe(print)

        with emitter.scope(EventType.SKILL_START, Lane.ORCHESTRATOR, {"skill_id": "x"}):
            emitter.emit(EventType.SKILL_PROGRESS, Lane.ORCHESTRATOR, {"progress": 0.5})

        unsubscribe()
    """

    def __init__(self, enabled: bool = True):
        self._listeners: list[EventListener] = []
        self._enabled = enabled
        self._key = generate_id()

    # ------------------------------------------------------------------
    # Enable / disable
    # ------------------------------------------------------------------

    def enable(self) -> None:
        self._enabled = True

    def disable(self) -> None:
        self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def _state(self) -> TraceState:
        return _trace_states.get().get(self._key, _EMPTY_STATE)

    def _set_state(self, state: TraceState) -> Token:
        return _trace_states.set({**_trace_states.get(), self._key: state})

    @property
    def session_id(self) -> str | None:
        return self._state().session_id

    def start_session(self, input_text: str) -> str:
        """
        Begin a logical top-level run.

        Events emitted outside any scope are parented to the session's
        ``session.start`` event until ``end_session`` is called.

        Args:
            input_text: Raw user input that started the run

        Returns:
            New session id
        """
        session_id = generate_id()
        session = TraceState(session_id=session_id, previous=self._state())
        self._set_state(session)
        root = self.emit(
            EventType.SESSION_START,
            Lane.SYSTEM,
            {
                "session_id": session_id,
                "input": input_text,
                "timestamp": int(time.time() * 1000),
            },
        )
        self._set_state(replace(session, session_root=root))
        return session_id

    def end_session(self, success: bool, duration_ms: float) -> None:
        """
        Close the session active in the calling context.

        Restores whatever session was active before ``start_session``; a no-op
        when none is active.
        """
        state = self._state()
        if state.session_id is None:
            return
        self.emit(
            EventType.SESSION_END,
            Lane.SYSTEM,
            {"session_id": state.session_id, "duration_ms": duration_ms, "success": success},
        )
        self._set_state(state.previous or _EMPTY_STATE)

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def current_parent_id(self) -> str | None:
        """Parent that an event emitted here without an explicit parent would get."""
        state = self._state()
        return state.parent or state.session_root

    def emit(
        self,
        type: EventType,
        lane: Lane,
        data: dict[str, Any] | None = None,
        parent_id: str | None = None,
    ) -> str | None:
        """
        Create an event and deliver it to every listener.

        Args:
            type: Event type tag
            lane: Display lane
            data: Type-specific payload
            parent_id: Explicit parent, overriding the current scope

        Returns:
            The new event id, or None when emission is disabled
        """
        if not self._enabled:
            return None

        event = Event(
            id=generate_id(),
            timestamp=int(time.time() * 1000),
            type=type,
            lane=lane,
            parent_id=parent_id or self.current_parent_id(),
            session_id=self._state().session_id,
            data=data or {},
        )

        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.warning(
                    "event_listener_failed",
                    event_type=str(event.type),
                    listener=getattr(listener, "__name__", repr(listener)),
                    error=str(e),
                )
        return event.id

    @contextmanager
    def scope(
        self,
        type: EventType,
        lane: Lane,
        data: dict[str, Any] | None = None,
        parent_id: str | None = None,
    ) -> Iterator[str | None]:
        """
        Emit an event and make it the parent of everything emitted inside the block.

        The previous parent is restored on exit, including when the block raises.
        Safe to use around ``await`` expressions; do not hold a scope open
        across a ``yield`` in an async generator.

        Yields:
            The scope event id (None when emission is disabled)
        """
        event_id = self.emit(type, lane, data, parent_id=parent_id)
        if event_id is None:
            yield None
            return

        token = self._set_state(replace(self._state(), parent=event_id))
        try:
            yield event_id
        finally:
            _trace_states.reset(token)

    async def scope_async(
        self,
        type: EventType,
        lane: Lane,
        data: dict[str, Any] | None,
        fn: Callable[[], Awaitable[T]],
        parent_id: str | None = None,
    ) -> T:
        """Await ``fn()`` inside a scope and return its result."""
        with self.scope(type, lane, data, parent_id=parent_id):
            return await fn()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear_listeners(self) -> None:
        self._listeners.clear()

    def listener_count(self) -> int:
        return len(self._listeners)
