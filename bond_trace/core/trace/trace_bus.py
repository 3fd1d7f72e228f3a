"""
Simple synchronous trace bus.
"""
from __future__ import annotations

from typing import Iterable

from bond_trace.core.trace.events import TraceEvent
from bond_trace.core.trace.trace_sink import TraceSink


class TraceBus:
    """Dispatches trace events to registered sinks."""

    def __init__(self, sinks: Iterable[TraceSink] | None = None) -> None:
        self._sinks: list[TraceSink] = list(sinks) if sinks is not None else []
        self._closed = False

    def register(self, sink: TraceSink) -> None:
        """Register a new sink."""
        self._sinks.append(sink)

    def emit(self, event: TraceEvent) -> None:
        """Emit an event to all sinks."""
        for sink in self._sinks:
            sink.on_event(event)

    def publish(self, events: Iterable[TraceEvent]) -> None:
        """Flush a session's events to all sinks, in order."""
        for event in events:
            self.emit(event)

    def close(self) -> None:
        """
        Finalize all sinks that expose a close() method.
        """
        if self._closed:
            return

        for sink in self._sinks:
            close_fn = getattr(sink, "close", None)
            if callable(close_fn):
                close_fn()

        self._closed = True
