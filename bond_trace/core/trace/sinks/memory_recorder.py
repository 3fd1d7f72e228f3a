"""
In-memory recorder sink.
"""
from __future__ import annotations

from bond_trace.core.trace.events import TraceEvent
from bond_trace.core.trace.render import render_trace


class MemoryTraceSink:
    """Keeps every received event in order."""

    def __init__(self) -> None:
        self.events: list[TraceEvent] = []

    def on_event(self, event: TraceEvent) -> None:
        self.events.append(event)

    def text(self) -> str:
        return render_trace(self.events)
