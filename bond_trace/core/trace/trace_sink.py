"""
Trace sink interface.

Sinks consume trace events once a decode session has been flushed.
"""
from __future__ import annotations

from typing import Protocol

from bond_trace.core.trace.events import TraceEvent


class TraceSink(Protocol):
    def on_event(self, event: TraceEvent) -> None:
        """Consume a trace event."""
