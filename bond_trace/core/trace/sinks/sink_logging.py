"""
Logging trace sink.
"""
from __future__ import annotations

import logging

from bond_trace.core.trace.events import TraceEvent
from bond_trace.core.trace.render import render_event


class LoggingTraceSink:
    """Logs rendered trace lines using the standard logging module."""

    def __init__(self, logger: logging.Logger, level: int = logging.INFO) -> None:
        self._logger = logger
        self._level = level

    def on_event(self, event: TraceEvent) -> None:
        self._logger.log(
            self._level,
            "%s",
            render_event(event),
            extra={"trace_event": event.to_record()},
        )
