"""
File recorder sink.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Literal

from bond_trace.core.trace.events import TraceEvent
from bond_trace.core.trace.render import render_event

LOGGER = logging.getLogger(__name__)

OutputFormat = Literal["text", "jsonl"]


class FileRecorderSink:
    """Persists the trace verbatim to a file when the bus is closed.

    ``text`` writes rendered lines; ``jsonl`` writes one JSON record per
    event. A failed write is logged and reported through ``written`` and
    ``error``; it never raises, so a completed decode stays valid.
    """

    def __init__(self, path: str | Path, fmt: OutputFormat = "text") -> None:
        if fmt not in ("text", "jsonl"):
            raise ValueError(f"Unknown output format: {fmt}")
        self._path = Path(path)
        self._fmt = fmt
        self._lines: list[str] = []
        self._closed = False
        self.written = False
        self.error: str | None = None

    @property
    def path(self) -> Path:
        return self._path

    def on_event(self, event: TraceEvent) -> None:
        if self._fmt == "jsonl":
            self._lines.append(json.dumps(event.to_record(), ensure_ascii=False))
        else:
            self._lines.append(render_event(event))

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True

        content = "".join(line + "\n" for line in self._lines)
        try:
            self._path.write_text(content, encoding="utf-8")
        except OSError as exc:
            self.error = str(exc)
            LOGGER.error(
                "Failed to write file to %s: %s",
                self._path,
                exc,
                extra={"output_path": str(self._path)},
            )
            return

        self.written = True
