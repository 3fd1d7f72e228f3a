"""Human-readable rendering of trace events.

One event renders to exactly one line, indented by one tab per depth level.
"""

from __future__ import annotations

from typing import Callable, Iterable

from bond_trace.core.trace.events import TraceEvent

BANNER_WIDTH = 25
_BAR = "═" * BANNER_WIDTH


def _type_name(event: TraceEvent) -> str:
    return event.data_type.name if event.data_type is not None else "?"


def _with_value(line: str, event: TraceEvent) -> str:
    if event.value is None:
        return line
    return f"{line}\t{event.value}"


def _field_line(event: TraceEvent) -> str:
    line = f"Data type: {_type_name(event):>15}\tField ID: {event.field_id:>15}"
    return _with_value(line, event)


def _labelled(label: str) -> Callable[[TraceEvent], str]:
    def fmt(event: TraceEvent) -> str:
        return _with_value(f"{label} {event.index}: {_type_name(event)}", event)

    return fmt


def _banner_open(title: str) -> Callable[[TraceEvent], str]:
    def fmt(event: TraceEvent) -> str:
        line = f"╔{_BAR} {title} {_BAR}╗"
        return f"{line} {event.detail}" if event.detail else line

    return fmt


def _banner_close(title: str) -> Callable[[TraceEvent], str]:
    def fmt(event: TraceEvent) -> str:
        return f"╚{_BAR} {title} {_BAR}╝"

    return fmt


def _skipped_line(event: TraceEvent) -> str:
    line = f"Skipping data type: {_type_name(event):>10}"
    if event.detail:
        line = f"{line} ({event.detail})"
    if event.field_id is not None:
        line = f"{line}\tField ID: {event.field_id}"
    return line


_FORMATTERS: dict[str, Callable[[TraceEvent], str]] = {
    "struct_begin": _banner_open("STR"),
    "struct_end": _banner_close("STR"),
    "field": _field_line,
    "stop": _field_line,
    "base_end": _field_line,
    "element": _labelled("Item"),
    "map_key": _labelled("Key"),
    "map_value": _labelled("Value"),
    "container_begin": _banner_open("CON"),
    "container_end": _banner_close("CON"),
    "implausible": lambda e: (
        f"Container way too big ({e.detail}). "
        "Unlikely we're looking at the right structure."
    ),
    "skipped": _skipped_line,
    "iteration_begin": lambda e: (
        f"╔{_BAR} INCREMENTAL DISCOVERY ITERATION {e.index} {_BAR}╗"
    ),
    "iteration_end": lambda e: (
        f"╚{_BAR} END INCREMENTAL DISCOVERY ITERATION {e.index} {_BAR}╝"
    ),
    "iteration_failed": lambda e: (
        f"Failed to process iteration due to wrong byte structure ({e.detail}). "
        "This is likely not the start of the envelope."
    ),
    "notice": lambda e: e.detail or "",
}


def render_event(event: TraceEvent) -> str:
    """Render one event as a single indented line."""
    return "\t" * event.depth + _FORMATTERS[event.kind](event)


def render_trace(events: Iterable[TraceEvent]) -> str:
    """Render a whole trace, one line per event, newline terminated."""
    return "".join(render_event(event) + "\n" for event in events)
