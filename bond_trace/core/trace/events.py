"""
Trace event models.

These events represent immutable facts observed while walking a payload.
They are consumed by renderers, recorders, and the console logger.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from bond_trace.core.domain.types import DataType

TraceEventKind = Literal[
    "struct_begin",
    "struct_end",
    "field",
    "stop",
    "base_end",
    "element",
    "map_key",
    "map_value",
    "container_begin",
    "container_end",
    "implausible",
    "skipped",
    "iteration_begin",
    "iteration_end",
    "iteration_failed",
    "notice",
]

@dataclass(frozen=True, slots=True)
class TraceEvent:
    kind: TraceEventKind
    depth: int

    data_type: DataType | None = None
    field_id: int | None = None
    index: int | None = None

    # Decoded scalar text; None for nested values and skipped tags.
    value: str | None = None
    detail: str | None = None

    offset: int | None = None

    def to_record(self) -> dict[str, Any]:
        """Return a JSON-compatible dict, omitting unset fields."""
        record: dict[str, Any] = {"kind": self.kind, "depth": self.depth}
        if self.data_type is not None:
            record["data_type"] = self.data_type.name
        if self.field_id is not None:
            record["field_id"] = self.field_id
        if self.index is not None:
            record["index"] = self.index
        if self.value is not None:
            record["value"] = self.value
        if self.detail is not None:
            record["detail"] = self.detail
        if self.offset is not None:
            record["offset"] = self.offset
        return record
