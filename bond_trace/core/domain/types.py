"""Core wire-level types for the Compact Binary format.

This module defines the closed set of data types carried by tags on the
wire, the protocol versions that select header framing, and the decoded
field and container headers. These types are treated as the canonical
vocabulary of the decoder and every dispatch decision is keyed on them.
"""

# pylint: disable=missing-class-docstring
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

# ---------------------------------------------------------------------------
# Protocol versions
# ---------------------------------------------------------------------------


class ProtocolVersion(IntEnum):
    """Compact Binary framing variant, fixed for a decode session."""

    V1 = 1
    V2 = 2


# ---------------------------------------------------------------------------
# Data types (wire tag values)
# ---------------------------------------------------------------------------


class DataType(IntEnum):
    STOP = 0
    STOP_BASE = 1
    BOOL = 2
    UINT8 = 3
    UINT16 = 4
    UINT32 = 5
    UINT64 = 6
    FLOAT = 7
    DOUBLE = 8
    STRING = 9
    STRUCT = 10
    LIST = 11
    SET = 12
    MAP = 13
    INT8 = 14
    INT16 = 15
    INT32 = 16
    INT64 = 17
    WSTRING = 18
    UNAVAILABLE = 127

    @classmethod
    def from_tag(cls, raw: int) -> DataType:
        """Map a raw tag value onto the closed set.

        Values outside the known set collapse to UNAVAILABLE; callers keep the
        raw value when they need to display it.
        """
        try:
            return cls(raw)
        except ValueError:
            return cls.UNAVAILABLE


# ---------------------------------------------------------------------------
# Decoded headers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FieldHeader:
    """Tag + id pair preceding a struct field's value.

    STOP ends a struct's own fields; STOP_BASE ends one inheritance level.
    """

    data_type: DataType
    field_id: int
    raw_type: int

    @property
    def is_stop(self) -> bool:
        return self.data_type is DataType.STOP

    @property
    def is_base_end(self) -> bool:
        return self.data_type is DataType.STOP_BASE


@dataclass(frozen=True, slots=True)
class ContainerHeader:
    """Element descriptor and declared count of a list, set or map.

    ``value_type`` is only populated for maps, where ``element_type`` is the
    key type.
    """

    element_type: DataType
    count: int
    raw_element_type: int
    value_type: DataType | None = None
    raw_value_type: int | None = None

    def __post_init__(self) -> None:
        if self.count < 0:
            raise ValueError("container count must be >= 0")

    @property
    def is_map(self) -> bool:
        return self.value_type is not None
