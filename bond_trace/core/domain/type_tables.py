"""
Data type classification tables.

This module groups the closed DataType set by the shape of value each type
carries on the wire. It is intentionally passive: it answers questions about
types and never reads bytes.
"""

from __future__ import annotations

from bond_trace.core.domain.types import DataType

# Terminal types: only valid as field headers, never as values.
TERMINAL_TYPES: frozenset[DataType] = frozenset(
    {
        DataType.STOP,
        DataType.STOP_BASE,
    }
)


# Scalar types and the varint width used for them.
#
# Key   : scalar data type
# Value : varint width in bits, or None when the value is fixed-width
#
# Notes:
# - UINT8 and INT8 are single raw bytes, not varints.
# - Signed varint types are zig-zag encoded.
SCALAR_VARINT_WIDTHS: dict[DataType, int | None] = {
    DataType.BOOL: None,
    DataType.UINT8: None,
    DataType.INT8: None,
    DataType.FLOAT: None,
    DataType.DOUBLE: None,

    DataType.UINT16: 16,
    DataType.UINT32: 32,
    DataType.UINT64: 64,

    DataType.INT16: 16,
    DataType.INT32: 32,
    DataType.INT64: 64,

    DataType.STRING: 32,
    DataType.WSTRING: 32,
}


def is_terminal_type(data_type: DataType) -> bool:
    """Return True if the type only appears as a struct terminator."""
    return data_type in TERMINAL_TYPES
