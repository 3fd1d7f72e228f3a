"""Field and container header decoding for Compact Binary v1 and v2.

Field header layout:
  - tag byte: bits [0:4] hold the data type.
  - v1: non-terminal tags are followed by a little-endian uint16 field id.
  - v2: bits [5:7] hold the id when it is <= 5; 6 means a uint8 id follows,
    7 means a little-endian uint16 id follows.

Container header layout:
  - list/set: element type byte, then a 32-bit varint count. Under v2 a
    non-zero value in bits [5:7] of the element type byte packs the count
    as ``bits - 1`` and no varint follows.
  - map: key type byte, value type byte, then a 32-bit varint count.
"""

from __future__ import annotations

from bond_trace.core.domain.type_tables import is_terminal_type
from bond_trace.core.domain.types import (
    ContainerHeader,
    DataType,
    FieldHeader,
    ProtocolVersion,
)
from bond_trace.core.io.byte_cursor import ByteCursor

TYPE_MASK = 0x1F
PACKED_SHIFT = 5

# v2 packed id markers
_ID_INLINE_MAX = 5
_ID_UINT8 = 6


def read_field_header(cursor: ByteCursor, version: ProtocolVersion) -> FieldHeader:
    """Read one field header."""
    raw = cursor.read_uint8()
    raw_type = raw & TYPE_MASK
    data_type = DataType.from_tag(raw_type)

    if version == ProtocolVersion.V1:
        if is_terminal_type(data_type):
            return FieldHeader(data_type=data_type, field_id=0, raw_type=raw_type)
        field_id = cursor.read_uint16_le()
        return FieldHeader(data_type=data_type, field_id=field_id, raw_type=raw_type)

    packed = raw >> PACKED_SHIFT
    if packed <= _ID_INLINE_MAX:
        field_id = packed
    elif packed == _ID_UINT8:
        field_id = cursor.read_uint8()
    else:
        field_id = cursor.read_uint16_le()

    return FieldHeader(data_type=data_type, field_id=field_id, raw_type=raw_type)


def read_container_header(
    cursor: ByteCursor,
    version: ProtocolVersion,
    is_map: bool,
) -> ContainerHeader:
    """Read the element type(s) and count of a container."""
    if is_map:
        raw_key = cursor.read_uint8()
        raw_value = cursor.read_uint8()
        count = cursor.read_varint(32)
        return ContainerHeader(
            element_type=DataType.from_tag(raw_key),
            count=count,
            raw_element_type=raw_key,
            value_type=DataType.from_tag(raw_value),
            raw_value_type=raw_value,
        )

    raw = cursor.read_uint8()
    raw_element = raw & TYPE_MASK
    packed = raw >> PACKED_SHIFT

    if version == ProtocolVersion.V2 and packed != 0:
        count = packed - 1
    else:
        count = cursor.read_varint(32)

    return ContainerHeader(
        element_type=DataType.from_tag(raw_element),
        count=count,
        raw_element_type=raw_element,
    )
