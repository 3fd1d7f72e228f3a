"""
Semantic test: field header framing per protocol version.

Invariant:
v1 follows every non-terminal tag with a little-endian uint16 field id.
v2 packs ids <= 5 into the tag byte; 6 and 7 announce a following uint8 or
uint16 id. Tags outside the known set decode as UNAVAILABLE.
"""

from __future__ import annotations

from bond_trace.core.domain.types import DataType, ProtocolVersion
from bond_trace.core.io.byte_cursor import ByteCursor
from bond_trace.core.protocol.tag_decoder import read_field_header


def test_v1_reads_explicit_uint16_field_id() -> None:
    cursor = ByteCursor(b"\x10\x34\x12")

    header = read_field_header(cursor, ProtocolVersion.V1)

    assert header.data_type is DataType.INT32
    assert header.field_id == 0x1234
    assert cursor.position == 3


def test_v1_terminators_carry_no_field_id() -> None:
    cursor = ByteCursor(b"\x01\x00")

    base_end = read_field_header(cursor, ProtocolVersion.V1)
    stop = read_field_header(cursor, ProtocolVersion.V1)

    assert base_end.is_base_end
    assert stop.is_stop
    assert stop.field_id == 0
    assert cursor.position == 2


def test_v2_packs_small_field_ids_into_the_tag() -> None:
    cursor = ByteCursor(b"\x30\xa9")

    first = read_field_header(cursor, ProtocolVersion.V2)
    second = read_field_header(cursor, ProtocolVersion.V2)

    assert (first.data_type, first.field_id) == (DataType.INT32, 1)
    assert (second.data_type, second.field_id) == (DataType.STRING, 5)
    assert cursor.position == 2


def test_v2_escape_six_reads_uint8_field_id() -> None:
    cursor = ByteCursor(b"\xd0\x07")

    header = read_field_header(cursor, ProtocolVersion.V2)

    assert (header.data_type, header.field_id) == (DataType.INT32, 7)
    assert cursor.position == 2


def test_v2_escape_seven_reads_uint16_field_id() -> None:
    cursor = ByteCursor(b"\xf0\x34\x12")

    header = read_field_header(cursor, ProtocolVersion.V2)

    assert (header.data_type, header.field_id) == (DataType.INT32, 0x1234)
    assert cursor.position == 3


def test_unknown_tag_maps_to_unavailable_and_keeps_raw_value() -> None:
    cursor = ByteCursor(b"\x3f")

    header = read_field_header(cursor, ProtocolVersion.V2)

    assert header.data_type is DataType.UNAVAILABLE
    assert header.raw_type == 0x1F
    assert header.field_id == 1
