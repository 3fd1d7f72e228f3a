"""
Semantic test: scalar dispatch per data type.

Invariant:
Each scalar type is read with the width and encoding Compact Binary
declares for it, and produces exactly one event carrying the decoded text.
Unknown tags produce a skipped event and consume no bytes.
"""

from __future__ import annotations

import struct

import pytest

from bond_trace.core.decoder.session import DecodeSession
from bond_trace.core.domain.types import DataType


@pytest.mark.parametrize(
    ("payload", "data_type", "expected"),
    [
        (b"\x22\x01", DataType.BOOL, "True"),
        (b"\x22\x00", DataType.BOOL, "False"),
        (b"\x23\xff", DataType.UINT8, "255"),
        (b"\x24\xac\x02", DataType.UINT16, "300"),
        (b"\x25\xff\xff\xff\xff\x0f", DataType.UINT32, "4294967295"),
        (b"\x26" + b"\xff" * 9 + b"\x01", DataType.UINT64, "18446744073709551615"),
        (b"\x27" + struct.pack("<f", 1.5), DataType.FLOAT, "1.5"),
        (b"\x28" + struct.pack("<d", -2.25), DataType.DOUBLE, "-2.25"),
        (b"\x29\x03abc", DataType.STRING, "abc"),
        (b"\x2e\xfe", DataType.INT8, "-2"),
        (b"\x2f\x03", DataType.INT16, "-2"),
        (b"\x30\x54", DataType.INT32, "42"),
        (b"\x31\x01", DataType.INT64, "-1"),
        (b"\x32\x02" + "hi".encode("utf-16-le"), DataType.WSTRING, "hi"),
    ],
)
def test_scalar_field_value(payload: bytes, data_type: DataType, expected: str) -> None:
    session = DecodeSession(payload + b"\x00")

    events = session.decode_struct()

    fields = [e for e in events if e.kind == "field"]
    assert len(fields) == 1
    assert fields[0].data_type is data_type
    assert fields[0].field_id == 1
    assert fields[0].value == expected
    assert session.cursor.eof()


def test_string_with_invalid_utf8_is_replaced_not_fatal() -> None:
    session = DecodeSession(b"\x29\x02\xff\xfe\x00")

    events = session.decode_struct()

    assert events[1].value == "\ufffd\ufffd"


def test_unknown_field_tag_is_skipped() -> None:
    session = DecodeSession(b"\x3f\x30\x54\x00")

    events = session.decode_struct()

    assert [e.kind for e in events] == [
        "struct_begin",
        "skipped",
        "field",
        "stop",
        "struct_end",
    ]
    skipped = events[1]
    assert skipped.data_type is DataType.UNAVAILABLE
    assert skipped.field_id == 1
    assert skipped.value is None
    assert skipped.offset == 0
    # The following field header starts right after the unknown tag byte.
    assert events[2].offset == 1
