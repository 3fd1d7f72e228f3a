from __future__ import annotations

import struct

from bond_trace.core.domain.errors import InvalidVarint, TruncatedInput

_FLOAT = struct.Struct("<f")
_DOUBLE = struct.Struct("<d")
_UINT16 = struct.Struct("<H")


def zigzag_decode(value: int) -> int:
    """ZigZag-decode an unsigned integer to signed."""
    if value & 1:
        return -(value >> 1) - 1
    return value >> 1


class ByteCursor:
    """
    Read position over an immutable payload.

    Supports:
      - unsigned varints bounded by the target width
      - little-endian fixed-width numerics
      - varint length-prefixed byte runs

    Every read either advances the position by exactly what it consumed or
    raises without moving it.
    """

    def __init__(self, data: bytes) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def __len__(self) -> int:
        return len(self._data)

    def eof(self) -> bool:
        return self._pos >= len(self._data)

    def _require(self, n: int) -> None:
        if self.remaining < n:
            raise TruncatedInput(offset=self._pos, needed=n, available=self.remaining)

    def read_bytes(self, n: int) -> bytes:
        self._require(n)
        out = self._data[self._pos:self._pos + n]
        self._pos += n
        return out

    def skip(self, n: int) -> None:
        if n < 0:
            raise ValueError("skip count must be >= 0")
        self._require(n)
        self._pos += n

    def read_uint8(self) -> int:
        self._require(1)
        b = self._data[self._pos]
        self._pos += 1
        return b

    def read_int8(self) -> int:
        b = self.read_uint8()
        return b - 0x100 if b & 0x80 else b

    def read_uint16_le(self) -> int:
        return _UINT16.unpack(self.read_bytes(2))[0]

    def read_float(self) -> float:
        return _FLOAT.unpack(self.read_bytes(4))[0]

    def read_double(self) -> float:
        return _DOUBLE.unpack(self.read_bytes(8))[0]

    def read_varint(self, width_bits: int = 64) -> int:
        """Unsigned LEB128 varint truncated to ``width_bits``.

        The chain may span at most ceil(width_bits / 7) bytes.
        """
        max_bytes = -(-width_bits // 7)
        start = self._pos
        result = 0
        shift = 0
        for i in range(max_bytes):
            if start + i >= len(self._data):
                raise TruncatedInput(offset=start, needed=i + 1, available=i)
            b = self._data[start + i]
            result |= (b & 0x7F) << shift
            if not b & 0x80:
                self._pos = start + i + 1
                return result & ((1 << width_bits) - 1)
            shift += 7
        raise InvalidVarint(offset=start, max_bytes=max_bytes)

    def read_signed_varint(self, width_bits: int = 64) -> int:
        return zigzag_decode(self.read_varint(width_bits))

    def read_length_prefixed_bytes(self, unit: int = 1) -> bytes:
        """Read a 32-bit varint count followed by ``count * unit`` bytes."""
        start = self._pos
        count = self.read_varint(32)
        try:
            return self.read_bytes(count * unit)
        except TruncatedInput:
            self._pos = start
            raise
