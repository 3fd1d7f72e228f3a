"""Recursive struct and container walker over a Compact Binary payload."""

from __future__ import annotations

from functools import partial
from typing import Callable

from bond_trace.core.config.decoder_config import DecoderConfig
from bond_trace.core.domain.errors import NestingTooDeep
from bond_trace.core.domain.type_tables import SCALAR_VARINT_WIDTHS
from bond_trace.core.domain.types import ContainerHeader, DataType
from bond_trace.core.io.byte_cursor import ByteCursor
from bond_trace.core.protocol.tag_decoder import (
    read_container_header,
    read_field_header,
)
from bond_trace.core.trace.events import TraceEvent, TraceEventKind

_UNSIGNED_VARINT_TYPES = (DataType.UINT16, DataType.UINT32, DataType.UINT64)
_SIGNED_VARINT_TYPES = (DataType.INT16, DataType.INT32, DataType.INT64)


class DecodeSession:
    """One decode attempt over one buffer.

    The session exclusively owns its cursor and its append-only trace.

    Invariants:
    - ``depth`` counts enclosing structs and is back to its entry value when
      any walker returns or raises.
    - Every dispatched value emits exactly one event at the current depth;
      nested walkers then emit their own events.
    - Read failures propagate unchanged to the caller.
    """

    # pylint: disable=too-many-instance-attributes

    def __init__(self, data: bytes, config: DecoderConfig | None = None) -> None:
        self.config = config if config is not None else DecoderConfig()
        self._cursor = ByteCursor(data)
        self._events: list[TraceEvent] = []
        self._depth = 0
        # Structs and containers together; bounded by config.max_depth.
        self._nesting = 0

        cursor = self._cursor
        self._scalar_readers: dict[DataType, Callable[[], str]] = {
            DataType.BOOL: lambda: str(cursor.read_uint8() != 0),
            DataType.UINT8: lambda: str(cursor.read_uint8()),
            DataType.INT8: lambda: str(cursor.read_int8()),
            DataType.FLOAT: lambda: str(cursor.read_float()),
            DataType.DOUBLE: lambda: str(cursor.read_double()),
            DataType.STRING: lambda: cursor.read_length_prefixed_bytes(1).decode(
                "utf-8", errors="replace"
            ),
            DataType.WSTRING: lambda: cursor.read_length_prefixed_bytes(2).decode(
                "utf-16-le", errors="replace"
            ),
        }
        for data_type in _UNSIGNED_VARINT_TYPES:
            self._scalar_readers[data_type] = partial(
                self._read_unsigned, SCALAR_VARINT_WIDTHS[data_type]
            )
        for data_type in _SIGNED_VARINT_TYPES:
            self._scalar_readers[data_type] = partial(
                self._read_signed, SCALAR_VARINT_WIDTHS[data_type]
            )

        self._nested_walkers: dict[DataType, Callable[[], None]] = {
            DataType.STRUCT: self._walk_struct,
            DataType.LIST: partial(self._walk_container, DataType.LIST),
            DataType.SET: partial(self._walk_container, DataType.SET),
            DataType.MAP: partial(self._walk_container, DataType.MAP),
        }

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> ByteCursor:
        return self._cursor

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def events(self) -> tuple[TraceEvent, ...]:
        return tuple(self._events)

    def decode_struct(self) -> tuple[TraceEvent, ...]:
        """Walk one struct from the cursor and return the events it produced."""
        start = len(self._events)
        self._walk_struct()
        return tuple(self._events[start:])

    def decode_container(self, is_map: bool) -> tuple[TraceEvent, ...]:
        """Walk one container header and its elements from the cursor."""
        start = len(self._events)
        self._walk_container(DataType.MAP if is_map else DataType.LIST)
        return tuple(self._events[start:])

    # ------------------------------------------------------------------
    # Emission
    # ------------------------------------------------------------------

    def _emit(self, kind: TraceEventKind, **fields: object) -> None:
        self._events.append(TraceEvent(kind=kind, depth=self._depth, **fields))

    def _enter_nested(self) -> None:
        if self._nesting >= self.config.max_depth:
            raise NestingTooDeep(
                offset=self._cursor.position,
                limit=self.config.max_depth,
            )
        self._nesting += 1

    # ------------------------------------------------------------------
    # Struct walker
    # ------------------------------------------------------------------

    def _walk_struct(self) -> None:
        offset = self._cursor.position
        self._enter_nested()
        try:
            detail = None
            if self.config.struct_length_prefix:
                detail = f"length: {self._cursor.read_varint(32)}"

            self._emit("struct_begin", offset=offset, detail=detail)
            self._depth += 1
            try:
                self._walk_fields()
            finally:
                self._depth -= 1
            self._emit("struct_end", offset=self._cursor.position)
        finally:
            self._nesting -= 1

    def _walk_fields(self) -> None:
        version = self.config.version
        while True:
            offset = self._cursor.position
            header = read_field_header(self._cursor, version)

            if header.is_stop:
                self._emit(
                    "stop",
                    data_type=header.data_type,
                    field_id=header.field_id,
                    offset=offset,
                )
                return

            if header.is_base_end:
                # Closes one inheritance level; the outer struct keeps reading.
                self._emit(
                    "base_end",
                    data_type=header.data_type,
                    field_id=header.field_id,
                    offset=offset,
                )
                continue

            self._dispatch(
                "field",
                header.data_type,
                header.raw_type,
                offset,
                field_id=header.field_id,
            )

    # ------------------------------------------------------------------
    # Container walker
    # ------------------------------------------------------------------

    def _walk_container(self, container_type: DataType) -> None:
        offset = self._cursor.position
        self._enter_nested()
        try:
            header = read_container_header(
                self._cursor,
                self.config.version,
                is_map=container_type is DataType.MAP,
            )
            shape = _describe_container(container_type, header)

            if self._is_implausible(header):
                self._emit(
                    "implausible",
                    data_type=container_type,
                    detail=shape,
                    offset=offset,
                )
                return

            self._emit(
                "container_begin",
                data_type=container_type,
                detail=shape,
                offset=offset,
            )

            for i in range(header.count):
                if header.value_type is None:
                    self._dispatch_element("element", header.element_type, header.raw_element_type, i)
                else:
                    self._dispatch_element("map_key", header.element_type, header.raw_element_type, i)
                    self._dispatch_element("map_value", header.value_type, header.raw_value_type, i)

            self._emit(
                "container_end",
                data_type=container_type,
                offset=self._cursor.position,
            )
        finally:
            self._nesting -= 1

    def _is_implausible(self, header: ContainerHeader) -> bool:
        """Heuristic guard against walking garbage as an enormous loop."""
        if header.count >= self.config.container_ceiling:
            return True
        min_element_width = 2 if header.is_map else 1
        return header.count * min_element_width > self._cursor.remaining

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _dispatch_element(
        self,
        kind: TraceEventKind,
        data_type: DataType,
        raw_type: int | None,
        index: int,
    ) -> None:
        self._dispatch(kind, data_type, raw_type, self._cursor.position, index=index)

    def _dispatch(
        self,
        kind: TraceEventKind,
        data_type: DataType,
        raw_type: int | None,
        offset: int,
        *,
        field_id: int | None = None,
        index: int | None = None,
    ) -> None:
        reader = self._scalar_readers.get(data_type)
        if reader is not None:
            value = reader()
            self._emit(
                kind,
                data_type=data_type,
                field_id=field_id,
                index=index,
                value=value,
                offset=offset,
            )
            return

        walker = self._nested_walkers.get(data_type)
        if walker is not None:
            self._emit(
                kind,
                data_type=data_type,
                field_id=field_id,
                index=index,
                offset=offset,
            )
            walker()
            return

        # Unknown tags imply no structural size, so nothing is consumed.
        self._emit(
            "skipped",
            data_type=data_type,
            field_id=field_id,
            index=index,
            detail=f"tag 0x{raw_type:02x}" if raw_type is not None else None,
            offset=offset,
        )

    def _read_unsigned(self, width_bits: int) -> str:
        return str(self._cursor.read_varint(width_bits))

    def _read_signed(self, width_bits: int) -> str:
        return str(self._cursor.read_signed_varint(width_bits))


def _describe_container(container_type: DataType, header: ContainerHeader) -> str:
    if header.value_type is None:
        return f"{container_type.name}<{header.element_type.name}> items: {header.count}"
    return (
        f"{container_type.name}<{header.element_type.name}, {header.value_type.name}> "
        f"items: {header.count}"
    )
