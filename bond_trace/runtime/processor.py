"""Payload processing: load, decode (single or discovery), publish the trace."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from bond_trace.core.config.decoder_config import DecoderConfig
from bond_trace.core.decoder.discovery import discover
from bond_trace.core.decoder.session import DecodeSession
from bond_trace.core.domain.errors import DecodeError
from bond_trace.core.trace.events import TraceEvent
from bond_trace.core.trace.sinks.file_recorder import FileRecorderSink
from bond_trace.core.trace.sinks.memory_recorder import MemoryTraceSink
from bond_trace.core.trace.sinks.sink_logging import LoggingTraceSink
from bond_trace.core.trace.trace_bus import TraceBus
from bond_trace.core.trace.trace_sink import TraceSink
from bond_trace.runtime.context import ParseContext

LOGGER = logging.getLogger(__name__)

TRACE_LOGGER_NAME = "bond_trace.trace"


@dataclass
class ProcessResult:
    """Lightweight container for one parse invocation's outputs.

    ``succeeded_offsets`` is only set in discovery mode. ``output_written``
    is None when no output file was requested.
    """

    input_path: str
    payload_size: int
    events: list[TraceEvent]
    succeeded_offsets: list[int] | None = None
    output_path: str | None = None
    output_written: bool | None = None


class PayloadProcessor:
    """Runs one decode invocation over a payload file."""

    def __init__(
        self,
        config: DecoderConfig | None = None,
        *,
        extra_sinks: Iterable[TraceSink] = (),
    ) -> None:
        self._base_config = config if config is not None else DecoderConfig()
        self._extra_sinks = list(extra_sinks)

    def _build_trace_bus(
        self,
        ctx: ParseContext,
    ) -> tuple[TraceBus, MemoryTraceSink, FileRecorderSink | None]:
        memory = MemoryTraceSink()
        sinks: list[TraceSink] = [
            memory,
            LoggingTraceSink(logging.getLogger(TRACE_LOGGER_NAME)),
            *self._extra_sinks,
        ]

        bus = TraceBus(sinks=sinks)
        recorder = None
        if ctx.output_path is not None:
            recorder = FileRecorderSink(ctx.output_path, fmt=ctx.output_format)
            bus.register(recorder)

        return bus, memory, recorder

    def _session_config(self, ctx: ParseContext) -> DecoderConfig:
        return DecoderConfig.from_json_obj(
            {**self._base_config.model_dump(), "version": ctx.version}
        )

    @staticmethod
    def load(ctx: ParseContext) -> bytes:
        """Read the whole input file and drop ``ctx.skip`` leading bytes."""
        data = ctx.input_path.read_bytes()
        return data[ctx.skip:]

    def process(self, ctx: ParseContext) -> ProcessResult:
        """Decode the payload and flush the trace to every sink.

        In single mode a DecodeError is re-raised once the partial trace and a
        closing failure notice have been flushed. In discovery mode per-offset
        failures are part of the trace and never raise.
        """
        config = self._session_config(ctx)
        data = self.load(ctx)

        bus, memory, recorder = self._build_trace_bus(ctx)
        result = ProcessResult(
            input_path=str(ctx.input_path),
            payload_size=len(data),
            events=memory.events,
            output_path=str(ctx.output_path) if ctx.output_path is not None else None,
        )

        try:
            bus.emit(TraceEvent(kind="notice", depth=0, detail=f"Skipping bytes: {ctx.skip}"))

            if not data:
                bus.emit(TraceEvent(kind="notice", depth=0, detail="No byte content to read."))
            elif ctx.iterative_discovery:
                report = discover(data, config)
                bus.publish(report.events())
                result.succeeded_offsets = report.succeeded_offsets
            else:
                session = DecodeSession(data, config)
                try:
                    session.decode_struct()
                except DecodeError as exc:
                    bus.publish(session.events)
                    bus.emit(
                        TraceEvent(kind="notice", depth=0, detail=f"Decode failed: {exc}")
                    )
                    raise
                bus.publish(session.events)
        finally:
            bus.close()
            if recorder is not None:
                result.output_written = recorder.written

        LOGGER.debug(
            "Processed payload",
            extra={"input_path": result.input_path, "events": len(result.events)},
        )
        return result
