"""Brute-force discovery of a struct start in a payload of unknown offset."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from bond_trace.core.config.decoder_config import DecoderConfig
from bond_trace.core.decoder.session import DecodeSession
from bond_trace.core.domain.errors import DecodeError
from bond_trace.core.trace.events import TraceEvent

LOGGER = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Attempt results
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DecodeSuccess:
    offset: int
    events: tuple[TraceEvent, ...]

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class DecodeFailure:
    """A failed attempt; ``events`` holds the partial trace up to the failure."""

    offset: int
    reason: str
    events: tuple[TraceEvent, ...]

    @property
    def ok(self) -> bool:
        return False


DecodeAttempt = DecodeSuccess | DecodeFailure


@dataclass(slots=True)
class DiscoveryReport:
    """Outcome of a full offset scan.

    - attempts: one result per offset, in offset order
    - succeeded_offsets: offsets whose struct decoded fully
    """

    attempts: list[DecodeAttempt] = field(default_factory=list)

    @property
    def succeeded_offsets(self) -> list[int]:
        return [attempt.offset for attempt in self.attempts if attempt.ok]

    def events(self) -> list[TraceEvent]:
        """Flatten all attempts into one trace with iteration banners."""
        out: list[TraceEvent] = []
        for attempt in self.attempts:
            out.append(TraceEvent(kind="iteration_begin", depth=0, index=attempt.offset))
            out.extend(attempt.events)
            if isinstance(attempt, DecodeFailure):
                out.append(
                    TraceEvent(
                        kind="iteration_failed",
                        depth=0,
                        index=attempt.offset,
                        detail=attempt.reason,
                    )
                )
            out.append(TraceEvent(kind="iteration_end", depth=0, index=attempt.offset))
        return out


# ---------------------------------------------------------------------------
# Driver
# ---------------------------------------------------------------------------


def attempt_decode(data: bytes, config: DecoderConfig, offset: int = 0) -> DecodeAttempt:
    """Decode one struct from ``data[offset:]`` in a fresh session."""
    session = DecodeSession(data[offset:], config)
    try:
        events = session.decode_struct()
    except DecodeError as exc:
        return DecodeFailure(offset=offset, reason=str(exc), events=session.events)
    return DecodeSuccess(offset=offset, events=events)


def discover(data: bytes, config: DecoderConfig | None = None) -> DiscoveryReport:
    """Attempt a full struct decode at every offset of ``data``.

    Attempts are independent; one offset's failure never stops the scan.
    """
    config = config if config is not None else DecoderConfig()
    report = DiscoveryReport()

    for offset in range(len(data)):
        report.attempts.append(attempt_decode(data, config, offset))

    LOGGER.info(
        "Discovery finished: %d of %d offsets decoded",
        len(report.succeeded_offsets),
        len(data),
        extra={"succeeded_offsets": report.succeeded_offsets},
    )
    return report
