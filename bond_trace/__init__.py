"""Public API for the bond_trace package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Config API
# ----------------------------------------------------------------------
from bond_trace.core.config.decoder_config import DecoderConfig

# ----------------------------------------------------------------------
# Decoder API
# ----------------------------------------------------------------------
from bond_trace.core.decoder.discovery import (
    DecodeFailure,
    DecodeSuccess,
    DiscoveryReport,
    attempt_decode,
    discover,
)
from bond_trace.core.decoder.session import DecodeSession

# ----------------------------------------------------------------------
# Wire types and errors
# ----------------------------------------------------------------------
from bond_trace.core.domain.errors import (
    DecodeError,
    InvalidVarint,
    NestingTooDeep,
    TruncatedInput,
)
from bond_trace.core.domain.types import (
    ContainerHeader,
    DataType,
    FieldHeader,
    ProtocolVersion,
)
from bond_trace.core.io.byte_cursor import ByteCursor
from bond_trace.core.protocol.tag_decoder import (
    read_container_header,
    read_field_header,
)

# ----------------------------------------------------------------------
# Trace API
# ----------------------------------------------------------------------
from bond_trace.core.trace.events import TraceEvent
from bond_trace.core.trace.render import render_event, render_trace
from bond_trace.core.trace.trace_bus import TraceBus

# ----------------------------------------------------------------------
# Runtime API
# ----------------------------------------------------------------------
from bond_trace.runtime.context import ParseContext
from bond_trace.runtime.processor import PayloadProcessor, ProcessResult

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Config
    "DecoderConfig",

    # Decoder
    "DecodeSession",
    "DecodeSuccess",
    "DecodeFailure",
    "DiscoveryReport",
    "attempt_decode",
    "discover",

    # Wire types
    "ByteCursor",
    "ContainerHeader",
    "DataType",
    "FieldHeader",
    "ProtocolVersion",
    "read_container_header",
    "read_field_header",

    # Errors
    "DecodeError",
    "InvalidVarint",
    "NestingTooDeep",
    "TruncatedInput",

    # Trace
    "TraceEvent",
    "TraceBus",
    "render_event",
    "render_trace",

    # Runtime
    "ParseContext",
    "PayloadProcessor",
    "ProcessResult",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("bond-trace")
except PackageNotFoundError:
    __version__ = "0.0.0"
