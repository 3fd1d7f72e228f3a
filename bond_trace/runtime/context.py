from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from bond_trace.core.domain.types import ProtocolVersion
from bond_trace.core.trace.sinks.file_recorder import OutputFormat


@dataclass(frozen=True, slots=True)
class ParseContext:
    """
    Immutable runtime context for a single parse invocation.

    One ParseContext == one input file == one trace.
    """

    input_path: Path
    output_path: Path | None = None

    version: ProtocolVersion = ProtocolVersion.V2
    iterative_discovery: bool = False

    # Leading bytes dropped before decoding starts.
    skip: int = 0

    output_format: OutputFormat = "text"

    def __post_init__(self) -> None:
        """
        Normalize paths and the version after CLI or JSON construction,
        where they may arrive as plain strings and ints.
        """
        object.__setattr__(self, "input_path", Path(self.input_path))
        if self.output_path is not None:
            object.__setattr__(self, "output_path", Path(self.output_path))
        object.__setattr__(self, "version", ProtocolVersion(self.version))

        if self.skip < 0:
            raise ValueError("skip must be >= 0")
        if self.output_format not in ("text", "jsonl"):
            raise ValueError(f"Unknown output format: {self.output_format}")
