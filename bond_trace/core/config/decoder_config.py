"""Decoder configuration model for single and discovery decode sessions."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from bond_trace.core.domain.types import ProtocolVersion

DEFAULT_CONTAINER_CEILING = 1000
DEFAULT_MAX_DEPTH = 64


class DecoderConfig(BaseModel):
    """Settings fixed for the lifetime of a decode session.

    JSON example:
        {
          "version": 2,
          "container_ceiling": 5000,
          "struct_length_prefix": true
        }
    """

    version: ProtocolVersion = ProtocolVersion.V2

    # Containers declaring this many items or more are reported as
    # implausible instead of being walked.
    container_ceiling: int = Field(default=DEFAULT_CONTAINER_CEILING, gt=0)

    # Bounds struct and container nesting together.
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, gt=0, le=128)

    # v2 payloads written by Bond prefix every struct with its byte length.
    # Off by default; the CLI sets it with --struct-length-prefix.
    struct_length_prefix: bool = False

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_json_obj(cls, config_obj: dict[str, Any]) -> DecoderConfig:
        """Create a DecoderConfig instance from a JSON-compatible object."""
        return cls.model_validate(config_obj)

    @classmethod
    def from_json_file(cls, path: str | Path) -> DecoderConfig:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(path)
        return cls.from_json_obj(json.loads(path.read_text(encoding="utf-8")))

    @model_validator(mode="after")
    def validate_consistency(self) -> DecoderConfig:
        """Validate internal consistency of the decoder configuration."""
        if self.struct_length_prefix and self.version != ProtocolVersion.V2:
            raise ValueError("struct_length_prefix is only defined for version 2")
        return self
