"""Decode failure kinds.

Only structural read failures are exceptions. Implausible containers and
unknown tags are recoverable and surface as trace events instead.
"""

from __future__ import annotations


class DecodeError(Exception):
    """Base class for failures that end a decode attempt."""

    def __init__(self, message: str, *, offset: int) -> None:
        super().__init__(f"{message} (offset {offset})")
        self.offset = offset


class TruncatedInput(DecodeError):
    """Fewer bytes remain than a read requires."""

    def __init__(self, *, offset: int, needed: int, available: int) -> None:
        super().__init__(
            f"needed {needed} byte(s) but only {available} remain",
            offset=offset,
        )
        self.needed = needed
        self.available = available


class InvalidVarint(DecodeError):
    """A varint's continuation chain does not end within its maximum width."""

    def __init__(self, *, offset: int, max_bytes: int) -> None:
        super().__init__(
            f"varint not terminated within {max_bytes} byte(s)",
            offset=offset,
        )
        self.max_bytes = max_bytes


class NestingTooDeep(DecodeError):
    """Struct or container nesting exceeded the configured limit."""

    def __init__(self, *, offset: int, limit: int) -> None:
        super().__init__(f"nesting exceeds {limit} level(s)", offset=offset)
        self.limit = limit
