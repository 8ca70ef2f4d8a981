from __future__ import annotations


class UsageError(ValueError):
    """Raised for malformed invocations (bad arguments, values or sizes)."""


class InvalidHexNumber(UsageError):
    """Raised when a size or offset argument is not a valid hexadecimal number."""


class InvalidOffset(UsageError):
    """Raised when an invalid (e.g., negative) offset is provided."""


class ChunkTooSmall(UsageError):
    """Raised when the scratch buffer cannot hold the whole needle."""
