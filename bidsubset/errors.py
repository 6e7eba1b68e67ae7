"""Custom exceptions raised by the subset pipeline.

Every error a user can trigger derives from :class:`BidsubsetError` so the
CLI layer can turn it into a single :class:`click.ClickException` without
catching unrelated failures.
"""

from __future__ import annotations


class BidsubsetError(RuntimeError):
    """Base class for unrecoverable, user-facing failures."""

    pass


class PatternError(BidsubsetError, ValueError):
    """Raised when a glob fragment is not valid glob syntax."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid glob pattern '{pattern}': {reason}")


class DatasetError(BidsubsetError):
    """Raised when the input dataset root cannot be read."""

    pass


class MaterializeError(BidsubsetError):
    """Raised when copying, linking or creating a directory fails."""

    pass


class UnsupportedOperationError(MaterializeError):
    """Raised when a symbolic link is requested on a platform without them."""

    pass


class ConfigError(BidsubsetError):
    """Raised when *subset.yaml* cannot be parsed or fails validation."""

    pass


__all__ = [
    "BidsubsetError",
    "PatternError",
    "DatasetError",
    "MaterializeError",
    "UnsupportedOperationError",
    "ConfigError",
]
