"""Core acquisition pipeline for gpm: descriptors, download, install."""

from .errors import (
    ConfigError,
    GpmError,
    InvalidPackageIdentifier,
    IOFailure,
    UnsafeArchiveEntry,
    UnsupportedFormat,
)

__all__ = [
    "ConfigError",
    "GpmError",
    "IOFailure",
    "InvalidPackageIdentifier",
    "UnsafeArchiveEntry",
    "UnsupportedFormat",
]
