"""Error taxonomy shared by the gpm core and CLI."""

from __future__ import annotations


class GpmError(Exception):
    """Base class for every failure raised by gpm."""


class ConfigError(GpmError):
    """Settings could not be resolved (missing install root, bad values)."""


class InvalidPackageIdentifier(GpmError, ValueError):
    """A raw package token could not be turned into a descriptor."""


class UnsupportedFormat(GpmError):
    """The archive is not in a format the installer can extract."""


class IOFailure(GpmError, OSError):
    """Network or filesystem failure during download or extraction."""


class UnsafeArchiveEntry(IOFailure):
    """An archive entry would be written outside the destination directory."""
