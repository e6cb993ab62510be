"""Turn raw command-line tokens into package descriptors."""

from __future__ import annotations

import re

from gpm_core.errors import InvalidPackageIdentifier

from .models import TRUNK, PackageDescriptor, hosting_service_for

_SEGMENT_RE = re.compile(r"^[A-Za-z0-9._~-]+$")
_VERSION_RE = re.compile(r"^[A-Za-z0-9._+-]+$")
DEFAULT_VERSION_KIND = "tag"


def split_spec(spec: str) -> tuple[str, str | None]:
    """Split ``name@version`` into its parts; the version may be absent."""
    if "@" not in spec:
        return spec.strip(), None
    name, version = spec.split("@", 1)
    return name.strip(), version.strip()


def normalize_name(raw: str) -> str:
    name = raw.strip()
    for scheme in ("https://", "http://"):
        if name.lower().startswith(scheme):
            name = name[len(scheme) :]
            break
    name = name.strip("/")
    if not name:
        raise InvalidPackageIdentifier(f"unrecognized package {raw!r}: empty name")
    segments = name.split("/")
    if len(segments) < 2:
        raise InvalidPackageIdentifier(f"unrecognized package {raw!r}: expected <host>/<path>")
    for segment in segments:
        if segment in ("", ".", "..") or not _SEGMENT_RE.match(segment):
            raise InvalidPackageIdentifier(f"unrecognized package {raw!r}: invalid segment {segment!r}")
    service = hosting_service_for(name)
    if service.repo_segments is not None and len(segments) != service.repo_segments:
        raise InvalidPackageIdentifier(
            f"unrecognized package {raw!r}: {segments[0]} packages are <host>/<owner>/<repo>"
        )
    return name


def parse_version(raw: str | None) -> tuple[str, str]:
    value = (raw or "").strip()
    if not value or value == TRUNK:
        return TRUNK, ""
    if ":" in value:
        kind, version_id = value.split(":", 1)
        kind = kind.strip()
        version_id = version_id.strip()
    else:
        kind, version_id = DEFAULT_VERSION_KIND, value
    if not kind or not version_id:
        raise InvalidPackageIdentifier(f"invalid version {raw!r}: expected <kind>:<id>")
    if kind == TRUNK:
        raise InvalidPackageIdentifier(f"invalid version {raw!r}: trunk takes no id")
    for part in (kind, version_id):
        # both parts end up in a directory name
        if not _VERSION_RE.match(part) or ".." in part:
            raise InvalidPackageIdentifier(f"invalid version {raw!r}")
    return kind, version_id


def parse_package(raw: str, version: str | None = None) -> PackageDescriptor:
    """Build a descriptor from ``name``, ``name@version`` or ``name`` plus ``version``.

    Version text is ``trunk`` (or empty), ``<kind>:<id>`` such as ``tag:v1.0``,
    or a bare token which is read as a tag.
    """
    name, inline_version = split_spec(raw or "")
    normalized = normalize_name(name)
    kind, version_id = parse_version(version if version is not None else inline_version)
    return PackageDescriptor(name=normalized, version=kind, version_id=version_id)
