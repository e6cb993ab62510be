"""Extract downloaded archives into the versioned source tree."""

from __future__ import annotations

import logging
import os
import shutil
import uuid
import zipfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Callable

from .errors import IOFailure, UnsafeArchiveEntry, UnsupportedFormat
from .fs import dir_exists, make_dirs
from .packages.models import ARCHIVE_SUFFIX, PackageDescriptor

logger = logging.getLogger(__name__)

SOURCE_DIR = "src"


class InstallStatus(str, Enum):
    INSTALLED = "installed"
    UPDATED = "updated"
    ALREADY_INSTALLED = "already_installed"


@dataclass(frozen=True)
class InstallResult:
    status: InstallStatus
    path: Path
    files: int = 0


def archive_relative_path(entry_name: str) -> PurePosixPath | None:
    """Drop the synthetic top-level directory that hosting services wrap archives in.

    Returns ``None`` when nothing is left once the wrapper is removed. The
    result only holds plain names, so joining it to a fresh directory cannot
    leave that directory.
    """
    parts = [part for part in entry_name.replace("\\", "/").split("/")[1:] if part]
    if not parts:
        return None
    if entry_name.startswith("/") or any(part in (".", "..") for part in parts):
        raise UnsafeArchiveEntry(f"unsafe archive entry: {entry_name}")
    return PurePosixPath(*parts)


class ArchiveInstaller:
    """Places package archives under ``<install_root>/src``.

    Each version gets its own directory (see
    :meth:`PackageDescriptor.install_segments`), so several versions of one
    package live side by side.
    """

    def __init__(self, install_root: Path, *, progress: Callable[[str], None] | None = None) -> None:
        self.install_root = Path(install_root)
        self.progress = progress

    def destination_for(self, pkg: PackageDescriptor) -> Path:
        return self.install_root.joinpath(SOURCE_DIR, *pkg.install_segments())

    def install(self, pkg: PackageDescriptor, archive_path: Path, *, force_update: bool = False) -> InstallResult:
        dst_dir = self.destination_for(pkg)
        existed = dir_exists(dst_dir)
        if existed and not force_update:
            logger.debug("%s already installed at %s", pkg, dst_dir)
            return InstallResult(status=InstallStatus.ALREADY_INSTALLED, path=dst_dir)

        archive_path = Path(archive_path)
        if archive_path.suffix.lower() != ARCHIVE_SUFFIX:
            raise UnsupportedFormat(f"unsupported archive format {archive_path.suffix or archive_path.name!r}")

        if self.progress is not None:
            self.progress(f"Extracting package {pkg.name} ...")

        staging = self._staging_dir(dst_dir, "staging")
        try:
            make_dirs(staging)
            count = self._extract(archive_path, staging)
            self._swap_into_place(staging, dst_dir)
        except zipfile.BadZipFile as exc:
            raise IOFailure(f"cannot read archive {archive_path}: {exc}") from exc
        except IOFailure:
            raise
        except OSError as exc:
            raise IOFailure(f"cannot install {pkg.name} into {dst_dir}: {exc}") from exc
        finally:
            if staging.exists():
                shutil.rmtree(staging, ignore_errors=True)

        status = InstallStatus.UPDATED if existed else InstallStatus.INSTALLED
        logger.debug("%s %s: %d files in %s", pkg, status.value, count, dst_dir)
        return InstallResult(status=status, path=dst_dir, files=count)

    @staticmethod
    def _staging_dir(dst_dir: Path, purpose: str) -> Path:
        return dst_dir.with_name(f".{dst_dir.name}.{purpose}-{uuid.uuid4().hex[:12]}")

    def _extract(self, archive_path: Path, out_dir: Path) -> int:
        count = 0
        with zipfile.ZipFile(archive_path) as archive:
            for info in archive.infolist():
                if info.is_dir():
                    continue
                relative = archive_relative_path(info.filename)
                if relative is None:
                    continue
                target = out_dir.joinpath(*relative.parts)
                if len(relative.parts) > 1:
                    make_dirs(target.parent)
                with archive.open(info) as source, open(target, "wb") as sink:
                    shutil.copyfileobj(source, sink)
                count += 1
        return count

    def _swap_into_place(self, staging: Path, dst_dir: Path) -> None:
        make_dirs(dst_dir.parent)
        if not dir_exists(dst_dir):
            os.rename(staging, dst_dir)
            return
        retired = self._staging_dir(dst_dir, "old")
        os.rename(dst_dir, retired)
        try:
            os.rename(staging, dst_dir)
        except OSError:
            os.rename(retired, dst_dir)
            raise
        try:
            shutil.rmtree(retired)
        except OSError:
            logger.debug("left previous install behind at %s", retired, exc_info=True)
        logger.debug("replaced previous install at %s", dst_dir)
