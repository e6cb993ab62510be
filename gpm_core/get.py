"""Download-then-install pipeline for a single package."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .config import GetSettings
from .download import Downloader
from .errors import IOFailure
from .install import ArchiveInstaller, InstallResult
from .packages.models import PackageDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GetResult:
    package: PackageDescriptor
    archive_path: Path
    install: InstallResult | None = None

    @property
    def downloaded_only(self) -> bool:
        return self.install is None


class PackageGetter:
    def __init__(
        self,
        settings: GetSettings,
        *,
        downloader: Downloader | None = None,
        installer: ArchiveInstaller | None = None,
        progress: Callable[[str], None] | None = None,
    ) -> None:
        self.settings = settings
        self.downloader = downloader or Downloader(timeout_seconds=settings.timeout_seconds, progress=progress)
        self.installer = installer or ArchiveInstaller(settings.install_root, progress=progress)

    def cache_path(self, pkg: PackageDescriptor) -> Path:
        return self.settings.repos_dir.joinpath(*pkg.name_segments(), pkg.file_name())

    def acquire(
        self,
        pkg: PackageDescriptor,
        *,
        update: bool = False,
        download_only: bool = False,
    ) -> GetResult:
        """Materialize ``pkg``'s archive in the cache and install it.

        ``update`` discards the cached archive and replaces an existing install;
        ``download_only`` stops once the archive is cached. Errors from either
        step propagate unchanged.
        """
        archive = self.cache_path(pkg)
        if update and archive.exists():
            logger.debug("dropping cached archive %s for update", archive)
            try:
                archive.unlink()
            except OSError as exc:
                raise IOFailure(f"cannot drop cached archive {archive}: {exc}") from exc

        self.downloader.fetch(pkg.url(), archive)
        if download_only:
            return GetResult(package=pkg, archive_path=archive)

        result = self.installer.install(pkg, archive, force_update=update)
        return GetResult(package=pkg, archive_path=archive, install=result)
