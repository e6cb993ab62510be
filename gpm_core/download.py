"""Archive downloads into the local repository cache."""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

import requests

from .errors import IOFailure
from .fs import file_exists, make_dirs

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
PARTIAL_SUFFIX = ".part"

ProgressCallback = Callable[[str], None]


@dataclass
class _PendingFetch:
    lock: threading.Lock = field(default_factory=threading.Lock)
    waiters: int = 0


class Downloader:
    """Fetch URLs into cache files, skipping files that are already present.

    Presence is the only freshness signal: an existing file is trusted and no
    request is made. Fetches of the same cache path are serialized, so
    concurrent callers share one GET.
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        timeout_seconds: float | None = None,
        progress: ProgressCallback | None = None,
    ) -> None:
        self.session = session or requests.Session()
        self.timeout_seconds = timeout_seconds
        self.progress = progress
        self._pending: dict[str, _PendingFetch] = {}
        self._pending_guard = threading.Lock()

    def fetch(self, url: str, local_path: str | os.PathLike[str]) -> Path:
        target = Path(local_path)
        if file_exists(target):
            logger.debug("cache hit for %s at %s", url, target)
            return target

        key = str(target.absolute())
        pending = self._claim(key)
        try:
            with pending.lock:
                if file_exists(target):
                    logger.debug("cache filled by concurrent fetch for %s", url)
                    return target
                self._download(url, target)
        finally:
            self._release(key)
        return target

    def pending_keys(self) -> set[str]:
        with self._pending_guard:
            return set(self._pending)

    def _claim(self, key: str) -> _PendingFetch:
        with self._pending_guard:
            pending = self._pending.get(key)
            if pending is None:
                pending = _PendingFetch()
                self._pending[key] = pending
            pending.waiters += 1
            return pending

    def _release(self, key: str) -> None:
        with self._pending_guard:
            pending = self._pending[key]
            pending.waiters -= 1
            if pending.waiters == 0:
                del self._pending[key]

    def _report(self, message: str) -> None:
        if self.progress is not None:
            self.progress(message)
        else:
            logger.info(message)

    def _download(self, url: str, target: Path) -> None:
        self._report(f"Downloading {url} ...")
        try:
            response = self.session.get(url, stream=True, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise IOFailure(f"download failed: {url}: {exc}") from exc

        partial = target.with_name(target.name + PARTIAL_SUFFIX)
        try:
            if response.status_code // 100 != 2:
                raise IOFailure(f"download failed: {response.status_code} {url}")
            make_dirs(target.parent)
            with open(partial, "wb") as handle:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        handle.write(chunk)
            os.replace(partial, target)
        except requests.RequestException as exc:
            raise IOFailure(f"download failed: {url}: {exc}") from exc
        except IOFailure:
            raise
        except OSError as exc:
            raise IOFailure(f"cannot write {target}: {exc}") from exc
        finally:
            response.close()
            if partial.exists():
                partial.unlink()
        logger.debug("downloaded %s to %s", url, target)
