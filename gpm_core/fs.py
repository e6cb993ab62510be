"""Small filesystem checks used by the download and install steps."""

from __future__ import annotations

import os
import posixpath
from pathlib import Path

DIR_MODE = 0o777


def dir_exists(path: str | os.PathLike[str]) -> bool:
    return Path(path).is_dir()


def file_exists(path: str | os.PathLike[str]) -> bool:
    target = Path(path)
    return target.exists() and not target.is_dir()


def join_path(*parts: str) -> str:
    if not parts:
        return ""
    result = ""
    for part in parts:
        if not part:
            continue
        result = posixpath.join(result, part) if result else part
    return posixpath.normpath(result) if result else ""


def make_dirs(path: str | os.PathLike[str]) -> Path:
    target = Path(path)
    target.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
    return target
