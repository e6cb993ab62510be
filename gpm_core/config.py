"""Settings for the get pipeline: environment first, then config.toml."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_GPM_ROOT = "~/.gpm"
CONFIG_SECTION = "get"


@dataclass(frozen=True)
class GetSettings:
    gpm_root: Path
    install_root: Path
    repos_dir: Path
    timeout_seconds: float | None = None


def config_path(gpm_root: Path) -> Path:
    return gpm_root / "config" / "config.toml"


def load_get_config(gpm_root: Path) -> dict[str, Any]:
    path = config_path(gpm_root)
    if not path.exists():
        return {}
    try:
        payload = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError):
        logger.debug("ignoring unreadable config file %s", path, exc_info=True)
        return {}
    section = payload.get(CONFIG_SECTION)
    return section if isinstance(section, dict) else {}


def expand_home(raw: str | os.PathLike[str]) -> Path:
    """Expand a leading ``~`` against the current user's home and make the path absolute."""
    return Path(os.fspath(raw)).expanduser().absolute()


def _first_gopath_entry() -> str | None:
    gopath = os.environ.get("GOPATH") or ""
    for entry in gopath.split(os.pathsep):
        if entry.strip():
            return entry.strip()
    return None


def _string_or_none(value: Any) -> str | None:
    if value is None:
        return None
    data = str(value).strip()
    return data if data else None


def _timeout_or_none(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"[{CONFIG_SECTION}].timeout_seconds must be a number, got {value!r}") from exc
    if timeout <= 0:
        raise ConfigError(f"[{CONFIG_SECTION}].timeout_seconds must be positive, got {value!r}")
    return timeout


def load_settings(
    *,
    gpm_root: str | None = None,
    install_root: str | None = None,
    repos_dir: str | None = None,
) -> GetSettings:
    root = expand_home(gpm_root or os.environ.get("GPM_ROOT") or DEFAULT_GPM_ROOT)
    config = load_get_config(root)

    install_value = (
        install_root
        or os.environ.get("GPM_PATH")
        or _first_gopath_entry()
        or _string_or_none(config.get("install_root"))
    )
    if not install_value:
        raise ConfigError(
            "install root is not set. Export GOPATH (or GPM_PATH) or set install_root "
            f"in {config_path(root)}"
        )

    repos_value = (
        repos_dir
        or os.environ.get("GPM_REPOS_DIR")
        or _string_or_none(config.get("repos_dir"))
        or str(root / "repos")
    )

    settings = GetSettings(
        gpm_root=root,
        install_root=expand_home(install_value),
        repos_dir=expand_home(repos_value),
        timeout_seconds=_timeout_or_none(config.get("timeout_seconds")),
    )
    logger.debug("loaded settings %s", settings)
    return settings
