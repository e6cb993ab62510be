from __future__ import annotations

import os
from pathlib import Path

import pytest

from gpm_core.config import load_settings
from gpm_core.errors import ConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ("GPM_ROOT", "GPM_PATH", "GOPATH", "GPM_REPOS_DIR"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


def _write_config(gpm_root: Path, body: str) -> None:
    config_dir = gpm_root / "config"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.toml").write_text(body, encoding="utf-8")


def test_defaults_use_gopath_and_home_repos(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GOPATH", os.pathsep.join([str(tmp_path / "go1"), str(tmp_path / "go2")]))

    settings = load_settings()

    assert settings.install_root == tmp_path / "go1"
    assert settings.gpm_root == tmp_path / "home" / ".gpm"
    assert settings.repos_dir == tmp_path / "home" / ".gpm" / "repos"
    assert settings.timeout_seconds is None


def test_gpm_path_wins_over_gopath(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("GOPATH", str(tmp_path / "go"))
    monkeypatch.setenv("GPM_PATH", str(tmp_path / "gpm-path"))

    assert load_settings().install_root == tmp_path / "gpm-path"
    assert load_settings(install_root=str(tmp_path / "cli")).install_root == tmp_path / "cli"


def test_config_file_supplies_values_and_expands_home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    gpm_root = tmp_path / "gpm"
    monkeypatch.setenv("GPM_ROOT", str(gpm_root))
    _write_config(
        gpm_root,
        """[get]
install_root = "~/go"
repos_dir = "~/archives"
timeout_seconds = 12.5
""",
    )

    settings = load_settings()

    assert settings.install_root == tmp_path / "home" / "go"
    assert settings.repos_dir == tmp_path / "home" / "archives"
    assert settings.timeout_seconds == 12.5


def test_env_repos_dir_overrides_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    gpm_root = tmp_path / "gpm"
    _write_config(gpm_root, '[get]\nrepos_dir = "/nowhere"\n')
    monkeypatch.setenv("GOPATH", str(tmp_path / "go"))
    monkeypatch.setenv("GPM_REPOS_DIR", str(tmp_path / "env-repos"))

    assert load_settings(gpm_root=str(gpm_root)).repos_dir == tmp_path / "env-repos"


def test_malformed_config_is_ignored(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    gpm_root = tmp_path / "gpm"
    _write_config(gpm_root, "this is [not toml")
    monkeypatch.setenv("GOPATH", str(tmp_path / "go"))

    settings = load_settings(gpm_root=str(gpm_root))

    assert settings.repos_dir == gpm_root / "repos"


def test_missing_install_root_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="GOPATH"):
        load_settings(gpm_root=str(tmp_path / "gpm"))


def test_invalid_timeout_raises(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    gpm_root = tmp_path / "gpm"
    _write_config(gpm_root, '[get]\ntimeout_seconds = "soon"\n')
    monkeypatch.setenv("GOPATH", str(tmp_path / "go"))

    with pytest.raises(ConfigError, match="timeout_seconds"):
        load_settings(gpm_root=str(gpm_root))
