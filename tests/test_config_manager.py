"""Unit tests for configuration management."""

from pathlib import Path

import pytest

from divelog.config import (
    ConfigError,
    ConfigManager,
    DivelogConfig,
    flatten_for_env,
    resolve_with_precedence,
)
from divelog.store import DEFAULT_GIT_EXECUTABLE


def _fresh_manager(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> ConfigManager:
    monkeypatch.setenv("HOME", str(tmp_path))
    return ConfigManager()


def test_ensure_exists_creates_default_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    path = manager.ensure_exists()

    assert path == tmp_path / ".divelog" / "config.yaml"
    text = path.read_text(encoding="utf-8")
    assert "divelog configuration file" in text
    assert "Last updated:" in text
    assert manager.load(include_env=False) == DivelogConfig()


def test_load_without_file_returns_defaults(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    config = manager.load(include_env=False)

    assert config.loader.trip_scoping == "legacy"
    assert config.store.default_branch == "HEAD"
    assert config.store.git_executable == DEFAULT_GIT_EXECUTABLE
    assert not manager.config_path.exists()


def test_resolve_with_precedence_respects_order(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.save({"store": {"default_branch": "main", "git_executable": "/usr/bin/git"}})

    env = {"DIVELOG__STORE__DEFAULT_BRANCH": "dives", "DIVELOG__LOADER__TRIP_SCOPING": "tree"}
    cli = {"store.default_branch": "cli-branch"}

    config = manager.load(cli_overrides=cli, env_overrides=env)

    assert config.store.git_executable == "/usr/bin/git"
    assert config.loader.trip_scoping == "tree"
    # CLI overrides take precedence over environment
    assert config.store.default_branch == "cli-branch"


def test_environment_ignores_unrelated_variables(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)

    config = manager.load(env_overrides={"PATH": "/bin", "DIVELOG__LOGGING__LEVEL": "DEBUG"})

    assert config.logging.level == "DEBUG"


def test_invalid_yaml_raises_config_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    manager = _fresh_manager(tmp_path, monkeypatch)
    manager.ensure_exists()

    manager.config_path.write_text("- not-a-mapping", encoding="utf-8")

    with pytest.raises(ConfigError):
        manager.load()


def test_flatten_for_env_covers_defaults() -> None:
    flat = flatten_for_env(DivelogConfig())

    assert flat["DIVELOG__STORE__GIT_EXECUTABLE"] == "git"
    assert flat["DIVELOG__LOADER__TRIP_SCOPING"] == "tree"
    assert flat["DIVELOG__CLI__QUIET_DEFAULT"] == "False"


@pytest.mark.parametrize(
    "overrides",
    [
        {"loader": {"trip_scoping": "sideways"}},
        {"loader": {"unknown_option": True}},
        {"store.default_branch.name": "main"},
    ],
)
def test_resolve_with_precedence_invalid_value_raises(overrides: dict) -> None:
    with pytest.raises(ConfigError):
        resolve_with_precedence(defaults=DivelogConfig(), file_overrides=overrides)
