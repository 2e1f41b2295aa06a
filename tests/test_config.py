"""Tests for config file, environment and override layering."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml

from rootsync.core.config import (
    DEFAULT_CONFIG_FILENAME,
    load_config,
    read_config_file,
    set_config_value,
)
from rootsync.core.exceptions import ConfigError
from rootsync.core.models import Config


@pytest.fixture(autouse=True)
def _isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("ROOTSYNC_"):
            monkeypatch.delenv(key, raising=False)


def _write(path: Path, data: object) -> Path:
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return path


# ── Defaults ──


class TestConfigDefaults:
    def test_no_file_gives_defaults(self) -> None:
        config = load_config()
        assert config.needs_foreground_component is True
        assert config.timeouts.pick_root_ms == 60000
        assert config.backoff.no_active_roots[-1] == 340

    def test_is_base_settings(self) -> None:
        from pydantic_settings import BaseSettings

        assert issubclass(Config, BaseSettings)


# ── Config file ──


class TestConfigFile:
    def test_partial_nested_file(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "custom.yaml",
            {"timeouts": {"root_ready_ms": 2500}, "needs_foreground_component": False},
        )
        config = load_config(config_path=path)
        assert config.timeouts.root_ready_ms == 2500
        assert config.timeouts.pick_root_ms == 60000
        assert config.needs_foreground_component is False

    def test_default_file_in_cwd(self, tmp_path: Path) -> None:
        _write(tmp_path / DEFAULT_CONFIG_FILENAME, {"timeouts": {"pick_root_ms": 1234}})
        assert load_config().timeouts.pick_root_ms == 1234

    def test_parent_directory_not_searched(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        _write(tmp_path / DEFAULT_CONFIG_FILENAME, {"timeouts": {"pick_root_ms": 1234}})
        (tmp_path / "sub").mkdir()
        monkeypatch.chdir(tmp_path / "sub")
        assert load_config().timeouts.pick_root_ms == 60000

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert read_config_file(path) == {}

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("timeouts: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError, match="Failed to parse YAML"):
            load_config(config_path=path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="must be a YAML mapping"):
            load_config(config_path=path)

    def test_decreasing_backoff_table(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "c.yaml", {"backoff": {"no_matching_root": [100, 10]}})
        with pytest.raises(ConfigError, match="Config validation failed"):
            load_config(config_path=path)

    def test_backoff_table_as_text(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "c.yaml", {"backoff": {"root_not_ready": "5, 10, 20"}})
        assert load_config(config_path=path).backoff.root_not_ready == [5, 10, 20]


# ── Environment and overrides ──


class TestLayering:
    def test_env_beats_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = _write(tmp_path / "c.yaml", {"timeouts": {"pick_root_ms": 1000, "root_ready_ms": 7}})
        monkeypatch.setenv("ROOTSYNC_TIMEOUTS__PICK_ROOT_MS", "2000")
        config = load_config(config_path=path)
        assert config.timeouts.pick_root_ms == 2000
        assert config.timeouts.root_ready_ms == 7

    @pytest.mark.parametrize("raw", ["5,10,20", "[5, 10, 20]"])
    def test_env_backoff_table(self, raw: str, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROOTSYNC_BACKOFF__ROOT_NOT_READY", raw)
        assert load_config().backoff.root_not_ready == [5, 10, 20]

    def test_env_boolean(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROOTSYNC_NEEDS_FOREGROUND_COMPONENT", "false")
        assert load_config().needs_foreground_component is False

    def test_invalid_env_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROOTSYNC_BACKOFF__ROOT_NOT_READY", "20,10")
        with pytest.raises(ConfigError):
            load_config()

    def test_overrides_beat_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROOTSYNC_TIMEOUTS__PICK_ROOT_MS", "2000")
        config = load_config(overrides={"timeouts": {"pick_root_ms": 3000}})
        assert config.timeouts.pick_root_ms == 3000


# ── Writing ──


class TestSetConfigValue:
    def test_creates_file(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / DEFAULT_CONFIG_FILENAME
        assert set_config_value(path, "timeouts.pick_root_ms", "777") == 777
        assert read_config_file(path) == {"timeouts": {"pick_root_ms": 777}}
        assert load_config(config_path=path).timeouts.pick_root_ms == 777

    def test_keeps_other_keys(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "c.yaml", {"timeouts": {"root_ready_ms": 5}})
        set_config_value(path, "needs_foreground_component", "no")
        assert read_config_file(path) == {
            "timeouts": {"root_ready_ms": 5},
            "needs_foreground_component": False,
        }

    def test_backoff_table_normalized(self, tmp_path: Path) -> None:
        path = tmp_path / "c.yaml"
        assert set_config_value(path, "backoff.component_created", "1, 2, 3") == [1, 2, 3]
        assert read_config_file(path)["backoff"]["component_created"] == [1, 2, 3]

    def test_env_not_persisted(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ROOTSYNC_TIMEOUTS__ROOT_READY_MS", "99")
        path = tmp_path / "c.yaml"
        set_config_value(path, "timeouts.pick_root_ms", "10")
        assert read_config_file(path) == {"timeouts": {"pick_root_ms": 10}}

    def test_invalid_value_leaves_file_untouched(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "c.yaml", {"timeouts": {"pick_root_ms": 1}})
        with pytest.raises(ConfigError, match="Invalid value for backoff.root_not_ready"):
            set_config_value(path, "backoff.root_not_ready", "10,5")
        assert read_config_file(path) == {"timeouts": {"pick_root_ms": 1}}

    @pytest.mark.parametrize("key", ["nope", "timeouts.nope", "timeouts.pick_root_ms.x"])
    def test_unknown_key(self, key: str, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Unknown config key"):
            set_config_value(tmp_path / "c.yaml", key, "1")

    def test_section_key(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="is a section"):
            set_config_value(tmp_path / "c.yaml", "timeouts", "1")
