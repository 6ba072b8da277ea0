"""Tests for settings loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from dotmcp.config import LOG_LEVEL_ENV, ConfigError, ServerSettings, load_settings, xdg_config_home


@pytest.fixture(autouse=True)
def _clear_level(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)


class TestServerSettings:
    def test_defaults(self) -> None:
        settings = ServerSettings()
        assert settings.base_dir is None
        assert settings.backup_required is False
        assert settings.allow_create is False
        assert settings.command_timeout == 10.0
        assert settings.log_level == "INFO"

    def test_level_is_uppercased(self) -> None:
        assert ServerSettings(log_level="debug").log_level == "DEBUG"

    def test_bad_level(self) -> None:
        with pytest.raises(ValueError, match="log_level"):
            ServerSettings(log_level="chatty")

    def test_mutation_policy(self) -> None:
        policy = ServerSettings(backup_required=True, allow_create=True).mutation_policy()
        assert policy.backup_required
        assert policy.allow_create


class TestLoadSettings:
    def test_no_file(self) -> None:
        assert load_settings() == ServerSettings()

    def test_yaml_file(self, tmp_path: Path) -> None:
        path = tmp_path / "dotmcp.yaml"
        path.write_text("backup_required: true\ncommand_timeout: 3\nlog_level: warning\n")
        settings = load_settings(path)
        assert settings.backup_required is True
        assert settings.command_timeout == 3.0
        assert settings.log_level == "WARNING"

    def test_env_expansion(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DOTMCP_TEST_DIR", str(tmp_path))
        path = tmp_path / "dotmcp.yaml"
        path.write_text("base_dir: ${DOTMCP_TEST_DIR}/wofi\n")
        assert load_settings(path).base_dir == tmp_path / "wofi"

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "dotmcp.yaml"
        path.write_text("")
        assert load_settings(path) == ServerSettings()

    def test_env_log_level(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
        assert load_settings().log_level == "DEBUG"

    def test_overrides_win(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
        path = tmp_path / "dotmcp.yaml"
        path.write_text("allow_create: false\n")
        settings = load_settings(path, log_level="error", allow_create=True, base_dir=None)
        assert settings.log_level == "ERROR"
        assert settings.allow_create is True
        assert settings.base_dir is None

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Cannot read"):
            load_settings(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "dotmcp.yaml"
        path.write_text("key: [unclosed\n")
        with pytest.raises(ConfigError, match="YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "dotmcp.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path)

    def test_schema_error(self, tmp_path: Path) -> None:
        path = tmp_path / "dotmcp.yaml"
        path.write_text("command_timeout: -1\n")
        with pytest.raises(ConfigError):
            load_settings(path)


class TestXdgConfigHome:
    def test_env(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert xdg_config_home() == tmp_path

    def test_default(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("XDG_CONFIG_HOME", raising=False)
        assert xdg_config_home() == Path.home() / ".config"
