"""Tests for painel.config."""

import stat
from pathlib import Path

import pytest

from painel.config import (
    Settings,
    create_default_config,
    get_config_path,
    load_config,
    load_settings,
    save_config,
    settings_from_config,
)
from painel.domain.models import PeriodFilter


class TestConfigPath:
    """Tests for get_config_path."""

    def test_uses_xdg_config_home(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))

        assert get_config_path() == tmp_path / "painel" / "config.toml"


class TestConfigFile:
    """Tests for creating, saving and loading the config file."""

    def test_default_config_round_trip(self, tmp_path: Path) -> None:
        """Default config loads back as default settings."""
        config_path = tmp_path / "painel" / "config.toml"
        create_default_config(config_path)

        assert load_settings(config_path) == Settings()

    def test_file_permissions(self, tmp_path: Path) -> None:
        config_path = tmp_path / "config.toml"
        save_config({"user": "ana"}, config_path)

        assert stat.S_IMODE(config_path.stat().st_mode) == 0o600

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_settings(tmp_path / "missing.toml") == Settings()

    def test_load_config_missing_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.toml")


class TestSettingsFromConfig:
    """Tests for settings_from_config."""

    def test_all_keys(self, tmp_path: Path) -> None:
        settings = settings_from_config(
            {
                "user": "igreja",
                "default_period": "this-month",
                "database": str(tmp_path / "custom.db"),
                "log_level": "debug",
            }
        )

        assert settings.user == "igreja"
        assert settings.default_period is PeriodFilter.THIS_MONTH
        assert settings.db_path == tmp_path / "custom.db"
        assert settings.log_level == "DEBUG"

    def test_default_db_path_follows_xdg(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))

        assert Settings().db_path == tmp_path / "painel" / "painel.db"

    def test_invalid_period(self) -> None:
        with pytest.raises(ValueError):
            settings_from_config({"default_period": "last-week"})

    def test_blank_user(self) -> None:
        with pytest.raises(ValueError):
            settings_from_config({"user": "   "})
