"""Configuration file management for painel."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from painel.domain.models import PeriodFilter
from painel.store.schema import get_db_path

DEFAULT_USER = "default"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    """Immutable application settings, passed explicitly to the shell."""

    user: str = DEFAULT_USER
    default_period: PeriodFilter = PeriodFilter.THIS_YEAR
    database: Path | None = None
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def db_path(self) -> Path:
        """Database path, honouring the configured override."""
        return self.database or get_db_path()


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Get the config file path (XDG compliant).

    Returns:
        Path to the config file.
    """
    return get_xdg_config_home() / "painel" / "config.toml"


def default_config() -> dict[str, Any]:
    """Build the default configuration dictionary."""
    return {
        "user": DEFAULT_USER,
        "default_period": PeriodFilter.THIS_YEAR.value,
        "log_level": DEFAULT_LOG_LEVEL,
    }


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)
    save_config(default_config(), config_path)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Save configuration to TOML file.

    Args:
        config: Configuration dictionary.
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    with open(config_path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(config_path, 0o600)


def settings_from_config(config: dict[str, Any]) -> Settings:
    """Convert a configuration dictionary to Settings.

    Args:
        config: Configuration dictionary (unknown keys are ignored).

    Returns:
        Settings with defaults for missing keys.

    Raises:
        ValueError: If a value is invalid.
    """
    user = str(config.get("user") or DEFAULT_USER).strip()
    if not user:
        raise ValueError("Config 'user' must not be blank")

    period = PeriodFilter(config.get("default_period", PeriodFilter.THIS_YEAR.value))

    database = config.get("database")
    database_path = Path(database).expanduser() if database else None

    log_level = str(config.get("log_level") or DEFAULT_LOG_LEVEL).upper()

    return Settings(user=user, default_period=period, database=database_path, log_level=log_level)


def load_settings(config_path: Path | None = None) -> Settings:
    """Load settings, falling back to defaults when no config file exists.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Settings instance.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        return Settings()
    return settings_from_config(config)
