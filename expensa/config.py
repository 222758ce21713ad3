"""Configuration file management for expensa."""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from expensa.store.schema import get_db_path

DEFAULT_CONFIG: dict[str, Any] = {
    "ledger": {"db_path": ""},
    "recurrence": {"interval_hours": 24, "catch_up": False},
    "logging": {"level": "WARNING", "json": False},
}


@dataclass(frozen=True)
class AppConfig:
    """Immutable application configuration."""

    db_path: Path
    recurrence_interval_hours: float = 24
    recurrence_catch_up: bool = False
    log_level: str = "WARNING"
    log_json: bool = False


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
    return get_xdg_config_home() / "expensa" / "config.toml"


def create_default_config(config_path: Path | None = None) -> None:
    """Create default config file with secure permissions.

    Args:
        config_path: Path to config file. If None, uses default location.
    """
    if config_path is None:
        config_path = get_config_path()

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(DEFAULT_CONFIG, f)

    os.chmod(config_path, 0o600)


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from TOML file.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
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


def parse_option(name: str, raw_value: str) -> tuple[str, str, Any]:
    """Parse a "section.key" name and its textual value for set_option.

    The value takes the type of the option's default: booleans accept
    true/false, numbers accept TOML numbers, strings are taken verbatim.

    Args:
        name: Dotted option name, e.g. "recurrence.catch_up".
        raw_value: Value as typed by the user.

    Returns:
        Tuple of (section, key, value).

    Raises:
        ValueError: If the option is unknown or the value has the wrong type.
    """
    section, _, key = name.partition(".")
    if key not in DEFAULT_CONFIG.get(section, {}):
        raise ValueError(f"Unknown option '{name}'")

    default = DEFAULT_CONFIG[section][key]
    if isinstance(default, str):
        return section, key, raw_value

    try:
        value = tomllib.loads(f"value = {raw_value.strip().lower()}")["value"]
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid value for '{name}': {raw_value}") from e

    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ValueError(f"'{name}' must be true or false")
    elif isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"'{name}' must be a number")
    return section, key, value


def set_option(section: str, key: str, value: Any, config_path: Path | None = None) -> None:
    """Set one option, creating the config file if needed.

    Args:
        section: Table name (e.g. "recurrence").
        key: Option name within the table.
        value: New value.
        config_path: Path to config file. If None, uses default location.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = {name: dict(values) for name, values in DEFAULT_CONFIG.items()}

    config.setdefault(section, {})[key] = value
    save_config(config, config_path)


def load_app_config(config_path: Path | None = None) -> AppConfig:
    """Load configuration merged over defaults.

    Args:
        config_path: Path to config file. If None, uses default location.

    Returns:
        AppConfig. A missing file yields the defaults.

    Raises:
        tomllib.TOMLDecodeError: If the file exists but is not valid TOML.
    """
    try:
        config = load_config(config_path)
    except FileNotFoundError:
        config = {}

    ledger = {**DEFAULT_CONFIG["ledger"], **config.get("ledger", {})}
    recurrence = {**DEFAULT_CONFIG["recurrence"], **config.get("recurrence", {})}
    log_options = {**DEFAULT_CONFIG["logging"], **config.get("logging", {})}

    db_path = Path(ledger["db_path"]).expanduser() if ledger["db_path"] else get_db_path()

    return AppConfig(
        db_path=db_path,
        recurrence_interval_hours=float(recurrence["interval_hours"]),
        recurrence_catch_up=bool(recurrence["catch_up"]),
        log_level=str(log_options["level"]).upper(),
        log_json=bool(log_options["json"]),
    )
