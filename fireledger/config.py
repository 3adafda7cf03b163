"""User settings for fireledger, stored as TOML under XDG_CONFIG_HOME."""

import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w

DEFAULT_CONFIG: dict[str, Any] = {
    "user_id": "local-user",
    "currency_symbol": "$",
    "csv": {},
}


def get_xdg_config_home() -> Path:
    """Get XDG config directory, with fallback to ~/.config."""
    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        return Path(xdg_config)
    return Path.home() / ".config"


def get_config_path() -> Path:
    """Location of config.toml, e.g. ~/.config/fireledger/config.toml."""
    return get_xdg_config_home() / "fireledger" / "config.toml"


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Read the settings file.

    Raises:
        FileNotFoundError: If the file has not been created yet.
    """
    with open(config_path or get_config_path(), "rb") as f:
        return tomllib.load(f)


def save_config(config: dict[str, Any], config_path: Path | None = None) -> None:
    """Write the settings file, readable by the owner only.

    Args:
        config: Settings to write.
        config_path: Target file. If None, uses default location.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "wb") as f:
        tomli_w.dump(config, f)

    os.chmod(path, 0o600)


def create_default_config(config_path: Path | None = None) -> None:
    """Write a fresh settings file holding the defaults."""
    save_config(DEFAULT_CONFIG, config_path)


def _load_or_defaults(config_path: Path | None) -> dict[str, Any]:
    # A missing file reads as the defaults
    try:
        return load_config(config_path)
    except FileNotFoundError:
        return dict(DEFAULT_CONFIG)


def get_setting(key: str, config_path: Path | None = None) -> Any:
    """Read a single setting, falling back to the built-in default."""
    return _load_or_defaults(config_path).get(key, DEFAULT_CONFIG.get(key))


def save_csv_mapping(mapping: dict[str, str], config_path: Path | None = None) -> None:
    """Remember the CSV column mapping for the next import."""
    config = _load_or_defaults(config_path)
    config["csv"] = mapping
    save_config(config, config_path)
