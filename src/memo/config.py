"""
Configuration management for Memo.

Everything lives under one dotfile directory:
- Data: ~/.memo/memo.sqlite
- Config: ~/.memo/config.toml (optional)
"""

from pathlib import Path
from typing import Any

from memo.errors import ConfigError

DB_FILENAME = "memo.sqlite"
CONFIG_FILENAME = "config.toml"

# Known keys and the TOML types they must have
CONFIG_TYPES: dict[str, dict[str, type]] = {
    "store": {"path": str, "strict": bool},
    "display": {"color": bool},
}


def get_memo_home() -> Path:
    """Get the memo data directory (~/.memo)."""
    return Path.home() / ".memo"


def get_db_path() -> Path:
    """Get the default path to memo.sqlite."""
    return get_memo_home() / DB_FILENAME


def get_config_path() -> Path:
    """Get the path to config.toml."""
    return get_memo_home() / CONFIG_FILENAME


def get_default_config() -> dict[str, Any]:
    """Return default configuration."""
    return {
        "store": {
            "path": str(get_db_path()),
            "strict": False,
        },
        "display": {
            "color": True,
        },
    }


def _check_types(loaded: dict[str, Any], config_path: Path) -> None:
    """Raise ConfigError if a known section or key has the wrong type."""
    for section, keys in CONFIG_TYPES.items():
        if section not in loaded:
            continue
        values = loaded[section]
        if not isinstance(values, dict):
            raise ConfigError(f"Invalid config file {config_path}: [{section}] must be a table")
        for key, expected in keys.items():
            if key in values and not isinstance(values[key], expected):
                raise ConfigError(
                    f"Invalid config file {config_path}: "
                    f"{section}.{key} must be a {expected.__name__}"
                )


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """
    Load configuration from config.toml.

    Values from the file are merged over the defaults, section by section.
    Returns default config if file doesn't exist.
    """
    config_path = config_path or get_config_path()
    config = get_default_config()

    if not config_path.exists():
        return config

    # Lazy import tomli only when needed
    import tomli

    try:
        with open(config_path, "rb") as f:
            loaded = tomli.load(f)
    except (tomli.TOMLDecodeError, UnicodeDecodeError, OSError) as e:
        raise ConfigError(f"Invalid config file {config_path}: {e}") from e

    _check_types(loaded, config_path)

    for section, values in loaded.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values

    return config


def resolve_db_path(config: dict[str, Any], override: str | None = None) -> Path:
    """Pick the storage location: explicit override, then config, then default."""
    raw = override or config.get("store", {}).get("path")
    if not raw:
        return get_db_path()
    return Path(raw).expanduser()
