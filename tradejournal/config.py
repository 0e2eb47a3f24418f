"""Configuration loading for the trade journal."""

import os
from pathlib import Path
from typing import Optional, Union

import toml

from tradejournal.errors import ConfigError
from tradejournal.stores.base import BaseTradeStore

CONFIG_DIR = Path.home() / ".config" / "tradejournal"
CONFIG_ENV_VAR = "TRADEJOURNAL_CONFIG"

DEFAULT_CONFIG = {
    "journal": {
        "user_id": "",
    },
    "store": {
        "backend": "sqlite",  # sqlite or memory
        "path": str(CONFIG_DIR / "journal.db"),
    },
    "logging": {
        "level": "WARNING",
        "file": "",
    },
}


def get_config_path(override: Union[str, Path, None] = None) -> Path:
    """Resolve the config file path: explicit override, env var, then default."""
    if override:
        return Path(override).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return CONFIG_DIR / "config.toml"


def load_config(path: Union[str, Path, None] = None) -> dict:
    """Load configuration merged over the defaults.

    A missing file yields the defaults.

    Args:
        path: Config file path. Resolved with get_config_path.

    Returns:
        Configuration dictionary with every section present.

    Raises:
        ConfigError: If the file exists but is not valid TOML.
    """
    config_path = get_config_path(path)
    loaded: dict = {}
    if config_path.exists():
        try:
            loaded = toml.load(config_path)
        except (toml.TomlDecodeError, OSError) as e:
            raise ConfigError(f"Cannot read config {config_path}: {e}") from e

    config = {section: dict(values) for section, values in DEFAULT_CONFIG.items()}
    for section, values in loaded.items():
        if isinstance(values, dict):
            config.setdefault(section, {}).update(values)
        else:
            config[section] = values
    return config


def create_template_config(path: Union[str, Path, None] = None) -> Path:
    """Write a template configuration file.

    Returns:
        Path of the written file.
    """
    config_path = get_config_path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    template = {
        "journal": {
            "user_id": "your-user-id",
        },
        "store": dict(DEFAULT_CONFIG["store"]),
        "logging": dict(DEFAULT_CONFIG["logging"]),
    }

    with open(config_path, "w") as f:
        toml.dump(template, f)

    return config_path


def build_store(config: dict) -> BaseTradeStore:
    """Create the store back-end selected in the config.

    Raises:
        ConfigError: If the back-end is unknown.
    """
    store_config = config.get("store", {})
    backend = str(store_config.get("backend", "sqlite")).lower()

    if backend == "memory":
        from tradejournal.stores.memory import InMemoryTradeStore

        return InMemoryTradeStore()
    if backend == "sqlite":
        from tradejournal.db.store import SQLiteTradeStore

        db_path = Path(store_config.get("path") or DEFAULT_CONFIG["store"]["path"]).expanduser()
        return SQLiteTradeStore(db_path)

    raise ConfigError(f"Unknown store backend: {backend!r} (expected 'sqlite' or 'memory')")


def resolve_user_id(config: dict, override: Optional[str] = None) -> Optional[str]:
    """User id from the override, falling back to the config."""
    user_id = override or config.get("journal", {}).get("user_id")
    return user_id or None
