"""Configuration file handling and tickets directory discovery."""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Any

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

import tomli_w

from ticket.constants import (
    CONFIG_FILENAME,
    DEFAULT_PRIORITY,
    DEFAULT_PRUNE_DAYS,
    DEFAULT_TYPE,
    TICKETS_DIR_ENV,
    TICKETS_DIRNAME,
)
from ticket.idgen import prefix_from_directory

# All known config keys: type, description and default
KNOWN_KEYS: dict[str, dict[str, Any]] = {
    "prefix": {
        "type": "str",
        "description": "Ticket ID prefix",
        "default": "derived from project directory name",
    },
    "default_type": {
        "type": "str",
        "description": "Type for new tickets",
        "default": DEFAULT_TYPE,
    },
    "default_priority": {
        "type": "int",
        "description": "Priority for new tickets (0-4)",
        "default": DEFAULT_PRIORITY,
    },
    "default_assignee": {
        "type": "str",
        "description": "Assignee for new tickets",
        "default": "git config user.name",
    },
    "prune_days": {
        "type": "int",
        "description": "Age in days after which closed tickets are pruned",
        "default": DEFAULT_PRUNE_DAYS,
    },
}

# Built-in values for keys that have a concrete default
_DEFAULTS: dict[str, Any] = {
    "default_type": DEFAULT_TYPE,
    "default_priority": DEFAULT_PRIORITY,
    "prune_days": DEFAULT_PRUNE_DAYS,
}


def find_tickets_dir(start_dir: str | Path | None = None) -> Path:
    """Locate the tickets directory.

    Precedence:
    1. ``TICKETS_DIR`` environment variable
    2. Nearest ``.tickets`` directory walking up from start_dir
    3. ``.tickets`` in start_dir (may not exist yet)

    Args:
        start_dir: Directory to start searching from (default: current directory)

    Returns:
        Path to the tickets directory
    """
    env_dir = os.environ.get(TICKETS_DIR_ENV)
    if env_dir:
        return Path(env_dir)

    start = Path.cwd() if start_dir is None else Path(start_dir).resolve()
    current = start
    while True:
        candidate = current / TICKETS_DIRNAME
        if candidate.is_dir():
            return candidate
        parent = current.parent
        if parent == current:
            return start / TICKETS_DIRNAME
        current = parent


def get_config_path(tickets_dir: str | Path) -> Path:
    """Get the path to the config file."""
    return Path(tickets_dir) / CONFIG_FILENAME


def load_config(tickets_dir: str | Path) -> dict[str, Any]:
    """Load configuration from the tickets directory.

    Returns:
        Configuration dictionary, or empty dict if no readable config exists
    """
    config_path = get_config_path(tickets_dir)
    if not config_path.exists():
        return {}

    try:
        with config_path.open("rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError):
        return {}


def save_config(tickets_dir: str | Path, config: dict[str, Any]) -> None:
    """Save configuration to the tickets directory."""
    config_path = get_config_path(tickets_dir)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with config_path.open("wb") as f:
        tomli_w.dump(config, f)


def get_prefix(tickets_dir: str | Path) -> str:
    """Get the ID prefix from config, else derive it from the project directory."""
    config = load_config(tickets_dir)
    if config.get("prefix"):
        return str(config["prefix"])
    project_dir = Path(tickets_dir).resolve().parent
    return prefix_from_directory(project_dir.name)


def get_setting(tickets_dir: str | Path, key: str) -> Any:
    """Get a config value, falling back to the key's built-in default.

    Keys whose default is descriptive text (``prefix``, ``default_assignee``)
    return None when unset.
    """
    return load_config(tickets_dir).get(key, _DEFAULTS.get(key))
