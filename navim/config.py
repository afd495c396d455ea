"""Configuration management for navim.

Settings are read from a JSON file in the config directory. The directory
defaults to ~/.navim and can be moved with the NAVIM_CONFIG_DIR environment
variable (tests point it at a temporary directory).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .exceptions import ConfigError

DEFAULT_HOMEPAGE = "http://ixquick.com"
DEFAULT_SCROLL_DELTA = 50
DEFAULT_FOLLOW_SELECTOR = "a, input, textarea, select"
OPTIONAL_STRING_SETTINGS = ("custom_keymap", "new_window_command")


def get_config_dir() -> Path:
    """Config directory, honouring NAVIM_CONFIG_DIR."""
    override = os.environ.get("NAVIM_CONFIG_DIR")
    if override:
        return Path(override).expanduser()
    return Path.home() / ".navim"


def get_settings_path() -> Path:
    return get_config_dir() / "settings.json"


def get_custom_keymap_dir() -> Path:
    return get_config_dir() / "keymaps"


def get_log_path() -> Path:
    return get_config_dir() / "navim.log"


def load_settings(path: Path | None = None) -> dict[str, Any]:
    """Load the settings dictionary.

    A missing file means default settings. A file that exists but is not a
    JSON object raises ConfigError.
    """
    path = path or get_settings_path()
    if not path.exists():
        return {}
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(path, str(exc)) from exc
    if not isinstance(payload, dict):
        raise ConfigError(path, "settings must be a JSON object")
    return payload


@dataclass(frozen=True)
class NavimConfig:
    """Browser settings used by the engine and the host."""

    homepage: str = DEFAULT_HOMEPAGE
    scroll_delta: int = DEFAULT_SCROLL_DELTA
    follow_selector: str = DEFAULT_FOLLOW_SELECTOR
    custom_keymap: str | None = None
    # Command prefix used to start a new window, e.g. "xterm -e"
    new_window_command: str | None = None

    @classmethod
    def from_settings(cls, settings: dict[str, Any]) -> NavimConfig:
        """Build a config from a settings dict, ignoring unknown keys.

        Raises:
            ValueError: If a known key has the wrong type.
        """
        values: dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in settings:
                continue
            value = settings[f.name]
            if f.name == "scroll_delta":
                if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                    raise ValueError('"scroll_delta" must be a positive integer.')
            elif f.name in OPTIONAL_STRING_SETTINGS:
                if value is not None and not isinstance(value, str):
                    raise ValueError(f'"{f.name}" must be a string.')
            elif not isinstance(value, str) or not value.strip():
                raise ValueError(f'"{f.name}" must be a non-empty string.')
            values[f.name] = value
        return cls(**values)


class SettingsStore:
    """Read-only access to the settings file."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path or get_settings_path()

    def load_all(self) -> dict[str, Any]:
        return load_settings(self.path)
