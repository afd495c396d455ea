"""Keymap management utilities for navim."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Protocol

from ..config import SettingsStore, get_custom_keymap_dir
from ..exceptions import KeymapError
from .keymap import Action, Binding, BindingTable, default_binding_table

CUSTOM_KEYMAP_SETTINGS_KEY = "custom_keymap"


class SettingsStoreProtocol(Protocol):
    def load_all(self) -> dict: ...


class KeymapManager:
    """Builds the binding table the engine runs with."""

    def __init__(
        self,
        settings_store: SettingsStoreProtocol | None = None,
    ) -> None:
        self._settings_store = settings_store or SettingsStore()
        self._bindings: BindingTable = default_binding_table()
        self._custom_keymap_name: str | None = None
        self._custom_keymap_path: Path | None = None

    @property
    def bindings(self) -> BindingTable:
        """The active binding table."""
        return self._bindings

    def initialize(self) -> dict:
        """Initialize keymap from settings.

        Returns:
            The loaded settings dictionary.
        """
        settings = self._settings_store.load_all()
        self.load_custom_keymap(settings)
        return settings

    def load_custom_keymap(self, settings: dict) -> None:
        """Load custom keymap from settings if specified.

        Failures are reported on stderr and leave the default keymap active.

        Args:
            settings: Settings dictionary containing custom_keymap key.
        """
        keymap_name = settings.get(CUSTOM_KEYMAP_SETTINGS_KEY)
        if not keymap_name or not isinstance(keymap_name, str):
            return
        if keymap_name.strip() in ("", "default"):
            return

        try:
            path = self._resolve_keymap_path(keymap_name.strip())
            self._register_custom_keymap(path, keymap_name.strip())
        except KeymapError as exc:
            print(
                f"[navim] Failed to load custom keymap '{keymap_name}': {exc}",
                file=sys.stderr,
            )

    def _resolve_keymap_path(self, keymap_name: str) -> Path:
        """Resolve keymap name to file path.

        Args:
            keymap_name: Name of the keymap (without .json extension) or a path.

        Returns:
            Path to the keymap JSON file.
        """
        if keymap_name.startswith(("~", "/")) or Path(keymap_name).is_absolute():
            return Path(keymap_name).expanduser()

        name = Path(keymap_name).stem
        return get_custom_keymap_dir() / f"{name}.json"

    def _register_custom_keymap(self, path: Path, keymap_name: str) -> None:
        """Load a keymap file and make it the active table.

        Raises:
            KeymapError: If the keymap file is missing or invalid.
        """
        path = path.expanduser()
        if not path.exists():
            raise KeymapError(f"Keymap file not found: {path}")

        self._bindings = self._load_keymap_from_file(path)
        self._custom_keymap_name = keymap_name
        self._custom_keymap_path = path.resolve()

    def _load_keymap_from_file(self, path: Path) -> BindingTable:
        """Load keymap data from JSON file.

        The file either replaces the default bindings ("replace_defaults": true)
        or is laid over them.

        Raises:
            KeymapError: If the JSON is invalid or missing required fields.
        """
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise KeymapError(f"Failed to read keymap JSON: {exc}") from exc

        if not isinstance(payload, dict):
            raise KeymapError("Keymap file must contain a JSON object.")

        keymap_data = payload.get("keymap", payload)
        if not isinstance(keymap_data, dict):
            raise KeymapError('Keymap file "keymap" must be a JSON object.')

        bindings_data = keymap_data.get("bindings", [])
        control_data = keymap_data.get("control_bindings", [])
        replace_defaults = keymap_data.get("replace_defaults", False)

        if not isinstance(bindings_data, list):
            raise KeymapError('"bindings" must be a list.')
        if not isinstance(control_data, list):
            raise KeymapError('"control_bindings" must be a list.')
        if not isinstance(replace_defaults, bool):
            raise KeymapError('"replace_defaults" must be a boolean.')

        bindings = self._parse_bindings(bindings_data)
        control_bindings = self._parse_control_bindings(control_data)

        if replace_defaults:
            return BindingTable.from_bindings(bindings, control_bindings)
        return default_binding_table().overlay(bindings, control_bindings)

    def _parse_bindings(self, data: list[Any]) -> list[Binding]:
        """Parse key sequence bindings from JSON data.

        Raises:
            KeymapError: If any binding is invalid.
        """
        bindings = []
        seen: set[str] = set()
        for i, item in enumerate(data):
            if not isinstance(item, dict):
                raise KeymapError(f"Binding at index {i} must be an object.")

            keys = item.get("keys")
            if not isinstance(keys, str) or not keys:
                raise KeymapError(f'Binding at index {i} missing required "keys".')
            if keys in seen:
                raise KeymapError(f'Binding at index {i} "keys" {keys!r} is already bound.')
            seen.add(keys)

            bindings.append(
                Binding(
                    keys=keys,
                    action=self._parse_action(item, "Binding", i),
                    description=self._parse_description(item, "Binding", i),
                )
            )

        return bindings

    def _parse_control_bindings(self, data: list[Any]) -> list[Binding]:
        """Parse Ctrl+key bindings from JSON data.

        Raises:
            KeymapError: If any binding is invalid.
        """
        bindings = []
        seen: set[str] = set()
        for i, item in enumerate(data):
            if not isinstance(item, dict):
                raise KeymapError(f"Control binding at index {i} must be an object.")

            key = item.get("key")
            if not isinstance(key, str) or len(key) != 1:
                raise KeymapError(f'Control binding at index {i} "key" must be a single character.')
            if key in seen:
                raise KeymapError(f'Control binding at index {i} "key" {key!r} is already bound.')
            seen.add(key)

            bindings.append(
                Binding(
                    keys=key,
                    action=self._parse_action(item, "Control binding", i),
                    description=self._parse_description(item, "Control binding", i),
                )
            )

        return bindings

    def _parse_action(self, item: dict, kind: str, index: int) -> Action:
        action = item.get("action")
        if not isinstance(action, str) or not action:
            raise KeymapError(f'{kind} at index {index} missing required "action".')
        try:
            return Action.from_name(action)
        except ValueError as exc:
            raise KeymapError(f"{kind} at index {index}: {exc}") from exc

    def _parse_description(self, item: dict, kind: str, index: int) -> str:
        description = item.get("description", "")
        if not isinstance(description, str):
            raise KeymapError(f'{kind} at index {index} "description" must be a string.')
        return description

    def get_custom_keymap_name(self) -> str | None:
        """Get the name of the currently loaded custom keymap.

        Returns:
            Keymap name or None if using default keymap.
        """
        return self._custom_keymap_name

    def get_custom_keymap_path(self) -> Path | None:
        """Get the path to the currently loaded custom keymap file."""
        return self._custom_keymap_path

    def reset_to_default(self) -> None:
        """Reset to the default keymap."""
        self._bindings = default_binding_table()
        self._custom_keymap_name = None
        self._custom_keymap_path = None
