"""Custom exceptions for navim."""


class NavimError(Exception):
    """Base class for navim errors."""


class KeymapError(NavimError, ValueError):
    """Raised when a custom keymap file cannot be used."""


class ConfigError(NavimError):
    """Raised when the settings file exists but cannot be read."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid settings file {path}: {reason}")
