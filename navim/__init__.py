"""navim - a keyboard-driven, modal web browser."""

__version__ = "0.3.0"
