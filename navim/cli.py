#!/usr/bin/env python3
"""navim - A keyboard-driven, modal web browser."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__


def _configure_logging(debug: bool, log_file: str | None) -> None:
    """Send log records to a file; the terminal belongs to the UI."""
    if not debug and not log_file:
        return

    from .config import get_log_path

    path = Path(log_file).expanduser() if log_file else get_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=path,
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="navim",
        description="A keyboard-driven, modal web browser",
    )
    parser.add_argument("url", nargs="?", help="URL to open (default: the configured homepage)")
    parser.add_argument(
        "--mock",
        metavar="PROFILE",
        help="Browse built-in mock pages (profiles: demo, many-links, empty)",
    )
    parser.add_argument(
        "--config-dir",
        metavar="DIR",
        help="Configuration directory (default: ~/.navim or $NAVIM_CONFIG_DIR)",
    )
    parser.add_argument(
        "--keymap",
        metavar="FILE",
        help="Custom keymap name or JSON file (overrides the custom_keymap setting)",
    )
    parser.add_argument("--debug", action="store_true", help="Write debug logs")
    parser.add_argument("--log-file", metavar="FILE", help="Log file (default: <config dir>/navim.log)")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    args = parser.parse_args()
    if args.config_dir:
        os.environ["NAVIM_CONFIG_DIR"] = str(Path(args.config_dir).expanduser())

    _configure_logging(args.debug, args.log_file)

    from .config import NavimConfig, SettingsStore
    from .core.keymap_manager import KeymapManager
    from .core.urls import from_user_input
    from .exceptions import ConfigError

    store = SettingsStore()
    try:
        settings = store.load_all()
        config = NavimConfig.from_settings(settings)
    except (ConfigError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.keymap:
        settings = {**settings, "custom_keymap": args.keymap}

    keymap_manager = KeymapManager(store)
    keymap_manager.load_custom_keymap(settings)

    from .surfaces import MemorySurface

    window_args: list[str] = []
    if args.mock:
        from .mocks import get_mock_profile, list_mock_profiles

        mock_profile = get_mock_profile(args.mock)
        if mock_profile is None:
            print(f"Unknown mock profile: {args.mock}")
            print(f"Available profiles: {', '.join(list_mock_profiles())}")
            return 1
        surface = MemorySurface(mock_profile.pages)
        start_url = from_user_input(args.url) if args.url else mock_profile.start_url
        window_args = ["--mock", mock_profile.name]
    else:
        surface = MemorySurface()
        start_url = from_user_input(args.url or config.homepage)

    if args.config_dir:
        window_args = ["--config-dir", os.environ["NAVIM_CONFIG_DIR"], *window_args]

    from .ui import NavimApp

    app = NavimApp(
        surface,
        start_url,
        bindings=keymap_manager.bindings,
        config=config,
        window_args=window_args,
    )
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
