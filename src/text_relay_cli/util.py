from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Optional

import typer

# Global variable to store custom config file path
_global_config_file: Optional[Path] = None


def set_global_config_file(config_file: Optional[Path]) -> None:
    """Set the global config file path for use by utility functions."""
    global _global_config_file
    _global_config_file = config_file.resolve() if config_file else None


def get_global_config_file() -> Optional[Path]:
    """Get the global config file path if set."""
    return _global_config_file


def configure_stdio() -> None:
    """Make CLI output robust across Windows console encodings.

    Some Windows terminals use a non-UTF8 encoding (e.g., cp1252). Segment text
    can contain any Unicode, so configure stdout/stderr to replace
    unencodable characters instead of crashing.
    """

    if os.name != "nt":
        return

    for stream in (sys.stdout, sys.stderr):
        try:
            # Keep the current encoding, but make encoding errors non-fatal.
            stream.reconfigure(errors="replace")
        except (AttributeError, ValueError):
            continue


def configure_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


def load_config():
    """Resolve the effective SplitConfiguration or exit with code 2."""
    from text_relay_core.config import ConfigLoader
    from text_relay_core.errors import ConfigError

    try:
        return ConfigLoader.load(Path.cwd(), custom_config_file=get_global_config_file())
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)


def read_input_text(text: Optional[str], file: Optional[Path]) -> str:
    """Return text from the argument, a file, or stdin ("-")."""
    if text and file:
        raise typer.BadParameter("Pass either TEXT or --file, not both")
    if file:
        return file.read_text(encoding="utf-8")
    if text == "-":
        return sys.stdin.read()
    if text is None:
        raise typer.BadParameter("TEXT or --file is required")
    return text
