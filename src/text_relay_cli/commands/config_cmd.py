from __future__ import annotations

import json
from pathlib import Path

import typer
import tomli_w

from ..util import load_config

app = typer.Typer(help="Configuration inspection and initialization")


@app.command("show")
def show(
    output_format: str = typer.Option("toml", "--format", help="toml|json"),
):
    """Print the effective split configuration (file + environment)."""
    config = load_config()
    data = config.model_dump()

    if output_format == "json":
        typer.echo(json.dumps(data, ensure_ascii=False, indent=2))
        return
    typer.echo(tomli_w.dumps({"split": data}), nl=False)


@app.command("init")
def init(
    project_root: Path = typer.Option(Path("."), "--project-root", help="Directory to create .text-relay/ in"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing config file"),
):
    """Write a config file with default settings."""
    from text_relay_core.config import ConfigLoader
    from text_relay_core.models import SplitConfiguration

    path = ConfigLoader.default_path(project_root.resolve())
    if path.exists() and not force:
        typer.echo(f"Error: {path} already exists (use --force to overwrite)", err=True)
        raise typer.Exit(code=1)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomli_w.dumps({"split": SplitConfiguration().model_dump()}), encoding="utf-8")
    typer.echo(f"✓ Wrote {path}")
