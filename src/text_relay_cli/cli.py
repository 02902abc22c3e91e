from __future__ import annotations

from pathlib import Path
from typing import Optional
import typer

from .util import configure_logging, configure_stdio, set_global_config_file

app = typer.Typer(help="text-relay: split text and plan its delivery")


@app.callback()
def _init(
    config_file: Optional[Path] = typer.Option(
        None,
        "--config-file",
        help="Path to config file (.text-relay/config.toml)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    configure_stdio()
    configure_logging(debug)
    set_global_config_file(config_file)


from .commands import segments as segments_cmd  # noqa: E402
from .commands import config_cmd as config_cmd  # noqa: E402

app.command(name="split")(segments_cmd.split_text)
app.command(name="plan")(segments_cmd.plan)
app.add_typer(config_cmd.app, name="config", help="Config inspection and initialization")


def main():
    app()
