"""Segment preview and dry-run planning commands.

- split: show how a text is cut into segments
- plan: split, then schedule against an in-memory backend and show target times
"""

from __future__ import annotations

import json
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from text_relay_core.backend import DEFAULT_OUTSTANDING_CEILING

from ..util import load_config, read_input_text

console = Console()

# Default lead time before the first planned delivery.
DEFAULT_LEAD_TIME = timedelta(minutes=5)


def _parse_base_time(value: Optional[str]) -> datetime:
    if not value:
        return datetime.now(timezone.utc) + DEFAULT_LEAD_TIME
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Not an ISO datetime: {value}", param_hint="--at")
    if parsed.tzinfo is None:
        parsed = parsed.astimezone()
    return parsed


def split_text(
    text: Optional[str] = typer.Argument(None, help="Text to split ('-' reads stdin)"),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Read text from file", exists=True, dir_okay=False, readable=True
    ),
    max_length: Optional[int] = typer.Option(
        None, "--max-length", min=1, help="Override max characters per segment"
    ),
    output_format: str = typer.Option("table", "--format", help="table|json"),
):
    """Split text into segments without scheduling anything."""
    from text_relay_core.segmenter import split

    config = load_config()
    raw = read_input_text(text, file)
    limit = max_length or config.max_segment_length

    if not raw.strip():
        typer.echo("Error: Input text is empty", err=True)
        raise typer.Exit(code=1)

    segments = split(raw, limit)

    if output_format == "json":
        payload = {
            "max_length": limit,
            "segments": segments,
        }
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    table = Table(title=f"{len(segments)} segment(s), max {limit} chars")
    table.add_column("Part", justify="right")
    table.add_column("Len", justify="right")
    table.add_column("Segment")
    for index, segment in enumerate(segments, 1):
        table.add_row(f"{index}/{len(segments)}", str(len(segment)), segment)
    console.print(table)


def plan(
    text: Optional[str] = typer.Argument(None, help="Text to deliver ('-' reads stdin)"),
    file: Optional[Path] = typer.Option(
        None, "--file", "-f", help="Read text from file", exists=True, dir_okay=False, readable=True
    ),
    at: Optional[str] = typer.Option(None, "--at", help="ISO time of the first delivery (default: now + 5 min)"),
    interval: Optional[float] = typer.Option(None, "--interval", min=0, help="Seconds between deliveries"),
    ceiling: int = typer.Option(DEFAULT_OUTSTANDING_CEILING, "--ceiling", min=0, help="Outstanding ceiling to simulate"),
    outstanding: int = typer.Option(0, "--outstanding", min=0, help="Slots already in use"),
    output_format: str = typer.Option("table", "--format", help="table|json"),
):
    """Dry-run: split and schedule against an in-memory backend."""
    from text_relay_ops.planning import plan_delivery

    config = load_config()
    if interval is not None:
        config = config.model_copy(update={"interval_seconds": interval})
    raw = read_input_text(text, file)
    base_time = _parse_base_time(at)

    result = plan_delivery(raw, config, base_time, ceiling=ceiling, outstanding=outstanding)
    if result.schedule is None:
        typer.echo("Error: Input text is empty", err=True)
        raise typer.Exit(code=1)

    schedule = result.schedule
    if output_format == "json":
        payload = {
            "ceiling": result.ceiling,
            "outstanding_before": result.outstanding_before,
            "scheduled": schedule.succeeded_count,
            "pending": len(schedule.pending),
            "truncated": schedule.truncated_count,
            "error": str(schedule.error) if schedule.error else None,
            "items": [
                {
                    "part": item.part_number,
                    "total": item.total_parts,
                    "status": item.status.value,
                    "scheduled_at": item.scheduled_at.isoformat() if item.scheduled_at else None,
                    "title": item.title(config.title_prefix),
                    "content": item.content,
                }
                for item in result.items
            ],
        }
        typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        table = Table(title=f"Delivery plan ({schedule.succeeded_count}/{len(result.items)} scheduled)")
        table.add_column("Title")
        table.add_column("Status")
        table.add_column("At")
        table.add_column("Preview")
        for item in result.items:
            at_text = item.scheduled_at.strftime("%Y-%m-%d %H:%M:%S") if item.scheduled_at else "-"
            table.add_row(item.title(config.title_prefix), item.status.value, at_text, item.preview)
        console.print(table)
        if schedule.truncated:
            console.print(f"[yellow]{schedule.truncated_count} item(s) left pending: outstanding ceiling reached[/yellow]")

    if schedule.error is not None:
        typer.echo(f"Error: {schedule.error}", err=True)
        raise typer.Exit(code=3)
