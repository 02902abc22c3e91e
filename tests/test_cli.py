import json
from pathlib import Path

import pytest

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from typer.testing import CliRunner

from text_relay_cli.cli import app
from text_relay_core.backend import DEFAULT_OUTSTANDING_CEILING

from conftest import write_split_config

runner = CliRunner()


@pytest.fixture(autouse=True)
def _isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(tmp_path)
    for var in ("TEXT_RELAY_MAX_SEGMENT_LENGTH", "TEXT_RELAY_INTERVAL_SECONDS", "TEXT_RELAY_TITLE_PREFIX"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


def test_split_json() -> None:
    result = runner.invoke(
        app,
        ["split", "The quick brown fox jumps over the lazy dog.", "--max-length", "20", "--format", "json"],
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["max_length"] == 20
    assert payload["segments"] == ["The quick brown fox", "jumps over the lazy", "dog."]


def test_split_uses_config_file(tmp_path: Path) -> None:
    write_split_config(tmp_path, {"max_segment_length": 9})

    result = runner.invoke(app, ["split", "alpha beta gamma", "--format", "json"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout)["segments"] == ["alpha", "beta", "gamma"]


def test_split_reads_file_and_renders_table(tmp_path: Path) -> None:
    source = tmp_path / "note.txt"
    source.write_text("one two three four five six", encoding="utf-8")

    result = runner.invoke(app, ["split", "--file", str(source), "--max-length", "10"])

    assert result.exit_code == 0, result.output
    assert "segment(s)" in result.stdout


def test_split_blank_input_fails() -> None:
    result = runner.invoke(app, ["split", "   "])
    assert result.exit_code == 1


def test_plan_json_assigns_spaced_times() -> None:
    result = runner.invoke(
        app,
        [
            "plan",
            "alpha beta gamma",
            "--at",
            "2026-01-01T09:00:00+00:00",
            "--interval",
            "90",
            "--format",
            "json",
        ],
        env={"TEXT_RELAY_MAX_SEGMENT_LENGTH": "5", "TEXT_RELAY_TITLE_PREFIX": "Part"},
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["scheduled"] == 3
    assert [item["scheduled_at"] for item in payload["items"]] == [
        "2026-01-01T09:00:00+00:00",
        "2026-01-01T09:01:30+00:00",
        "2026-01-01T09:03:00+00:00",
    ]
    assert [item["title"] for item in payload["items"]] == ["Part 1/3", "Part 2/3", "Part 3/3"]


def test_plan_reports_capacity_truncation() -> None:
    result = runner.invoke(
        app,
        [
            "plan",
            "a b c d e",
            "--at",
            "2026-01-01T09:00:00+00:00",
            "--ceiling",
            "5",
            "--outstanding",
            "3",
            "--format",
            "json",
        ],
        env={"TEXT_RELAY_MAX_SEGMENT_LENGTH": "1"},
    )

    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["scheduled"] == 2
    assert payload["truncated"] == 3
    assert [item["status"] for item in payload["items"]] == ["scheduled"] * 2 + ["pending"] * 3


def test_plan_without_capacity_exits_nonzero() -> None:
    result = runner.invoke(app, ["plan", "hello there", "--ceiling", "0", "--format", "json"])
    assert result.exit_code == 3


def test_plan_rejects_bad_time() -> None:
    result = runner.invoke(app, ["plan", "hello", "--at", "tomorrow-ish"])
    assert result.exit_code != 0


def test_config_init_then_show(tmp_path: Path) -> None:
    init = runner.invoke(app, ["config", "init", "--project-root", str(tmp_path)])
    assert init.exit_code == 0, init.output

    path = tmp_path / ".text-relay" / "config.toml"
    with open(path, "rb") as f:
        written = tomllib.load(f)
    assert written["split"]["max_segment_length"] == 100

    again = runner.invoke(app, ["config", "init", "--project-root", str(tmp_path)])
    assert again.exit_code == 1

    show = runner.invoke(app, ["config", "show", "--format", "json"], env={"TEXT_RELAY_INTERVAL_SECONDS": "5"})
    assert show.exit_code == 0, show.output
    data = json.loads(show.stdout)
    assert data == {"max_segment_length": 100, "interval_seconds": 5.0, "title_prefix": "Notification"}


def test_invalid_config_exits_with_code_2(tmp_path: Path) -> None:
    write_split_config(tmp_path, {"max_segment_length": -3})
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 2


def test_plan_default_ceiling_is_platform_limit() -> None:
    result = runner.invoke(app, ["plan", "hello there", "--format", "json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)["ceiling"] == DEFAULT_OUTSTANDING_CEILING
