"""Tests for version information."""

from text_relay_core import __version__, __version_info__


def test_version_string_format():
    """Version string should follow semantic versioning format."""
    parts = __version__.split(".")
    assert len(parts) == 3, f"Version should have 3 parts, got {len(parts)}"
    for part in parts:
        assert part.isdigit(), f"Version part '{part}' should be numeric"


def test_version_consistency():
    """Version string and version info should be consistent."""
    major, minor, patch = __version_info__
    assert __version__ == f"{major}.{minor}.{patch}"


def test_version_matches_pyproject():
    """Package version and pyproject.toml version should agree."""
    import sys
    from pathlib import Path

    if sys.version_info >= (3, 11):
        import tomllib as tomli
    else:
        import tomli

    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
    with open(pyproject_path, "rb") as f:
        config = tomli.load(f)
    assert config["project"]["version"] == __version__
