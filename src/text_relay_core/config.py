"""Split configuration loading.

Settings come from, lowest priority first:
1. Model defaults (``SplitConfiguration``)
2. ``[split]`` table of ``.text-relay/config.toml`` (found by walking up from
   the start path) or an explicitly given config file
3. ``TEXT_RELAY_*`` environment variables

The coordinator never calls into this module; callers load a configuration
once and pass the resulting value in.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from .errors import ConfigError
from .models import SplitConfiguration

# Conditional TOML import: stdlib tomllib (3.11+) or fallback tomli (<3.11)
try:
    import tomllib  # Python 3.11+
except ImportError:
    import tomli as tomllib  # type: ignore

logger = logging.getLogger(__name__)

CONFIG_DIR_NAME = ".text-relay"
CONFIG_FILE_NAME = "config.toml"
SPLIT_TABLE = "split"

ENV_OVERRIDES: Dict[str, str] = {
    "TEXT_RELAY_MAX_SEGMENT_LENGTH": "max_segment_length",
    "TEXT_RELAY_INTERVAL_SECONDS": "interval_seconds",
    "TEXT_RELAY_TITLE_PREFIX": "title_prefix",
}


class ConfigLoader:
    """Load and validate split configuration."""

    @staticmethod
    def find_config_file(start_path: Path, custom_config_file: Optional[Path] = None) -> Optional[Path]:
        """Find .text-relay/config.toml by walking up the directory tree or use custom file."""
        if custom_config_file:
            if custom_config_file.exists():
                return custom_config_file.resolve()
            raise ConfigError(f"Config file not found: {custom_config_file}")

        current = start_path if start_path.is_dir() else start_path.parent
        for parent in [current, *current.parents]:
            config_path = parent / CONFIG_DIR_NAME / CONFIG_FILE_NAME
            if config_path.exists():
                return config_path

        return None

    @staticmethod
    def read_split_table(config_path: Path) -> Dict[str, Any]:
        """Return the raw ``[split]`` table of a config file."""
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigError(f"Failed to parse TOML from {config_path}: {e}")

        table = data.get(SPLIT_TABLE, {})
        if not isinstance(table, dict):
            raise ConfigError(f"[{SPLIT_TABLE}] must be a table: {config_path}")
        return dict(table)

    @staticmethod
    def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        env = os.environ if environ is None else environ
        overrides: Dict[str, str] = {}
        for var, field in ENV_OVERRIDES.items():
            value = (env.get(var) or "").strip()
            if value:
                overrides[field] = value
        return overrides

    @staticmethod
    def load(
        start_path: Optional[Path] = None,
        custom_config_file: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> SplitConfiguration:
        """Resolve the effective SplitConfiguration.

        Raises:
            ConfigError: If the file cannot be parsed or a value is invalid
        """
        config_path = ConfigLoader.find_config_file(start_path or Path.cwd(), custom_config_file)

        values: Dict[str, Any] = {}
        if config_path:
            logger.debug(f"Loading split config from {config_path}")
            values.update(ConfigLoader.read_split_table(config_path))
        values.update(ConfigLoader.env_overrides(environ))

        try:
            return SplitConfiguration(**values)
        except PydanticValidationError as e:
            source = str(config_path) if config_path else "environment"
            raise ConfigError(f"Invalid split configuration ({source}): {e}")

    @staticmethod
    def default_path(project_root: Path) -> Path:
        return project_root / CONFIG_DIR_NAME / CONFIG_FILE_NAME
