"""Locate and read hotpotato.yaml."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import HotPotatoConfig

logger = logging.getLogger(__name__)

PROJECT_CONFIG = "hotpotato.yaml"


def config_search_path(cli_path: str | None = None) -> list[Path]:
    """Candidate files, most specific first: --config, project, user."""
    paths = [Path(PROJECT_CONFIG), Path.home() / ".hotpotato" / "config.yaml"]
    if cli_path:
        paths.insert(0, Path(cli_path))
    return paths


def load_config(cli_path: str | None = None) -> HotPotatoConfig:
    """Return the first non-empty config on the search path, or defaults.

    Settings are read once; a running decorator never sees later edits.
    Raises ValueError for unparsable YAML, a non-mapping document or
    values the model rejects.
    """
    for path in config_search_path(cli_path):
        if not path.is_file():
            continue
        raw = _read_mapping(path)
        if raw is None:
            logger.debug("Skipping empty config %s", path)
            continue
        try:
            config = HotPotatoConfig.model_validate(raw)
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e
        logger.debug("Loaded config from %s", path)
        return config

    logger.debug("No config file found; using defaults")
    return HotPotatoConfig()


def _read_mapping(path: Path) -> dict | None:
    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is None or isinstance(raw, dict):
        return raw
    raise ValueError(
        f"Invalid config in {path}: expected a mapping at the top level, "
        f"got {type(raw).__name__}"
    )


# Default YAML template for `hotpotato config init`
DEFAULT_CONFIG_TEMPLATE = """\
# hotpotato.yaml

# Base duration in seconds. Files are hot for 2x, warm for 10x and
# cold for 100x this value; older files are left undecorated.
# Changes take effect the next time hotpotato starts.
time_multiplier_seconds: 60

# Corner the overlay is drawn in:
#   0 = top left, 1 = top right, 2 = bottom left, 3 = bottom right
corner_placement: 1

# Filesystem watching
watch:
  ignore_patterns: [".git", "node_modules", "__pycache__", ".venv", ".tox"]

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
