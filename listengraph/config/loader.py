"""Layered configuration: ``config/config.yaml`` under environment settings.

Precedence, lowest first:

    1. ``Settings`` field defaults
    2. ``config/config.yaml`` (network defaults and the artist genre table)
    3. ``.env`` and environment variables

A ``Settings`` default only fills keys the YAML file leaves out, so the
YAML ``network`` section is honoured unless the environment overrides it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from listengraph.config.settings import Settings
from listengraph.utils.errors import ConfigurationError

# (section, key) in the merged config -> Settings field
_SETTINGS_KEYS: dict[tuple[str, str], str] = {
    ("app", "host"): "app_host",
    ("app", "port"): "app_port",
    ("app", "env"): "app_env",
    ("storage", "listens_db_path"): "listens_db_path",
    ("genres", "cache_enabled"): "genre_cache_enabled",
    ("genres", "cache_max_size"): "genre_cache_max_size",
    ("genres", "cache_ttl"): "genre_cache_ttl",
    ("network", "min_play_count"): "network_min_play_count",
    ("network", "max_artists"): "network_max_artists",
    ("network", "proximity_window_minutes"): "network_proximity_window_minutes",
    ("network", "min_edge_weight"): "network_min_edge_weight",
    ("logging", "level"): "log_level",
}


def _read_yaml(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        return {}
    with open(config_path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Malformed YAML in {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at the top level")
    return data


def load_config(path: str | None = None, settings: Settings | None = None) -> dict[str, Any]:
    """Read the YAML file at *path* (default ``settings.config_path``) and
    layer *settings* over it.

    Raises:
        ConfigurationError: the file is not valid YAML or not a mapping.
    """
    settings = settings or Settings()
    config = _read_yaml(Path(path or settings.config_path))
    explicit = settings.model_fields_set

    for (section, key), field_name in _SETTINGS_KEYS.items():
        block = config.setdefault(section, {})
        if not isinstance(block, dict):
            raise ConfigurationError(f"Config section {section!r} must be a mapping")
        if field_name in explicit or key not in block:
            block[key] = getattr(settings, field_name)

    return config


def genre_table(config: dict[str, Any]) -> dict[str, Any]:
    """The ``genres.artists`` table of a loaded config, or ``{}``."""
    table = (config.get("genres") or {}).get("artists") or {}
    if not isinstance(table, dict):
        raise ConfigurationError("genres.artists must be a mapping of artist -> genre(s)")
    return table
