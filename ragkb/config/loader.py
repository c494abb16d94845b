"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY (Junior Developer Guide) ──────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml  - Static defaults checked into the repo
#   2. .env file           - Local developer overrides (not committed)
#   3. Environment vars    - Set at deploy time
#
# load_config() reads the YAML file first, then deep-merges values from
# any *explicitly set* environment variable on top.  A key that is only
# present as a Settings default does not clobber the YAML value.
#
# settings_from_config() turns the merged dict back into a validated
# Settings object, which is what the composition root (ragkb.main) uses.
#
# The _deep_merge helper does recursive dict merging:
#   base = {"worker_pool": {"worker_count": 5}}
#   overrides = {"worker_pool": {"poll_interval_seconds": 0.5}}
#   result = {"worker_pool": {"worker_count": 5, "poll_interval_seconds": 0.5}}
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path
from typing import Any

import yaml

from ragkb.config.settings import Settings

# YAML section -> Settings fields living under it.
_SECTIONS: dict[str, tuple[str, ...]] = {
    "storage": ("database_path", "database_busy_timeout"),
    "worker_pool": ("worker_count", "poll_interval_seconds"),
    "fetch": ("fetch_timeout_seconds", "fetch_user_agent"),
    "ingestion": ("max_chunk_chars", "embedding_dimension"),
    "retrieval": ("similarity_threshold", "query_result_limit"),
    "app": ("app_env", "log_level", "log_json"),
}


def load_config(path: str = "config/config.yaml") -> dict:
    """Load YAML config and merge with environment-based Settings.

    Environment variables (via Settings) override YAML values where keys overlap.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Fully resolved configuration dictionary, grouped by section.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = Settings()
    explicitly_set = settings.model_fields_set

    env_overrides: dict[str, dict[str, Any]] = {}
    for section, fields in _SECTIONS.items():
        section_values = {
            name: getattr(settings, name) for name in fields if name in explicitly_set
        }
        if section_values:
            env_overrides[section] = section_values

    # Fill every key the YAML file leaves out with the Settings default.
    defaults = {
        section: {name: getattr(settings, name) for name in fields}
        for section, fields in _SECTIONS.items()
    }
    _deep_merge(defaults, yaml_config)
    _deep_merge(defaults, env_overrides)
    return defaults


def settings_from_config(config: dict) -> Settings:
    """Flatten a sectioned config dict into a validated Settings instance."""
    flat: dict[str, Any] = {}
    for section, fields in _SECTIONS.items():
        values = config.get(section) or {}
        for name in fields:
            if name in values:
                flat[name] = values[name]
    return Settings(**flat)


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
