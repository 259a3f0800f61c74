"""Configuration management for NYLAX.

Settings live in ``~/.config/nylas-access/config.yaml`` (relocatable with
NYLAX_CONFIG_DIR / NYLAX_CONFIG_FILE). Keys are addressed with dots, e.g.
``api.app_id``; the ``api`` keys can also come from NYLAS_* environment
variables, which win over the file.
"""

import os
import copy
import yaml
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_API_SERVER = "https://api.nylas.com"
DEFAULT_TIMEOUT = 30.0

DEFAULT_CONFIG = {
    "api": {
        "server": DEFAULT_API_SERVER,
        "app_id": None,
        "app_secret": None,
        "timeout": DEFAULT_TIMEOUT,
    },
    "active_profile": None,
}

ENV_OVERRIDES = {
    "api.server": "NYLAS_API_SERVER",
    "api.app_id": "NYLAS_APP_ID",
    "api.app_secret": "NYLAS_APP_SECRET",
}


def get_config_dir() -> Path:
    env_path = os.getenv("NYLAX_CONFIG_DIR")
    return Path(env_path) if env_path else Path.home() / ".config" / "nylas-access"


def get_config_file_path() -> Path:
    """Path of config.yaml; NYLAX_CONFIG_FILE takes precedence over the directory."""
    env_path = os.getenv("NYLAX_CONFIG_FILE")
    return Path(env_path) if env_path else get_config_dir() / "config.yaml"


def load_config() -> dict:
    """
    Read config.yaml merged over DEFAULT_CONFIG.

    A missing, empty or unparsable file yields a copy of the defaults.
    """
    merged = copy.deepcopy(DEFAULT_CONFIG)
    path = get_config_file_path()
    if not path.is_file():
        logger.debug(f"No config at {path}; using defaults")
        return merged

    try:
        stored = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        logger.error(f"Ignoring malformed config {path}: {e}")
        return merged

    if isinstance(stored, dict):
        _deep_merge(merged, stored)
    return merged


def save_config(config_data: dict):
    path = get_config_file_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(config_data, default_flow_style=False))
    logger.debug(f"Wrote config to {path}")


def get_config_value(key: str, default: Any = None) -> Any:
    """Look up a dotted key. Environment overrides come first; None counts as unset."""
    env_name = ENV_OVERRIDES.get(key)
    if env_name and os.getenv(env_name):
        return os.getenv(env_name)

    node = load_config()
    for part in key.split('.'):
        if not isinstance(node, dict) or part not in node:
            return default
        node = node[part]
    return default if node is None else node


def set_config_value(key: str, value: Any):
    """Store a dotted key in config.yaml, creating intermediate sections."""
    config_data = load_config()
    *parents, leaf = key.split('.')
    section = config_data
    for part in parents:
        if not isinstance(section.get(part), dict):
            section[part] = {}
        section = section[part]
    section[leaf] = value
    save_config(config_data)


def get_api_settings() -> dict:
    """Keyword arguments for APIClient taken from config and environment."""
    return {
        "api_server": get_config_value("api.server", DEFAULT_API_SERVER),
        "app_id": get_config_value("api.app_id"),
        "app_secret": get_config_value("api.app_secret"),
        "timeout": float(get_config_value("api.timeout", DEFAULT_TIMEOUT)),
    }


def _deep_merge(base: dict, new: dict) -> dict:
    for k, v in new.items():
        if isinstance(base.get(k), dict) and isinstance(v, dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base
