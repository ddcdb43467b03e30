"""Configuration loading for runtime tunables (endpoints, cache, archives).

Precedence, lowest to highest: ``Constants`` defaults, config file,
environment variables, CLI flags.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

import yaml

from .constants import Constants

logger = logging.getLogger(__name__)

# config key -> (Constants attribute, coercion)
_CONFIG_KEYS = {
    "api_url": ("API_URL", str),
    "cdn_url": ("CDN_URL", str),
    "request_timeout": ("REQUEST_TIMEOUT", int),
    "compression_level": ("COMPRESSION_LEVEL", int),
    "cache_dir": ("CACHE_DIR", str),
    "expand_export_maps": ("EXPAND_EXPORT_MAPS", bool),
}


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    """Load configuration from a YAML or JSON file.

    Args:
        config_path: Path to the config file; None means no file.

    Returns:
        The ``skypack`` section if present, otherwise the whole mapping.

    Raises:
        OSError: The file cannot be read.
        ValueError: The file does not hold a mapping.
    """
    if not config_path:
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        if config_path.lower().endswith(".json"):
            data = json.load(f)
        else:
            data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping")
    section = data.get("skypack", data)
    if not isinstance(section, dict):
        raise ValueError(f"Config file {config_path}: 'skypack' must be a mapping")
    return section


def apply_config(config: Dict[str, Any]) -> None:
    """Apply known config keys onto ``Constants``; unknown keys are logged and ignored."""
    for key, value in config.items():
        target = _CONFIG_KEYS.get(key)
        if target is None:
            logger.warning("Ignoring unknown config key: %s", key)
            continue
        attr, coerce = target
        setattr(Constants, attr, coerce(value))


def apply_env_overrides(environ: Optional[Dict[str, str]] = None) -> None:
    """Apply ``SKYPACK_PROXY_*`` environment overrides."""
    env = os.environ if environ is None else environ
    if env.get(Constants.ENV_API_URL):
        Constants.API_URL = env[Constants.ENV_API_URL].strip()
    if env.get(Constants.ENV_CDN_URL):
        Constants.CDN_URL = env[Constants.ENV_CDN_URL].strip()
    if env.get(Constants.ENV_CACHE_DIR):
        Constants.CACHE_DIR = env[Constants.ENV_CACHE_DIR].strip()


def apply_cli_overrides(args) -> None:
    """Apply CLI flags with highest precedence."""
    if getattr(args, "CACHE_DIR", None):
        Constants.CACHE_DIR = args.CACHE_DIR
    if getattr(args, "COMPRESSION_LEVEL", None) is not None:
        Constants.COMPRESSION_LEVEL = int(args.COMPRESSION_LEVEL)
    if getattr(args, "EXPAND_EXPORT_MAPS", False):
        Constants.EXPAND_EXPORT_MAPS = True
