"""
Configuration for scale rebinding
Loads newscale.yaml and merges it over the defaults
"""

import os
import logging
from copy import deepcopy
from typing import Dict, Any, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "newscale.yaml"

# Example newscale.yaml structure
DEFAULT_CONFIG = {
    # Appended to an aesthetic each time a new scale is started for it
    'rebind_suffix': '_new',
    # Build the plot to create implicit default scales before renaming
    'materialize_default_scales': True,
    'logging': {
        'level': 'WARNING',
        'filename': None,
    },
}

_active_config: Optional[Dict[str, Any]] = None


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    result = deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = _merge(result[key], value)
        else:
            result[key] = value
    return result


def validate_config(conf: Dict[str, Any]) -> Dict[str, Any]:
    """
    Check a merged configuration

    Args:
        conf: Configuration dictionary

    Returns:
        The same dictionary
    """
    suffix = conf.get('rebind_suffix')
    if not isinstance(suffix, str) or not suffix:
        raise ValueError(f"rebind_suffix must be a non-empty string, got {suffix!r}")

    unknown = set(conf) - set(DEFAULT_CONFIG)
    for key in sorted(unknown):
        logger.warning(f"Unknown configuration key: {key}")

    return conf


def load_config(config_dir: Optional[str] = None) -> Dict[str, Any]:
    """
    Load newscale.yaml and merge it over DEFAULT_CONFIG

    Args:
        config_dir: Optional directory path. If None, uses the current directory,
            then the parent directory

    Returns:
        Merged configuration dictionary
    """
    if config_dir is None:
        if os.path.exists(CONFIG_FILENAME):
            config_dir = '.'
        else:
            config_dir = '..'

    config_path = os.path.join(config_dir, CONFIG_FILENAME)

    conf = {}
    if os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                conf = yaml.safe_load(f) or {}
            logger.info(f"Loaded configuration from {config_path}")
        except yaml.YAMLError as e:
            logger.error(f"Error loading {config_path}: {e}")
            raise
    else:
        logger.warning(f"Configuration file not found: {config_path}")

    if not isinstance(conf, dict):
        raise ValueError(f"{config_path} must contain a mapping, got {type(conf).__name__}")

    return validate_config(_merge(DEFAULT_CONFIG, conf))


def get_config() -> Dict[str, Any]:
    """Active configuration, DEFAULT_CONFIG until set_config is called"""
    if _active_config is None:
        return deepcopy(DEFAULT_CONFIG)
    return _active_config


def set_config(conf: Optional[Dict[str, Any]]) -> None:
    """
    Replace the active configuration. Passing None restores the defaults
    """
    global _active_config
    if conf is None:
        _active_config = None
        return
    _active_config = validate_config(_merge(DEFAULT_CONFIG, conf))
