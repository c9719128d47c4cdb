"""
Settings for the trust scoring service.

Values come from DEFAULT_SETTINGS, overlaid with config/settings.yml and then
with environment variables (a .env file is loaded first if present).
"""

import copy
import logging
import os
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from scoring.weights import DEFAULT_WEIGHTS, InvalidConfiguration, WeightConfig

logger = logging.getLogger(__name__)

SETTINGS_PATH = os.path.join(os.path.dirname(__file__), 'settings.yml')

DEFAULT_SETTINGS: Dict[str, Any] = {
    'factor_weights': dict(DEFAULT_WEIGHTS),
    'warning_threshold': 60,
    'history_limit': 20,
    'result_cache_size': 100,
    'credential_cache_ttl': 3600,
    'credential_network': 'testnet',
    'database_url': 'sqlite:///./trustlens.db',
    'enable_deepfake_detection': True,
    'enable_text_analysis': True,
    'show_overlay': True,
}


def load_settings(path: Optional[str] = None) -> Dict[str, Any]:
    """Build a fresh settings dict from defaults, the YAML file and the environment."""
    load_dotenv()
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    config_path = path or SETTINGS_PATH

    try:
        if os.path.exists(config_path):
            with open(config_path, 'r') as f:
                file_settings = yaml.safe_load(f) or {}
            if isinstance(file_settings, dict):
                _merge(settings, file_settings)
                logger.debug(f"Loaded settings from {config_path}")
            else:
                logger.warning(f"Settings file {config_path} is not a mapping, using defaults")
        else:
            logger.warning(f"Settings file not found at {config_path}, using defaults")
    except (yaml.YAMLError, OSError) as e:
        logger.warning(f"Error loading settings from {config_path}: {e}, using defaults")

    if os.getenv('DATABASE_URL'):
        settings['database_url'] = os.environ['DATABASE_URL']
    if os.getenv('WARNING_THRESHOLD'):
        settings['warning_threshold'] = float(os.environ['WARNING_THRESHOLD'])

    validate_settings(settings)
    return settings


def validate_settings(settings: Dict[str, Any]) -> None:
    threshold = settings.get('warning_threshold')
    if not isinstance(threshold, (int, float)) or not 0 <= threshold <= 100:
        raise InvalidConfiguration(f"warning_threshold must be between 0 and 100, got {threshold!r}")
    if int(settings.get('history_limit', 0)) < 1:
        raise InvalidConfiguration("history_limit must be at least 1")
    if int(settings.get('result_cache_size', 0)) < 1:
        raise InvalidConfiguration("result_cache_size must be at least 1")
    # Raises on bad weights
    WeightConfig(settings.get('factor_weights') or {})


def _merge(settings: Dict[str, Any], overrides: Dict[str, Any]) -> None:
    for key, value in overrides.items():
        if key == 'factor_weights':
            if isinstance(value, dict):
                settings['factor_weights'].update(value)
            else:
                logger.warning(f"Ignoring factor_weights that is not a mapping: {value!r}")
        else:
            settings[key] = value


SETTINGS = load_settings()
