"""
Configuration loading for TermSearch.

Settings live in ``config.json`` next to this module. Any section missing from
the file falls back to ``DEFAULT_CONFIG``.
"""

import copy
import json
import logging
import os

logger = logging.getLogger(__name__)

CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "config.json")

DEFAULT_CONFIG = {
    "preprocessing": {
        "lowercase": True,
        "remove_diacritics": True,
        "strip_punctuation": True,
        "stop_words": {"use": False, "language": "en"},
        "nonsense_tokens": {"remove": True, "min_word_length": 1}
    },
    "pipeline_order": [
        "lowercase", "remove_diacritics", "strip_punctuation",
        "stop_words", "nonsense_tokens"
    ],
    "ranking": {
        "use_idf": True,
        "sublinear_tf": True
    },
    "cli": {
        "top": 10
    }
}


def _merge(base, override):
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path=None):
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to a config file (defaults to the packaged config.json)

    Returns:
        Configuration dictionary, never None
    """
    config_path = config_path or CONFIG_PATH

    if not os.path.exists(config_path):
        logger.warning(f"Config file {config_path} not found, using default settings")
        return copy.deepcopy(DEFAULT_CONFIG)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"Could not load config {config_path}: {e}, using default settings")
        return copy.deepcopy(DEFAULT_CONFIG)

    if not isinstance(data, dict):
        logger.warning(f"Config {config_path} is not a JSON object, using default settings")
        return copy.deepcopy(DEFAULT_CONFIG)

    return _merge(DEFAULT_CONFIG, data)
