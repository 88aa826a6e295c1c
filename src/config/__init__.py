"""Configuration loading for the Nakadi client.

Configuration Priority
---------------------

Settings are merged in the following priority (highest to lowest):

1. Environment variables (NAKADI_URL, NAKADI_CONNECTION_TIMEOUT, NAKADI_RETRY)
2. YAML configuration file (config/config.yaml, ${VAR} expansion supported)
3. Dataclass defaults

Usage:
    >>> from config import load_config
    >>> config = load_config()
    >>> config.subscriptions.retry
    False
"""

from config.config import (
    NakadiConfig,
    load_config,
    parse_bool,
    parse_duration,
)

__all__ = [
    "load_config",
    "parse_duration",
    "parse_bool",
    "NakadiConfig",
]
