"""Client configuration from YAML file.

Loads from config/config.yaml with all settings in one place:
- Broker URL and connection timeout
- Retry options for subscription operations

Environment variables ARE supported using ${VAR_NAME} and ${VAR_NAME:-default}
syntax in YAML files. NAKADI_URL, NAKADI_CONNECTION_TIMEOUT and NAKADI_RETRY
override the file.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from nakadi.client import DEFAULT_NAKADI_URL, ClientOptions
from nakadi.options import SubscriptionOptions

logger = logging.getLogger(__name__)

# Default config file: config/config.yaml in src/ directory
DEFAULT_CONFIG_FILE = Path(__file__).parent / "config.yaml"

_DURATION_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(ms|s|m|h)?\s*$")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0, None: 1.0}
_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off", ""})


def load_yaml(path: Path) -> Dict[str, Any]:
    """Load YAML file and return dict."""
    if not path.exists():
        return {}
    with open(path, "r") as f:
        return yaml.safe_load(f) or {}


def _expand_env_vars(data: Any) -> Any:
    """Recursively expand ${VAR_NAME} and ${VAR_NAME:-default} environment variables in config data."""
    if isinstance(data, dict):
        return {key: _expand_env_vars(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_env_vars(item) for item in data]
    elif isinstance(data, str):
        pattern = r"\$\{([^}:]+)(?::-(([^}]*))?)?\}"

        def replacer(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else match.group(0)
            return os.getenv(var_name, default_value)

        return re.sub(pattern, replacer, data)
    else:
        return data


def parse_duration(value: Any) -> float:
    """Parse seconds from a number or a string like "500ms", "60s", "15m", "1h"."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    match = _DURATION_PATTERN.match(str(value))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return float(amount) * _DURATION_UNITS[unit]


def parse_bool(value: Any) -> bool:
    """Parse a YAML/env boolean (bool('false') would be True)."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid boolean: {value!r}")


@dataclass
class NakadiConfig:
    """Broker client configuration.

    Configuration structure:
        nakadi:
          url: http://localhost:8080
          connection_timeout: 30s
          subscriptions:
            retry: false
            initial_retry_interval: 500ms
            max_retry_interval: 60s
            max_elapsed_time: 15m
            retry_server_errors: false

    Unset retry durations fall back to SubscriptionOptions defaults.
    """

    url: str = DEFAULT_NAKADI_URL
    connection_timeout: float = 30.0
    subscriptions: SubscriptionOptions = field(default_factory=SubscriptionOptions)

    def client_options(self) -> ClientOptions:
        return ClientOptions(connection_timeout=self.connection_timeout)

    def validate(self) -> None:
        if not self.url.startswith(("http://", "https://")):
            raise ValueError(f"nakadi.url must start with http:// or https://, got: {self.url!r}")
        if self.connection_timeout <= 0:
            raise ValueError(
                f"nakadi.connection_timeout must be positive, got: {self.connection_timeout}"
            )


def _subscription_options(section: Dict[str, Any]) -> SubscriptionOptions:
    return SubscriptionOptions(
        retry=parse_bool(section.get("retry", False)),
        initial_retry_interval=parse_duration(section.get("initial_retry_interval")),
        max_retry_interval=parse_duration(section.get("max_retry_interval")),
        max_elapsed_time=parse_duration(section.get("max_elapsed_time")),
        retry_server_errors=parse_bool(section.get("retry_server_errors", False)),
    )


def load_config(config_path: Optional[Path] = None) -> NakadiConfig:
    """Load client configuration.

    An explicitly given path must exist; a missing default file yields the
    built-in defaults (plus environment overrides).
    """
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    path = config_path or DEFAULT_CONFIG_FILE
    logger.debug("Loading configuration from file: %s", path)
    yaml_data = _expand_env_vars(load_yaml(path))

    nakadi = yaml_data.get("nakadi") or {}
    if not isinstance(nakadi, dict):
        raise ValueError("Invalid config file: 'nakadi:' must be a mapping")

    subscriptions = dict(nakadi.get("subscriptions") or {})
    if os.getenv("NAKADI_RETRY"):
        subscriptions["retry"] = os.getenv("NAKADI_RETRY")

    config = NakadiConfig(
        url=os.getenv("NAKADI_URL") or nakadi.get("url") or DEFAULT_NAKADI_URL,
        connection_timeout=parse_duration(
            os.getenv("NAKADI_CONNECTION_TIMEOUT") or nakadi.get("connection_timeout", 30.0)
        ),
        subscriptions=_subscription_options(subscriptions),
    )
    config.validate()

    logger.debug(
        "Configuration loaded",
        extra={
            "base_url": config.url,
            "connection_timeout": config.connection_timeout,
            "retry_enabled": config.subscriptions.retry,
        },
    )
    return config
