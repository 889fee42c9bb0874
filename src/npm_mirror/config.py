"""Runtime configuration: defaults from Constants, a YAML file, then env vars."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import yaml

from .constants import Constants
from .errors import ConfigError

logger = logging.getLogger(__name__)

_ENV_OVERRIDES = {
    "NPM_MIRROR_REGISTRY": "registry",
    "NPM_MIRROR_REQUEST_TIMEOUT": "request_timeout",
    "NPM_MIRROR_MAX_CONCURRENCY": "max_concurrency",
    "NPM_MIRROR_BATCH_TIMEOUT": "batch_timeout",
    Constants.LOG_LEVEL_ENV: "log_level",
}

# Values from YAML or the environment are coerced to these before use.
_FIELD_CASTS = {
    "registry": str,
    "request_timeout": float,
    "retry_max": int,
    "retry_base_delay": float,
    "max_concurrency": int,
    "batch_timeout": float,
    "log_level": lambda value: str(value).strip().upper(),
}


@dataclass
class MirrorConfig:
    """Configuration for a resolution pass."""

    registry: str = Constants.REGISTRY_URL_NPM
    request_timeout: float = Constants.REQUEST_TIMEOUT
    retry_max: int = Constants.HTTP_RETRY_MAX
    retry_base_delay: float = Constants.HTTP_RETRY_BASE_DELAY_SEC
    max_concurrency: int = Constants.MAX_CONCURRENCY
    batch_timeout: Optional[float] = Constants.BATCH_TIMEOUT_SEC
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MirrorConfig":
        """Build a config from a mapping.

        Unknown keys, and values that do not convert to the field's type, are
        ignored with a warning. ``batch_timeout`` may be null to disable the
        deadline.
        """
        config = cls()
        for key, value in data.items():
            cast = _FIELD_CASTS.get(key)
            if cast is None:
                logger.warning("Ignoring unknown config key: %s", key)
                continue
            if value is None and key == "batch_timeout":
                config.batch_timeout = None
                continue
            try:
                setattr(config, key, cast(value))
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid value for %s: %r", key, value)
        return config


def _load_yaml_config(path: str) -> Dict[str, Any]:
    """Read the ``resolver`` section (or the whole document) of a YAML file."""
    if not os.path.isfile(path):
        logger.warning("Config file not found: %s", path)
        return {}
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config root in {path} must be a mapping")
    section = data.get("resolver", data)
    return section if isinstance(section, dict) else {}


def load_config(path: Optional[str] = None) -> MirrorConfig:
    """Load configuration with precedence env > file > defaults.

    The file comes from ``path`` or the ``NPM_MIRROR_CONFIG`` environment
    variable; without either, defaults are used.
    """
    path = path or os.environ.get(Constants.CONFIG_ENV)
    data = _load_yaml_config(path) if path else {}

    for env_name, key in _ENV_OVERRIDES.items():
        raw = os.environ.get(env_name)
        if raw is None or not raw.strip():
            continue
        try:
            data[key] = _FIELD_CASTS[key](raw.strip())
        except ValueError:
            logger.warning("Ignoring invalid value for %s: %r", env_name, raw)
    return MirrorConfig.from_dict(data)
