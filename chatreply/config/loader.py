"""Configuration file I/O."""

from __future__ import annotations

import re
import tomllib
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import ValidationError

from ..errors import ConfigError
from .schema import Config, default_config_path


# Keys the original Go tool accepted, matched case-insensitively there
_KNOWN_ALIASES = {
    "userid": "user_id",
    "chatid": "chat_id",
    "activeprovider": "active_provider",
}


def _snake_case(key: str) -> str:
    """Normalize ``ActiveProvider``/``UserID`` style keys to snake_case."""
    alias = _KNOWN_ALIASES.get(key.lower())
    if alias:
        return alias
    key = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", key)
    return key.lower()


def _normalize_keys(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        _snake_case(k): _normalize_keys(v) if isinstance(v, dict) else v
        for k, v in raw.items()
    }


def load_config(path: str | Path | None = None) -> Config:
    """Load configuration from a TOML file.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    config_file = Path(path).expanduser() if path else default_config_path()
    if not config_file.exists():
        raise ConfigError(f"config file not found: {config_file}")

    try:
        raw = tomllib.loads(config_file.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"config file {config_file} is corrupted: {e}") from e
    except OSError as e:
        raise ConfigError(f"cannot read config file {config_file}: {e}") from e

    try:
        config = Config(**_normalize_keys(raw))
    except ValidationError as e:
        raise ConfigError(f"invalid configuration in {config_file}: {e}") from e

    logger.debug(f"Loaded config from {config_file}")
    return config
