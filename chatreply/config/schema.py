"""Configuration schema for chatreply."""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


UNBOUNDED = -1  # replies sentinel: never auto-resolve
DEFAULT_WATCH_EMOJI = "👀"


def default_config_path() -> Path:
    """Default config location, honouring XDG_CONFIG_HOME."""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
    return base / "chatreply" / "conf.toml"


class DiscordConfig(BaseModel):
    """Discord provider configuration."""

    token: str = ""
    user_id: str = ""


class TelegramConfig(BaseModel):
    """Telegram provider configuration."""

    token: str = ""
    chat_id: str = ""
    proxy: str = ""


class Config(BaseSettings):
    """Root configuration for chatreply."""

    model_config = {"env_prefix": "CHATREPLY_", "env_nested_delimiter": "__"}

    active_provider: str = ""
    discord: DiscordConfig = Field(default_factory=DiscordConfig)
    telegram: TelegramConfig = Field(default_factory=TelegramConfig)


class RelayOptions(BaseModel):
    """Resolution policy parameters, read-only once the relay starts."""

    model_config = {"frozen": True}

    separator: str = ":"
    msg_separator: str = "\n"
    out_separator: str = "\n"
    watch_emoji: str = DEFAULT_WATCH_EMOJI
    replies: int = 1
    skip_replies: bool = False
    keep_trailing: bool = False
    as_text: bool = False

    @field_validator("replies")
    @classmethod
    def _check_replies(cls, v: int) -> int:
        if v == 0:
            raise ValueError("replies must not be 0 (use -1 to wait indefinitely)")
        if v < UNBOUNDED:
            raise ValueError(f"replies must be positive or {UNBOUNDED}, got {v}")
        return v

    @field_validator("msg_separator")
    @classmethod
    def _check_msg_separator(cls, v: str) -> str:
        if not v:
            raise ValueError("message separator must not be empty")
        return v

    @property
    def unbounded(self) -> bool:
        return self.replies == UNBOUNDED
