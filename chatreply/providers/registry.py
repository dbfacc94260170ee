"""Chat provider registry keyed by configuration name."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from loguru import logger

from ..config.schema import Config
from ..errors import ProviderError
from .base import MsgProvider


def _create_discord(config: Config) -> MsgProvider:
    if not config.discord.token:
        raise ProviderError("discord token not provided")
    if not config.discord.user_id:
        raise ProviderError("discord user ID not provided")

    from .discord import DiscordProvider

    return DiscordProvider(config.discord)


def _create_telegram(config: Config) -> MsgProvider:
    if not config.telegram.token:
        raise ProviderError("telegram token not provided")
    if not config.telegram.chat_id:
        raise ProviderError("telegram chat ID not provided")

    from .telegram import TelegramProvider

    return TelegramProvider(config.telegram)


@dataclass
class ProviderSpec:
    """Specification for a chat provider."""

    name: str
    factory: Callable[[Config], MsgProvider]
    description: str = ""


# Provider registry - single source of truth
PROVIDERS: dict[str, ProviderSpec] = {
    "discord": ProviderSpec(
        name="discord",
        factory=_create_discord,
        description="Discord direct messages via a bot account",
    ),
    "telegram": ProviderSpec(
        name="telegram",
        factory=_create_telegram,
        description="Telegram chat via the Bot API (long polling)",
    ),
}


def get_provider_spec(name: str) -> ProviderSpec | None:
    """Get provider spec by name."""
    return PROVIDERS.get(name.lower())


def create_provider(config: Config) -> MsgProvider:
    """Build the provider selected by ``config.active_provider``."""
    if not config.active_provider:
        raise ProviderError("no active provider specified")

    spec = get_provider_spec(config.active_provider)
    if spec is None:
        available = "; ".join(f"{s.name} ({s.description})" for s in PROVIDERS.values())
        raise ProviderError(
            f"unsupported provider: {config.active_provider} (available: {available})"
        )

    provider = spec.factory(config)
    logger.debug(f"Created provider: {spec.name}")
    return provider
