"""Discord provider using discord.py over a DM channel."""

from __future__ import annotations

import asyncio
from typing import Any

import discord
from loguru import logger

from ..bus.events import Message, Reaction
from ..config.schema import DiscordConfig
from ..errors import ProviderError
from .base import MsgProvider, is_file_reference


class DiscordProvider(MsgProvider):
    """Discord bot talking to one user through direct messages."""

    READY_TIMEOUT = 30.0

    def __init__(self, config: DiscordConfig) -> None:
        super().__init__()
        self._config = config
        self._client: discord.Client | None = None
        self._channel: Any = None
        self._task: asyncio.Task | None = None

    @property
    def name(self) -> str:
        return "discord"

    async def initialize(self) -> None:
        """Log in, open the gateway connection and the DM channel."""
        intents = discord.Intents.default()
        intents.message_content = True
        intents.dm_messages = True
        intents.dm_reactions = True
        intents.guild_messages = True
        intents.guild_reactions = True
        self._client = client = discord.Client(intents=intents)

        @client.event
        async def on_message(message: discord.Message) -> None:
            await self._on_message(message)

        @client.event
        async def on_raw_reaction_add(payload: discord.RawReactionActionEvent) -> None:
            await self._on_reaction(payload)

        try:
            await client.login(self._config.token)
            self._task = asyncio.create_task(client.connect())
            await asyncio.wait_for(client.wait_until_ready(), self.READY_TIMEOUT)
            user = await client.fetch_user(int(self._config.user_id))
            self._channel = await user.create_dm()
        except (discord.DiscordException, asyncio.TimeoutError, ValueError) as e:
            raise ProviderError(f"error opening discord connection: {e}") from e
        logger.debug(f"Discord provider started (DM channel {self._channel.id})")

    async def shutdown(self) -> None:
        """Close the gateway connection."""
        if self._client is None:
            return
        try:
            await self._client.close()
            if self._task is not None:
                await self._task
        except Exception as e:
            logger.warning(f"Error stopping Discord: {e}")
        self._client = None
        self._task = None
        logger.debug("Discord provider stopped")

    async def send(self, content: str, as_text: bool = False) -> str:
        try:
            if not as_text and is_file_reference(content):
                logger.debug(f"Sending {content} as an attachment")
                sent = await self._channel.send(file=discord.File(content))
            else:
                sent = await self._channel.send(content)
        except discord.DiscordException as e:
            raise ProviderError(f"error sending discord message: {e}") from e
        return str(sent.id)

    async def add_reaction(self, message_id: str, emoji: str) -> None:
        try:
            await self._partial(message_id).add_reaction(emoji)
        except discord.DiscordException as e:
            raise ProviderError(
                f"error adding reaction to message {message_id}: {e}"
            ) from e

    async def remove_reaction(self, message_id: str, emoji: str) -> None:
        try:
            await self._partial(message_id).remove_reaction(emoji, self._client.user)
        except discord.DiscordException as e:
            raise ProviderError(
                f"error removing reaction from message {message_id}: {e}"
            ) from e

    def _partial(self, message_id: str) -> discord.PartialMessage:
        try:
            return self._channel.get_partial_message(int(message_id))
        except ValueError as e:
            raise ProviderError(f"invalid discord message id: {message_id}") from e

    async def _on_message(self, message: discord.Message) -> None:
        if self._client is None or message.author == self._client.user:
            return
        if self._channel is None or message.channel.id != self._channel.id:
            return

        referenced_id = ""
        if message.reference is not None and message.reference.message_id:
            referenced_id = str(message.reference.message_id)

        await self.events.publish_message(
            Message(
                id=str(message.id),
                chat_id=str(message.channel.id),
                content=message.content,
                referenced_id=referenced_id,
            )
        )

    async def _on_reaction(self, payload: discord.RawReactionActionEvent) -> None:
        if self._client is None or self._client.user is None:
            return
        if payload.user_id == self._client.user.id:
            return

        await self.events.publish_reaction(
            Reaction(
                message_id=str(payload.message_id),
                chat_id=str(payload.channel_id),
                content=payload.emoji.name or str(payload.emoji),
            )
        )
