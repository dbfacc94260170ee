"""Telegram provider using python-telegram-bot with long polling."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from loguru import logger
from telegram import ReactionTypeCustomEmoji, ReactionTypeEmoji
from telegram.error import TelegramError
from telegram.ext import Application, MessageHandler, MessageReactionHandler, filters
from telegram.request import HTTPXRequest

from ..bus.events import Message, Reaction
from ..config.schema import TelegramConfig
from ..errors import ProviderError
from .base import MsgProvider, is_file_reference


ALLOWED_UPDATES = ["message", "message_reaction"]


class TelegramProvider(MsgProvider):
    """Telegram bot talking to a single configured chat."""

    def __init__(self, config: TelegramConfig) -> None:
        super().__init__()
        self._config = config
        self._app: Any = None

    @property
    def name(self) -> str:
        return "telegram"

    async def initialize(self) -> None:
        """Start the bot with long polling."""
        # read_timeout must be > getUpdates timeout (30s)
        request = HTTPXRequest(
            connection_pool_size=16,
            connect_timeout=10.0,
            read_timeout=60.0,
            write_timeout=30.0,
        )
        builder = Application.builder().token(self._config.token).request(request)
        if self._config.proxy:
            builder = builder.proxy(self._config.proxy).get_updates_proxy(
                self._config.proxy
            )
        self._app = builder.build()

        self._app.add_handler(MessageHandler(filters.ALL, self._on_message))
        self._app.add_handler(MessageReactionHandler(self._on_reaction))

        try:
            await self._app.initialize()
            await self._app.start()
            await self._app.updater.start_polling(
                allowed_updates=ALLOWED_UPDATES, drop_pending_updates=True
            )
        except TelegramError as e:
            raise ProviderError(f"error starting telegram bot: {e}") from e
        logger.debug("Telegram provider started")

    async def shutdown(self) -> None:
        """Stop polling and shut the bot down."""
        if not self._app:
            return
        try:
            if self._app.updater.running:
                await self._app.updater.stop()
            if self._app.running:
                await self._app.stop()
            await self._app.shutdown()
        except Exception as e:
            logger.warning(f"Error stopping Telegram: {e}")
        self._app = None
        logger.debug("Telegram provider stopped")

    async def send(self, content: str, as_text: bool = False) -> str:
        try:
            if not as_text and is_file_reference(content):
                logger.debug(f"Sending {content} as a document")
                sent = await self._app.bot.send_document(
                    chat_id=self._config.chat_id, document=Path(content)
                )
            else:
                sent = await self._app.bot.send_message(
                    chat_id=self._config.chat_id, text=content
                )
        except TelegramError as e:
            raise ProviderError(f"error sending telegram message: {e}") from e
        return str(sent.message_id)

    async def add_reaction(self, message_id: str, emoji: str) -> None:
        await self._set_reaction(message_id, [emoji])

    async def remove_reaction(self, message_id: str, emoji: str) -> None:
        # Bots hold at most one reaction per message; clearing removes it
        await self._set_reaction(message_id, [])

    async def _set_reaction(self, message_id: str, reaction: list[str]) -> None:
        try:
            await self._app.bot.set_message_reaction(
                chat_id=self._config.chat_id,
                message_id=int(message_id),
                reaction=reaction,
            )
        except ValueError as e:
            raise ProviderError(f"invalid telegram message id: {message_id}") from e
        except TelegramError as e:
            raise ProviderError(
                f"error setting reaction on message {message_id}: {e}"
            ) from e

    def _is_watched_chat(self, chat_id: int) -> bool:
        configured = self._config.chat_id
        # @channelusername style ids cannot be compared with numeric ones
        if not configured.lstrip("-").isdigit():
            return True
        return str(chat_id) == configured

    async def _on_message(self, update: Any, context: Any) -> None:
        """Publish incoming messages, noting which message they reply to."""
        msg = update.effective_message
        if msg is None or update.effective_chat is None:
            return
        if not self._is_watched_chat(update.effective_chat.id):
            return
        if msg.from_user and msg.from_user.id == context.bot.id:
            return

        referenced_id = ""
        if msg.reply_to_message is not None:
            referenced_id = str(msg.reply_to_message.message_id)

        await self.events.publish_message(
            Message(
                id=str(msg.message_id),
                chat_id=str(update.effective_chat.id),
                content=msg.text or msg.caption or "",
                referenced_id=referenced_id,
            )
        )

    async def _on_reaction(self, update: Any, context: Any) -> None:
        """Publish newly added reactions."""
        updated = update.message_reaction
        if updated is None:
            return
        if not self._is_watched_chat(updated.chat.id):
            return
        if updated.user and updated.user.id == context.bot.id:
            return
        if not updated.new_reaction:
            logger.debug(f"Reaction removed from {updated.message_id}, skipping")
            return

        new_reaction = updated.new_reaction[0]
        if isinstance(new_reaction, ReactionTypeEmoji):
            content = new_reaction.emoji
        elif isinstance(new_reaction, ReactionTypeCustomEmoji):
            content = new_reaction.custom_emoji_id
        else:
            logger.error(f"Unknown reaction type: {new_reaction.type}")
            return

        await self.events.publish_reaction(
            Reaction(
                message_id=str(updated.message_id),
                chat_id=str(updated.chat.id),
                content=content,
            )
        )
