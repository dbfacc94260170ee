"""Async event bus decoupling provider callbacks from the dispatcher."""

from __future__ import annotations

import asyncio

from loguru import logger

from .events import Message, Reaction


class EventBus:
    """Two-queue bus: inbound messages and inbound reactions.

    Provider callbacks publish into it; the dispatcher pulls from it.
    """

    MAX_QUEUE_SIZE = 1000  # Prevent unbounded queue growth

    def __init__(self) -> None:
        self._messages: asyncio.Queue[Message] = asyncio.Queue(
            maxsize=self.MAX_QUEUE_SIZE
        )
        self._reactions: asyncio.Queue[Reaction] = asyncio.Queue(
            maxsize=self.MAX_QUEUE_SIZE
        )

    async def publish_message(self, message: Message) -> bool:
        """Publish an inbound message. Returns False if queue is full."""
        if self._messages.full():
            logger.error(f"Message queue full! Dropping message {message.id}")
            return False
        logger.debug(
            f"Message {message.id} (reply to {message.referenced_id or '-'}): "
            f"{message.content[:80]}"
        )
        await self._messages.put(message)
        return True

    async def publish_reaction(self, reaction: Reaction) -> bool:
        """Publish an inbound reaction. Returns False if queue is full."""
        if self._reactions.full():
            logger.error(
                f"Reaction queue full! Dropping reaction on {reaction.message_id}"
            )
            return False
        logger.debug(f"Reaction on {reaction.message_id}: {reaction.content}")
        await self._reactions.put(reaction)
        return True

    async def next_message(self) -> Message:
        """Wait for the next inbound message."""
        return await self._messages.get()

    async def next_reaction(self) -> Reaction:
        """Wait for the next inbound reaction."""
        return await self._reactions.get()

    @property
    def pending(self) -> int:
        """Number of events waiting to be consumed."""
        return self._messages.qsize() + self._reactions.qsize()
