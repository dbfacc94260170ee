"""Event dispatcher: matches replies and reactions to outstanding messages."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, TextIO

from loguru import logger

from ..bus.events import Message, Reaction
from ..config.schema import RelayOptions
from ..providers.base import MsgProvider
from .table import CorrelationTable


@dataclass
class Reply:
    """A response to a relayed message, from either a reply or a reaction."""

    referenced_id: str  # id of the message responded to
    content: str

    @classmethod
    def from_message(cls, message: Message) -> Reply:
        return cls(referenced_id=message.referenced_id, content=message.content)

    @classmethod
    def from_reaction(cls, reaction: Reaction) -> Reply:
        return cls(referenced_id=reaction.message_id, content=reaction.content)


def format_reply(content: str, response: str, separator: str, out_separator: str) -> str:
    """Build one output line for a matched response."""
    return f"{content}{separator}{response}{out_separator}"


_SHUTDOWN = "shutdown"


class Dispatcher:
    """Owns the correlation table while waiting for responses.

    Waits on inbound messages, inbound reactions and the shutdown event,
    servicing one ready source at a time. Returns when every record is
    resolved or shutdown is requested; remaining records are left in the
    table for cleanup.
    """

    def __init__(
        self,
        provider: MsgProvider,
        table: CorrelationTable,
        options: RelayOptions,
        sink: TextIO,
        shutdown: asyncio.Event,
    ) -> None:
        self._provider = provider
        self._table = table
        self._options = options
        self._sink = sink
        self._shutdown = shutdown
        self.emitted = 0

    async def run(self) -> None:
        """Dispatch events until the table drains or shutdown is requested."""
        sources: dict[str, Callable[[], Awaitable[Any]]] = {
            "message": self._provider.events.next_message,
            "reaction": self._provider.events.next_reaction,
            _SHUTDOWN: self._shutdown.wait,
        }
        waiters: dict[str, asyncio.Task] = {}

        try:
            while len(self._table) > 0:
                # Keep unserviced waiters across iterations so no event is lost
                for name, source in sources.items():
                    if name not in waiters:
                        waiters[name] = asyncio.create_task(source())

                done, _ = await asyncio.wait(
                    waiters.values(), return_when=asyncio.FIRST_COMPLETED
                )
                name = next(n for n, task in waiters.items() if task in done)
                result = waiters.pop(name).result()

                if name == _SHUTDOWN:
                    logger.info("Shutting down...")
                    break
                if name == "message":
                    await self._on_message(result)
                else:
                    await self._on_reaction(result)
        finally:
            for task in waiters.values():
                task.cancel()
            await asyncio.gather(*waiters.values(), return_exceptions=True)

        if len(self._table) == 0:
            logger.debug("All messages resolved")

    async def _on_message(self, message: Message) -> None:
        if not message.is_reply:
            logger.info(
                f"Message {message.id} does not reference another message, skipping"
            )
            return
        await self.handle_reply(Reply.from_message(message))

    async def _on_reaction(self, reaction: Reaction) -> None:
        await self.handle_reply(Reply.from_reaction(reaction))

    async def handle_reply(self, reply: Reply) -> bool:
        """Match a response against the table.

        Returns False if the response does not reference a tracked message.
        """
        logger.debug(f"Handling reply to {reply.referenced_id}: {reply.content}")
        if not reply.referenced_id:
            logger.info("Reply does not reference another message, skipping")
            return False

        record = self._table.lookup(reply.referenced_id)
        if record is None:
            logger.info(
                f"Message {reply.referenced_id} not found in unresolved messages, skipping"
            )
            return False

        count = self._table.record_response(record.id)
        self._emit(record.content, reply.content)

        if self._options.unbounded or count < self._options.replies:
            return True

        self._table.resolve(record.id)
        logger.debug(f"Message {record.id} resolved after {count} replies")
        try:
            await self._provider.remove_reaction(record.id, self._options.watch_emoji)
        except Exception as e:
            logger.info(f"Error removing watch reaction from {record.id}: {e}")
        return True

    def _emit(self, content: str, response: str) -> None:
        line = format_reply(
            content, response, self._options.separator, self._options.out_separator
        )
        self._sink.write(line)
        self._sink.flush()
        self.emitted += 1
