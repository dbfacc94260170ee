"""Shared test fixtures."""

from __future__ import annotations

import asyncio
import io
from typing import Callable

import pytest

from chatreply.bus.events import Message, Reaction
from chatreply.errors import ProviderError
from chatreply.providers.base import MsgProvider


class FakeProvider(MsgProvider):
    """In-memory provider recording every call."""

    def __init__(self, ids: list[str] | None = None) -> None:
        super().__init__()
        self._ids = list(ids or [])
        self._next = 0
        self.initialized = False
        self.closed = False
        self.sent: list[str] = []
        self.reactions: dict[str, str] = {}
        self.removed: list[str] = []
        self.fail_send = False
        self.fail_add = False
        self.fail_remove: set[str] = set()
        # Called after each send, e.g. to deliver a signal mid-send
        self.on_send: Callable[[str], None] | None = None

    @property
    def name(self) -> str:
        return "fake"

    async def initialize(self) -> None:
        self.initialized = True

    async def shutdown(self) -> None:
        self.closed = True

    async def send(self, content: str, as_text: bool = False) -> str:
        if self.fail_send:
            raise ProviderError("send refused")
        if self._ids:
            message_id = self._ids.pop(0)
        else:
            self._next += 1
            message_id = f"m{self._next}"
        self.sent.append(content)
        if self.on_send:
            self.on_send(message_id)
        return message_id

    async def add_reaction(self, message_id: str, emoji: str) -> None:
        if self.fail_add:
            raise ProviderError("reaction refused")
        self.reactions[message_id] = emoji

    async def remove_reaction(self, message_id: str, emoji: str) -> None:
        if message_id in self.fail_remove:
            raise ProviderError("cannot remove reaction")
        self.reactions.pop(message_id, None)
        self.removed.append(message_id)

    async def react(self, message_id: str, emoji: str) -> None:
        """Simulate a user reacting to a message."""
        await self.events.publish_reaction(
            Reaction(message_id=message_id, chat_id="chat", content=emoji)
        )

    async def reply(self, message_id: str, text: str, own_id: str = "u1") -> None:
        """Simulate a user replying to a message."""
        await self.events.publish_message(
            Message(id=own_id, chat_id="chat", content=text, referenced_id=message_id)
        )


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll until predicate holds, failing after timeout."""

    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0.01)

    await asyncio.wait_for(_poll(), timeout)


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def sink() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def make_provider() -> Callable[..., FakeProvider]:
    return FakeProvider


@pytest.fixture
def eventually() -> Callable:
    return wait_until
