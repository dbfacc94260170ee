"""Abstract base class for chat providers."""

from __future__ import annotations

import os
from abc import ABC, abstractmethod

from ..bus.queue import EventBus
from ..errors import UnsupportedOperationError


def is_file_reference(content: str) -> bool:
    """True if content names an existing regular file."""
    try:
        return os.path.isfile(content)
    except (OSError, ValueError):
        return False


class MsgProvider(ABC):
    """Base class for all chat backends.

    Implementations publish inbound messages and reactions that were not
    authored by the bot itself into ``events``.
    """

    def __init__(self) -> None:
        self.events = EventBus()

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name (e.g., 'telegram', 'discord')."""
        ...

    @abstractmethod
    async def initialize(self) -> None:
        """Connect and begin listening. Must run before any other call."""
        ...

    @abstractmethod
    async def shutdown(self) -> None:
        """Disconnect and release resources."""
        ...

    @abstractmethod
    async def send(self, content: str, as_text: bool = False) -> str:
        """Send content and return the id of the sent message.

        Unless ``as_text`` is set, content naming an existing file is
        uploaded as an attachment.
        """
        ...

    @abstractmethod
    async def add_reaction(self, message_id: str, emoji: str) -> None:
        """Attach an emoji reaction to a sent message."""
        ...

    async def remove_reaction(self, message_id: str, emoji: str) -> None:
        """Remove the bot's emoji reaction from a sent message."""
        raise UnsupportedOperationError(f"{self.name} cannot remove reactions")
