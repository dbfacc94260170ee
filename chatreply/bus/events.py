"""Inbound event types published by chat providers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Message:
    """A message received from the chat, possibly a reply."""

    id: str
    chat_id: str
    content: str
    referenced_id: str = ""  # empty when not a reply
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_reply(self) -> bool:
        return bool(self.referenced_id)


@dataclass
class Reaction:
    """An emoji reaction added to a message."""

    message_id: str
    chat_id: str
    content: str  # emoji, or custom emoji id
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
