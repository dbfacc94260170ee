"""Exceptions raised by chatreply."""

from __future__ import annotations


class ChatReplyError(Exception):
    """Base class for all chatreply errors."""


class ConfigError(ChatReplyError):
    """Configuration is missing or invalid."""


class ProviderError(ChatReplyError):
    """A chat backend operation failed."""


class SendError(ProviderError):
    """An input line could not be sent."""


class UnsupportedOperationError(ProviderError):
    """The chat backend cannot perform the requested operation."""


class DuplicateRecordError(ChatReplyError):
    """A message id was registered twice in the correlation table."""
