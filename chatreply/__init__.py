"""chatreply - relay lines to a chat and collect the replies."""

__version__ = "0.3.0"
