"""Correlation table of sent messages still waiting for a response."""

from __future__ import annotations

from dataclasses import dataclass

from ..errors import DuplicateRecordError


@dataclass
class OutboundRecord:
    """A relayed line awaiting replies."""

    id: str
    content: str
    replies_collected: int = 0


class CorrelationTable:
    """Maps provider message ids to outstanding records.

    A record is present exactly while its watch reaction is attached. Only
    the dispatcher mutates the table once the send phase is over, so it
    needs no locking.
    """

    def __init__(self) -> None:
        self._records: dict[str, OutboundRecord] = {}

    def register(self, message_id: str, content: str) -> OutboundRecord:
        if message_id in self._records:
            raise DuplicateRecordError(f"message {message_id} already registered")
        record = OutboundRecord(id=message_id, content=content)
        self._records[message_id] = record
        return record

    def lookup(self, message_id: str) -> OutboundRecord | None:
        return self._records.get(message_id)

    def record_response(self, message_id: str) -> int | None:
        """Count one more response; None if the id is not tracked."""
        record = self._records.get(message_id)
        if record is None:
            return None
        record.replies_collected += 1
        return record.replies_collected

    def resolve(self, message_id: str) -> OutboundRecord | None:
        return self._records.pop(message_id, None)

    def ids(self) -> list[str]:
        """Snapshot of tracked ids, safe to iterate while resolving."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, message_id: object) -> bool:
        return message_id in self._records
