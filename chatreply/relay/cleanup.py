"""Best-effort removal of watch reactions left on unresolved messages."""

from __future__ import annotations

from loguru import logger

from ..providers.base import MsgProvider
from .table import CorrelationTable


async def remove_watch_markers(
    provider: MsgProvider, table: CorrelationTable, emoji: str
) -> dict[str, bool]:
    """Remove the watch reaction from every message still in ``table``.

    Every record is resolved whether or not removal worked. Returns a
    mapping of message id to removal success; provider failures are logged,
    never raised.
    """
    outcome: dict[str, bool] = {}
    for message_id in table.ids():
        try:
            await provider.remove_reaction(message_id, emoji)
            outcome[message_id] = True
        except Exception as e:
            logger.info(f"Failed to remove watch reaction from {message_id}: {e}")
            outcome[message_id] = False
        finally:
            table.resolve(message_id)

    if outcome:
        removed = sum(outcome.values())
        logger.debug(f"Cleanup removed {removed}/{len(outcome)} watch reactions")
    return outcome
