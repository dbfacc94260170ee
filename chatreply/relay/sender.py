"""Send phase: relay each input line and mark it as watched."""

from __future__ import annotations

import asyncio
from typing import Iterable

from loguru import logger

from ..config.schema import RelayOptions
from ..errors import ProviderError, SendError
from ..providers.base import MsgProvider
from .table import CorrelationTable


async def send_lines(
    provider: MsgProvider,
    lines: Iterable[str],
    table: CorrelationTable,
    options: RelayOptions,
    shutdown: asyncio.Event,
) -> int:
    """Send every line, registering it in ``table`` unless replies are skipped.

    Lines are pulled in a worker thread since the reader blocks on input.
    Stops early once ``shutdown`` is set.

    Raises:
        SendError: If a line could not be sent.
        ProviderError: If the watch reaction could not be attached.
    """
    it = iter(lines)
    sent = 0
    while not shutdown.is_set():
        line = await asyncio.to_thread(next, it, None)
        if line is None:
            break
        if shutdown.is_set():
            logger.info("Shutdown requested, not sending remaining input")
            break

        try:
            message_id = await provider.send(line, as_text=options.as_text)
        except Exception as e:
            raise SendError(f"error sending message: {e}") from e
        sent += 1

        if options.skip_replies:
            continue

        table.register(message_id, line)
        try:
            await provider.add_reaction(message_id, options.watch_emoji)
        except Exception as e:
            # No reaction attached, so nothing for cleanup to remove
            table.resolve(message_id)
            raise ProviderError(f"error adding reaction: {e}") from e
        logger.debug(f"Watching message {message_id}")

    return sent
