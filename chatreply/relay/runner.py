"""Runs a full relay: send, wait for replies, clean up."""

from __future__ import annotations

import asyncio
import signal
import sys
from typing import Iterable, TextIO

from loguru import logger

from ..config.schema import RelayOptions
from ..providers.base import MsgProvider
from .cleanup import remove_watch_markers
from .dispatcher import Dispatcher
from .sender import send_lines
from .table import CorrelationTable


SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def _install_signal_handlers(shutdown: asyncio.Event) -> list[signal.Signals]:
    """Set ``shutdown`` on SIGINT/SIGTERM. Returns the signals handled."""
    loop = asyncio.get_running_loop()
    installed = []
    for sig in SHUTDOWN_SIGNALS:
        try:
            loop.add_signal_handler(sig, shutdown.set)
        except (NotImplementedError, RuntimeError):
            # Not supported on this platform/thread
            continue
        installed.append(sig)
    return installed


def _remove_signal_handlers(installed: list[signal.Signals]) -> None:
    loop = asyncio.get_running_loop()
    for sig in installed:
        loop.remove_signal_handler(sig)


async def run_relay(
    provider: MsgProvider,
    lines: Iterable[str],
    options: RelayOptions,
    sink: TextIO | None = None,
    shutdown: asyncio.Event | None = None,
) -> int:
    """Relay ``lines`` through ``provider`` and print matched responses.

    Watch reactions still attached when the relay ends, for whatever reason,
    are removed before the provider is shut down. Returns the number of
    lines sent.
    """
    sink = sink if sink is not None else sys.stdout
    shutdown = shutdown if shutdown is not None else asyncio.Event()
    table = CorrelationTable()

    installed = _install_signal_handlers(shutdown)
    try:
        await provider.initialize()
        try:
            sent = await send_lines(provider, lines, table, options, shutdown)
            logger.debug(f"Sent {sent} messages")

            if options.skip_replies:
                return sent

            logger.info("Bot is now running. Press CTRL-C to exit.")
            dispatcher = Dispatcher(provider, table, options, sink, shutdown)
            await dispatcher.run()
            return sent
        finally:
            await remove_watch_markers(provider, table, options.watch_emoji)
    finally:
        _remove_signal_handlers(installed)
        await provider.shutdown()
