"""chatreply CLI entry point."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import NoReturn, Optional

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from .config.schema import DEFAULT_WATCH_EMOJI, RelayOptions, UNBOUNDED
from .errors import ChatReplyError

app = typer.Typer(
    name="chatreply",
    add_completion=False,
    help="Send lines from stdin to a chat and print the replies they get.",
)

console = Console()
err_console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from . import __version__

        console.print(f"chatreply v{__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool) -> None:
    """Log to stderr; only warnings and errors unless verbose."""
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


def _fail(message: str) -> NoReturn:
    err_console.print(f"[red]{escape(message)}[/red]", highlight=False, soft_wrap=True)
    raise typer.Exit(1)


@app.command()
def main(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-f",
        help="Config .toml file [default: $XDG_CONFIG_HOME/chatreply/conf.toml]",
    ),
    separator: str = typer.Option(
        ":", "--separator", "-s", help="Separator between message and reply."
    ),
    msg_sep: str = typer.Option("\n", "--msg-sep", help="Separator between messages."),
    out_sep: str = typer.Option(
        "\n", "--out-sep", help="Separator between output messages."
    ),
    watch_emoji: str = typer.Option(
        DEFAULT_WATCH_EMOJI,
        "--watch-emoji",
        help="Emoji marking a message as watched for a reply.",
    ),
    skip_replies: bool = typer.Option(
        False, "--skip-replies", help="Do not wait for replies, just send the messages."
    ),
    replies: int = typer.Option(
        1,
        "--replies",
        "-n",
        help=f"Replies to collect per message ({UNBOUNDED} waits until interrupted).",
    ),
    keep_trailing: bool = typer.Option(
        False,
        "--keep-trailing",
        help="Also send input after the last separator.",
    ),
    as_text: bool = typer.Option(
        False, "--as-text", help="Send file paths as text instead of uploading them."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Send each line from stdin and print `line<sep>reply` as replies arrive."""
    from .config.loader import load_config
    from .providers.registry import create_provider
    from .relay.reader import read_lines
    from .relay.runner import run_relay

    _setup_logging(verbose)

    try:
        options = RelayOptions(
            separator=separator,
            msg_separator=msg_sep,
            out_separator=out_sep,
            watch_emoji=watch_emoji,
            replies=replies,
            skip_replies=skip_replies,
            keep_trailing=keep_trailing,
            as_text=as_text,
        )
    except ValidationError as e:
        _fail(f"invalid options: {e.errors()[0]['msg']}")

    try:
        config = load_config(config_path)
        provider = create_provider(config)
    except ChatReplyError as e:
        _fail(f"error loading configuration: {e}")

    lines = read_lines(sys.stdin.buffer, options.msg_separator, options.keep_trailing)
    try:
        asyncio.run(run_relay(provider, lines, options, sys.stdout))
    except ChatReplyError as e:
        _fail(str(e))
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    app()
