"""Split a byte stream on an arbitrary separator."""

from __future__ import annotations

from typing import BinaryIO, Iterator

from loguru import logger


def split_by_separator(
    stream: BinaryIO,
    separator: bytes,
    keep_trailing: bool = False,
    block_size: int = 4096,
) -> Iterator[bytes]:
    """Lazily yield the chunks of ``stream`` delimited by ``separator``.

    A chunk is everything strictly between two separators (or between the
    start of the stream and the first one). Bytes after the last separator
    are dropped unless ``keep_trailing`` is set.
    """
    if not separator:
        raise ValueError("separator must not be empty")

    # read1 returns whatever is available instead of waiting for a full block
    read = getattr(stream, "read1", stream.read)
    buffer = b""
    while True:
        block = read(block_size)
        if not block:
            break
        # A separator may straddle the previous block
        start = max(0, len(buffer) - len(separator) + 1)
        buffer += block
        while True:
            idx = buffer.find(separator, start)
            if idx < 0:
                break
            yield buffer[:idx]
            buffer = buffer[idx + len(separator) :]
            start = 0

    if buffer:
        if keep_trailing:
            yield buffer
        else:
            logger.debug(f"Dropping unterminated trailing input ({len(buffer)} bytes)")


def read_lines(
    stream: BinaryIO, separator: str, keep_trailing: bool = False
) -> Iterator[str]:
    """Decode chunks as text, skipping blank ones."""
    for chunk in split_by_separator(stream, separator.encode("utf-8"), keep_trailing):
        line = chunk.decode("utf-8", errors="replace")
        if not line.strip():
            continue
        yield line
