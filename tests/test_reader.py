"""Tests for splitting input on arbitrary separators."""

from __future__ import annotations

import io
import os
import threading

import pytest

from chatreply.relay.reader import read_lines, split_by_separator


def split(data: bytes, sep: bytes, **kwargs) -> list[bytes]:
    return list(split_by_separator(io.BytesIO(data), sep, **kwargs))


class TestSplitBySeparator:
    """Test chunking of a byte stream."""

    def test_single_byte_separator(self) -> None:
        assert split(b"Hello,World,Test,", b",") == [b"Hello", b"World", b"Test"]

    def test_trailing_fragment_dropped_by_default(self) -> None:
        """Bytes after the last separator are not a chunk."""
        assert split(b"Hello,World,Test", b",") == [b"Hello", b"World"]

    def test_trailing_fragment_kept_when_requested(self) -> None:
        assert split(b"Hello,World,Test", b",", keep_trailing=True) == [
            b"Hello",
            b"World",
            b"Test",
        ]

    def test_multi_byte_separator(self) -> None:
        assert split(b"a<>b<>c<>", b"<>") == [b"a", b"b", b"c"]

    def test_separator_straddling_blocks(self) -> None:
        """A separator split across two reads is still found."""
        data = b"first--second--"
        assert split(data, b"--", block_size=6) == [b"first", b"second"]

    def test_adjacent_separators_yield_empty_chunk(self) -> None:
        assert split(b"a,,b,", b",") == [b"a", b"", b"b"]

    def test_empty_stream(self) -> None:
        assert split(b"", b"\n") == []
        assert split(b"", b"\n", keep_trailing=True) == []

    def test_partial_separator_at_end(self) -> None:
        assert split(b"a--b-", b"--", keep_trailing=True) == [b"a", b"b-"]

    def test_join_then_split(self) -> None:
        chunks = [b"one", b"two words", b"3"]
        assert split(b"|~".join(chunks) + b"|~", b"|~") == chunks

    def test_empty_separator_rejected(self) -> None:
        with pytest.raises(ValueError):
            split(b"abc", b"")

    def test_lazy(self) -> None:
        """Chunks are produced before the stream is exhausted."""
        stream = io.BytesIO(b"a\nb\n")
        chunks = split_by_separator(stream, b"\n", block_size=2)
        assert next(chunks) == b"a"
        assert stream.tell() < len(b"a\nb\n")

    def test_yields_before_pipe_closes(self) -> None:
        """A line is relayed while the producer keeps its end open."""
        r, w = os.pipe()
        got: list[str] = []
        with os.fdopen(r, "rb") as stream:
            reader = threading.Thread(
                target=lambda: got.append(next(read_lines(stream, "\n"))),
                daemon=True,
            )
            try:
                os.write(w, b"hello\n")
                reader.start()
                reader.join(2.0)
                assert got == ["hello"]
            finally:
                os.close(w)
                reader.join(2.0)

    def test_separator_split_across_tiny_blocks(self) -> None:
        data = b"ab<sep>c<sep>d<s<sep>"
        assert split(data, b"<sep>", block_size=1) == [b"ab", b"c", b"d<s"]
        assert split(data, b"<sep>", block_size=3) == [b"ab", b"c", b"d<s"]


class TestReadLines:
    """Test decoding and blank-line skipping."""

    def test_skips_blank_chunks(self) -> None:
        stream = io.BytesIO(b"hello\n\n   \nworld\n")
        assert list(read_lines(stream, "\n")) == ["hello", "world"]

    def test_keeps_surrounding_whitespace(self) -> None:
        stream = io.BytesIO(b"  padded  \n")
        assert list(read_lines(stream, "\n")) == ["  padded  "]

    def test_unicode_separator(self) -> None:
        stream = io.BytesIO("a🔥b🔥".encode())
        assert list(read_lines(stream, "🔥")) == ["a", "b"]

    def test_invalid_utf8_replaced(self) -> None:
        stream = io.BytesIO(b"caf\xff\n")
        assert list(read_lines(stream, "\n")) == ["caf�"]
