"""Tests for the correlation table."""

from __future__ import annotations

import pytest

from chatreply.errors import DuplicateRecordError
from chatreply.relay.table import CorrelationTable


class TestCorrelationTable:
    """Test record lifecycle in the table."""

    def test_register_and_lookup(self) -> None:
        table = CorrelationTable()
        record = table.register("m1", "hello")
        assert record.replies_collected == 0
        assert table.lookup("m1") is record
        assert "m1" in table
        assert len(table) == 1

    def test_lookup_missing(self) -> None:
        assert CorrelationTable().lookup("nope") is None

    def test_duplicate_register_rejected(self) -> None:
        table = CorrelationTable()
        table.register("m1", "hello")
        with pytest.raises(DuplicateRecordError):
            table.register("m1", "again")
        assert table.lookup("m1").content == "hello"

    def test_record_response_counts_up(self) -> None:
        table = CorrelationTable()
        table.register("m1", "hello")
        assert table.record_response("m1") == 1
        assert table.record_response("m1") == 2
        assert table.lookup("m1").replies_collected == 2

    def test_record_response_missing_is_noop(self) -> None:
        table = CorrelationTable()
        table.register("m1", "hello")
        assert table.record_response("m2") is None
        assert table.lookup("m1").replies_collected == 0
        assert len(table) == 1

    def test_resolve_removes(self) -> None:
        table = CorrelationTable()
        table.register("m1", "hello")
        assert table.resolve("m1").content == "hello"
        assert "m1" not in table
        assert len(table) == 0
        assert table.resolve("m1") is None

    def test_ids_is_a_snapshot(self) -> None:
        table = CorrelationTable()
        table.register("m1", "a")
        table.register("m2", "b")
        for message_id in table.ids():
            table.resolve(message_id)
        assert len(table) == 0
