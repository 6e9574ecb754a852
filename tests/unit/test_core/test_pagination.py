"""Unit tests for cursors and connection schemas."""
from __future__ import annotations

import base64
import json
from datetime import UTC, datetime
from decimal import Decimal
from uuid import UUID

import pytest
from pydantic import ValidationError

from graphql_connection.core.pagination.cursor import CursorCodec, CursorData, read_field
from graphql_connection.core.pagination.schemas import (
    Connection,
    CursorPage,
    Edge,
    PageInfo,
    empty_connection,
)


# ──────────────────────────────────────────────────────────────
# Test CursorData and CursorCodec
# ──────────────────────────────────────────────────────────────


class TestCursorData:
    """Tests for CursorData model."""

    def test_cursor_data_creation(self):
        """CursorData should store scalar values."""
        cursor = CursorData(values={"id": "123", "rank": 4, "score": 1.5, "active": True, "note": None})

        assert cursor.values["id"] == "123"
        assert cursor.values["active"] is True
        assert cursor.values["note"] is None

    def test_cursor_data_rejects_nested_values(self):
        """Only scalars are valid cursor values."""
        with pytest.raises(ValidationError):
            CursorData(values={"id": [1, 2]})

    def test_cursor_data_does_not_coerce(self):
        """Values keep their exact JSON type."""
        cursor = CursorData(values={"id": 1, "flag": False})

        assert type(cursor.values["id"]) is int
        assert type(cursor.values["flag"]) is bool

    def test_covers(self):
        """covers() checks that every field is present, even when null."""
        cursor = CursorData(values={"price": None, "id": 3})

        assert cursor.covers(["price", "id"])
        assert not cursor.covers(["created_at", "id"])

    def test_cursor_data_is_frozen(self):
        cursor = CursorData(values={"id": 1})

        with pytest.raises(ValidationError):
            cursor.values = {}


class TestCursorCodec:
    """Tests for CursorCodec encode/decode."""

    def test_encode_cursor(self):
        """CursorCodec should encode values as base64 JSON with sorted keys."""
        encoded = CursorCodec.encode(CursorData(values={"id": "test-123", "score": 42}))

        decoded_json = base64.urlsafe_b64decode(encoded.encode()).decode()
        assert decoded_json == '{"id":"test-123","score":42}'

    def test_encode_is_deterministic(self):
        """Field order does not change the encoded cursor."""
        first = CursorCodec.encode(CursorData(values={"a": 1, "b": 2}))
        second = CursorCodec.encode(CursorData(values={"b": 2, "a": 1}))

        assert first == second

    def test_encode_decode_roundtrip(self):
        """decode(encode(d)) == d for scalar payloads."""
        original = CursorData(
            values={
                "uuid": "550e8400-e29b-41d4-a716-446655440000",
                "priority": 5,
                "ratio": 0.25,
                "done": False,
                "deleted_at": None,
            }
        )

        assert CursorCodec.decode(CursorCodec.encode(original)) == original

    @pytest.mark.parametrize(
        "cursor",
        [
            None,
            "",
            "not-valid-base64!!!",
            base64.urlsafe_b64encode(b"not valid json").decode(),
            base64.urlsafe_b64encode(b"[1, 2, 3]").decode(),
            base64.urlsafe_b64encode(b'"just a string"').decode(),
            base64.urlsafe_b64encode(b'{"id": {"nested": true}}').decode(),
            base64.urlsafe_b64encode(b"\xff\xfe\xfd").decode(),
        ],
    )
    def test_decode_malformed_cursor_returns_none(self, cursor):
        """Malformed cursors decode to None instead of raising."""
        assert CursorCodec.decode(cursor) is None

    def test_from_record_mapping(self):
        """from_record projects only the requested fields."""
        cursor = CursorCodec.from_record({"id": 7, "name": "Lamp", "price": 30}, ["price", "id"])

        assert CursorCodec.decode(cursor).values == {"price": 30, "id": 7}

    def test_from_record_object(self):
        """from_record reads attributes from non-mapping records."""

        class MockRow:
            id = "row-123"
            created_at = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)

        cursor = CursorCodec.from_record(MockRow(), ["created_at", "id"])

        decoded = CursorCodec.decode(cursor)
        assert decoded.values == {"created_at": "2025-01-01T12:00:00+00:00", "id": "row-123"}

    def test_from_record_serializes_uuid_and_decimal(self):
        record = {"id": UUID("550e8400-e29b-41d4-a716-446655440000"), "amount": Decimal("9.50")}

        decoded = CursorCodec.decode(CursorCodec.from_record(record, ["id", "amount"]))

        assert decoded.values == {"id": "550e8400-e29b-41d4-a716-446655440000", "amount": "9.50"}

    def test_from_record_missing_field_is_null(self):
        decoded = CursorCodec.decode(CursorCodec.from_record({"id": 1}, ["id", "price"]))

        assert decoded.values == {"id": 1, "price": None}

    def test_read_field(self):
        class Row:
            name = "attr"

        assert read_field({"name": "key"}, "name") == "key"
        assert read_field(Row(), "name") == "attr"
        assert read_field(Row(), "missing") is None


# ──────────────────────────────────────────────────────────────
# Test Connection Schemas
# ──────────────────────────────────────────────────────────────


class TestPageInfo:
    """Tests for PageInfo schema."""

    def test_page_info_defaults_to_zero_value(self):
        """PageInfo defaults to empty cursors and false flags."""
        page_info = PageInfo()

        assert page_info.start_cursor == ""
        assert page_info.end_cursor == ""
        assert page_info.has_previous_page is False
        assert page_info.has_next_page is False

    def test_page_info_creation(self):
        page_info = PageInfo(
            start_cursor="cursor-start",
            end_cursor="cursor-end",
            has_previous_page=True,
            has_next_page=True,
        )

        assert page_info.start_cursor == "cursor-start"
        assert page_info.has_next_page is True


class TestConnection:
    """Tests for Connection schema."""

    def test_connection_nodes(self):
        """nodes returns the records without edge wrappers."""
        connection = Connection(
            edges=[Edge(cursor="c1", node={"id": 1}), Edge(cursor="c2", node={"id": 2})],
            page_info=PageInfo(start_cursor="c1", end_cursor="c2"),
        )

        assert connection.nodes == [{"id": 1}, {"id": 2}]

    def test_count_only_dumped_when_set(self):
        """count is absent from exclude_unset dumps unless it was provided."""
        without_count = Connection(edges=[], page_info=PageInfo())
        with_count = Connection(edges=[], page_info=PageInfo(), count=0)

        assert "count" not in without_count.model_dump(exclude_unset=True)
        assert with_count.model_dump(exclude_unset=True)["count"] == 0

    def test_empty_connection(self):
        connection = empty_connection()

        assert connection.edges == []
        assert connection.page_info == PageInfo()
        assert connection.count is None

    def test_to_cursor_page(self):
        """to_cursor_page exposes next/prev cursors only when pages exist."""
        connection = Connection(
            edges=[Edge(cursor="c1", node="a"), Edge(cursor="c2", node="b")],
            page_info=PageInfo(start_cursor="c1", end_cursor="c2", has_next_page=True),
            count=10,
        )

        page = connection.to_cursor_page()

        assert isinstance(page, CursorPage)
        assert page.items == ["a", "b"]
        assert page.next_cursor == "c2"
        assert page.prev_cursor is None
        assert page.has_more is True
        assert page.total_count == 10

    def test_connection_is_frozen(self):
        connection = empty_connection()

        with pytest.raises(ValidationError):
            connection.count = 5

    def test_json_serialization(self):
        connection = Connection(
            edges=[Edge(cursor="c1", node={"id": 1})],
            page_info=PageInfo(start_cursor="c1", end_cursor="c1"),
        )

        payload = json.loads(connection.model_dump_json(exclude_unset=True))

        assert payload["edges"][0] == {"cursor": "c1", "node": {"id": 1}}
        assert payload["page_info"]["start_cursor"] == "c1"
