"""Cursor encoding and decoding for pagination.

Cursors are opaque strings that encode the position of an edge in a
result set. They carry the values of the active sort's unique fields for
that record, which is exactly what a sort strategy needs to seek past it.

The cursor format is:
1. JSON object of field name to scalar value (sorted keys, compact)
2. Base64 URL-safe encoded for use in URLs

Example cursor payload:
    {"created_at":"2025-01-15T10:30:00","id":"abc-123"}

Decoding is lenient: anything that is not a base64 JSON object of scalars
decodes to ``None`` ("no cursor") instead of raising.
"""

from __future__ import annotations

import base64
import binascii
import json
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr, ValidationError

from graphql_connection.infra.logging import get_lazy_logger

logger = get_lazy_logger(__name__)

CursorScalar = StrictBool | StrictInt | StrictFloat | StrictStr | None


class CursorData(BaseModel):
    """Decoded cursor payload.

    Attributes:
        values: Mapping of sort field names to their scalar values
    """

    values: dict[str, CursorScalar] = Field(
        default_factory=dict,
        description="Sort field values for seeking",
    )

    model_config = {"frozen": True}

    def covers(self, fields: Iterable[str]) -> bool:
        """Whether every given field is present in the cursor."""
        return all(field in self.values for field in fields)


def read_field(record: Any, field: str) -> Any:
    """Read a field from a mapping or an attribute-bearing record."""
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


class CursorCodec:
    """Encode and decode pagination cursors.

    Usage:
        # Encoding
        cursor = CursorCodec.encode(CursorData(values={"id": 7}))

        # Decoding
        data = CursorCodec.decode(cursor)
        print(data.values)  # {"id": 7}

        # Garbage decodes to None
        assert CursorCodec.decode("not a cursor") is None
    """

    @staticmethod
    def encode(data: CursorData) -> str:
        """Encode cursor data to an opaque string.

        Args:
            data: Cursor data with sort field values

        Returns:
            URL-safe base64 encoded string
        """
        json_str = json.dumps(data.values, sort_keys=True, separators=(",", ":"))
        return base64.urlsafe_b64encode(json_str.encode()).decode()

    @staticmethod
    def decode(cursor: str | None) -> CursorData | None:
        """Decode a cursor string to cursor data.

        Args:
            cursor: URL-safe base64 encoded cursor string

        Returns:
            CursorData, or None when the cursor is empty or malformed
        """
        if not cursor:
            return None
        try:
            json_str = base64.urlsafe_b64decode(cursor.encode()).decode()
            payload = json.loads(json_str)
            if not isinstance(payload, dict):
                raise ValueError("cursor payload is not an object")
            return CursorData(values=payload)
        except (binascii.Error, UnicodeError, ValueError, ValidationError) as exc:
            logger.debug(lambda: f"Ignoring malformed cursor {cursor!r}: {exc}")
            return None

    @staticmethod
    def _serialize_value(value: Any) -> Any:
        """Serialize a value to a JSON-compatible scalar.

        Handles datetime, date, UUID and Decimal.
        """
        if isinstance(value, datetime | date):
            return value.isoformat()
        if isinstance(value, UUID | Decimal):
            return str(value)
        return value

    @staticmethod
    def from_record(record: Any, fields: Iterable[str]) -> str:
        """Create a cursor from a record.

        Args:
            record: Mapping, ORM instance, or any object with the fields as attributes
            fields: Field names to include in the cursor

        Returns:
            Encoded cursor string

        Example:
            cursor = CursorCodec.from_record(product, ["price", "id"])
        """
        values = {
            field: CursorCodec._serialize_value(read_field(record, field))
            for field in fields
        }
        return CursorCodec.encode(CursorData(values=values))


__all__ = ["CursorCodec", "CursorData", "CursorScalar", "read_field"]
