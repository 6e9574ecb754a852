"""Keyset sort strategy for SQLAlchemy columns.

``ColumnSortStrategy`` implements the seek/keyset method on SQL sources:
instead of OFFSET it narrows the WHERE clause to rows past the cursor.

How it works:
    For ORDER BY created_at DESC, id ASC with cursor at (t1, id1), ``after``:
    WHERE (created_at < t1) OR (created_at IS NULL)
       OR (created_at = t1 AND id > id1)

NULL is ordered below every other value on all dialects, matching
``MemoryCollection``.

The filter handed between the resolver and ``SelectSource`` is a tuple of
boolean clauses; narrowing appends a clause and never mutates the input.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Literal
from uuid import UUID

from sqlalchemy import and_, or_

from graphql_connection.core.exceptions import ConnectionConfigurationError
from graphql_connection.core.pagination.sorting import seeks_upward

if TYPE_CHECKING:
    from sqlalchemy.orm import InstrumentedAttribute
    from sqlalchemy.sql.elements import ColumnElement

    from graphql_connection.core.pagination.cursor import CursorData


class ColumnSortStrategy:
    """Named keyset ordering over SQLAlchemy column attributes.

    Example:
        from graphql_connection.core.pagination.filters import ColumnSortStrategy

        newest_first = ColumnSortStrategy(
            "CREATED_DESC",
            [(Product.created_at, "desc"), (Product.id, "asc")],
        )
        clauses = newest_first.cursor_to_filter(cursor_data, ())
        stmt = select(Product).where(*clauses).order_by(*newest_first.sort_value)

    Attributes:
        name: Sort name exposed to clients
        order_by: List of (column, direction) tuples; together they must be unique
    """

    def __init__(
        self,
        name: str,
        order_by: Iterable[tuple[InstrumentedAttribute[Any], Literal["asc", "desc"]]],
        *,
        description: str | None = None,
    ) -> None:
        self.name = name
        self.order_by = list(order_by)
        self.description = description
        if not self.order_by:
            raise ConnectionConfigurationError(
                detail=f"Sort '{name}' must declare at least one column",
                extra={"sort": name},
            )
        for column, direction in self.order_by:
            if direction not in ("asc", "desc"):
                raise ConnectionConfigurationError(
                    detail=f"Sort '{name}' has invalid direction {direction!r} for '{column.key}'",
                    extra={"sort": name, "field": column.key},
                )

    def __repr__(self) -> str:
        keys = ", ".join(f"{column.key} {direction}" for column, direction in self.order_by)
        return f"ColumnSortStrategy({self.name!r}, [{keys}])"

    @property
    def unique_fields(self) -> tuple[str, ...]:
        """Attribute names of the sort columns."""
        return tuple(column.key for column, _ in self.order_by)

    @property
    def sort_value(self) -> list[ColumnElement[Any]]:
        """ORDER BY expressions for this sort; NULL sorts below every value."""
        return [
            column.desc().nulls_last() if direction == "desc" else column.asc().nulls_first()
            for column, direction in self.order_by
        ]

    def cursor_to_filter(
        self,
        cursor_data: CursorData,
        existing_filter: Sequence[ColumnElement[bool]] | None,
        *,
        before: bool = False,
    ) -> tuple[ColumnElement[bool], ...]:
        """Return the existing clauses plus a seek condition past the cursor.

        Builds a compound OR condition for multi-column sorting.
        For columns (a, b, c) with cursor values (v1, v2, v3):
            (a op v1) OR
            (a = v1 AND b op v2) OR
            (a = v1 AND b = v2 AND c op v3)

        Where 'op' is > or < depending on sort direction and pagination direction.
        """
        clauses = tuple(existing_filter or ())
        cursor_values = cursor_data.values
        or_conditions = []

        for i, (column, direction) in enumerate(self.order_by):
            cursor_value = cursor_values.get(column.key)
            upward = seeks_upward(direction, before)

            eq_conditions = []
            for prev_column, _ in self.order_by[:i]:
                prev_value = cursor_values.get(prev_column.key)
                if prev_value is None:
                    eq_conditions.append(prev_column.is_(None))
                else:
                    eq_conditions.append(
                        prev_column == self._convert_cursor_value(prev_column, prev_value)
                    )

            # NULL sorts lowest (see sort_value), so it follows every value downwards
            if cursor_value is None:
                compare_conds = [column.is_not(None)] if upward else []
            else:
                cursor_value = self._convert_cursor_value(column, cursor_value)
                if upward:
                    compare_conds = [column > cursor_value]
                else:
                    compare_conds = [column < cursor_value, column.is_(None)]

            for compare_cond in compare_conds:
                if eq_conditions:
                    or_conditions.append(and_(*eq_conditions, compare_cond))
                else:
                    or_conditions.append(compare_cond)

        if not or_conditions:
            return clauses
        return (*clauses, or_(*or_conditions))

    @staticmethod
    def _convert_cursor_value(
        column: InstrumentedAttribute[Any],
        value: Any,
    ) -> Any:
        """Convert cursor value back to the column's Python type.

        Handles datetime, date, Decimal and UUID strings that were serialized
        when creating the cursor.
        """
        if not isinstance(value, str):
            return value

        column_type = getattr(column.type, "impl", column.type)
        type_name = type(column_type).__name__

        if type_name in ("DateTime", "TIMESTAMP"):
            return datetime.fromisoformat(value)
        if type_name == "Date":
            return date.fromisoformat(value)
        if type_name in ("Numeric", "DECIMAL"):
            return Decimal(value)
        if type_name in ("Uuid", "UUID"):
            return UUID(value)
        return value


__all__ = ["ColumnSortStrategy"]
