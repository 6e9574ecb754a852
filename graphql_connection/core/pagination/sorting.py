"""Sort strategies for connection pagination.

A sort strategy knows three things about one named ordering:

- ``unique_fields``: the fields that together totally order records. They
  are written into every edge cursor and always added to the projection.
- ``sort_value``: the sort descriptor handed to the data source.
- ``cursor_to_filter``: how to narrow a filter so that only records strictly
  after (or before) a decoded cursor remain.

``FieldSortStrategy`` works with document-style mapping filters
(``{"price": {"$gt": 10}}``); ``ColumnSortStrategy`` in
``graphql_connection.core.pagination.filters`` does the same for SQLAlchemy
columns. Strategies are grouped into an ordered ``SortRegistry``; the first
declared strategy is the default.

Example:
    sorts = SortRegistry(
        [
            FieldSortStrategy("ID_ASC", [("id", "asc")]),
            FieldSortStrategy("PRICE_DESC", [("price", "desc"), ("id", "asc")]),
        ]
    )
    strategy = sorts.resolve("PRICE_DESC")
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, Protocol, runtime_checkable

from graphql_connection.core.exceptions import ConnectionConfigurationError, UnknownSortError
from graphql_connection.core.pagination.cursor import CursorData

SortDirection = Literal["asc", "desc"]


@runtime_checkable
class SortStrategy(Protocol):
    """Capability every named sort must provide."""

    name: str

    @property
    def unique_fields(self) -> tuple[str, ...]: ...

    @property
    def sort_value(self) -> Any: ...

    def cursor_to_filter(
        self,
        cursor_data: CursorData,
        existing_filter: Any,
        *,
        before: bool = False,
    ) -> Any: ...


def seeks_upward(direction: SortDirection, before: bool) -> bool:
    """Whether moving past the cursor means larger values for one sort key."""
    upward = direction == "asc"
    if before:
        upward = not upward
    return upward


@dataclass(frozen=True, slots=True)
class FieldSortStrategy:
    """Keyset sort over mapping records with document-style filters.

    For keys ``(a asc, b desc)`` and cursor values ``(v1, v2)`` the ``after``
    seek filter is::

        {"$or": [{"a": {"$gt": v1}}, {"a": v1, "b": {"$lt": v2}}]}

    and the ``before`` filter flips every comparison.

    ``None`` sorts below every other value, as in ``MemoryCollection``. A
    seek towards smaller values therefore also admits ``None`` for that key,
    and a seek towards larger values from a ``None`` cursor value admits
    every non-null value.

    Attributes:
        name: Sort name exposed to clients (e.g. ``PRICE_DESC``)
        keys: Ordered (field, direction) pairs; together they must be unique
        description: Optional human-readable description
    """

    name: str
    keys: tuple[tuple[str, SortDirection], ...]
    description: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        keys = tuple((field_name, direction) for field_name, direction in self.keys)
        if not keys:
            raise ConnectionConfigurationError(
                detail=f"Sort '{self.name}' must declare at least one sort key",
                extra={"sort": self.name},
            )
        for field_name, direction in keys:
            if direction not in ("asc", "desc"):
                raise ConnectionConfigurationError(
                    detail=f"Sort '{self.name}' has invalid direction {direction!r} for '{field_name}'",
                    extra={"sort": self.name, "field": field_name},
                )
        object.__setattr__(self, "keys", keys)

    @property
    def unique_fields(self) -> tuple[str, ...]:
        return tuple(field_name for field_name, _ in self.keys)

    @property
    def sort_value(self) -> dict[str, int]:
        return {field_name: 1 if direction == "asc" else -1 for field_name, direction in self.keys}

    def cursor_to_filter(
        self,
        cursor_data: CursorData,
        existing_filter: Mapping[str, Any] | None,
        *,
        before: bool = False,
    ) -> dict[str, Any]:
        """Return a new filter restricted to records past the cursor.

        Args:
            cursor_data: Decoded cursor
            existing_filter: Current filter; never mutated
            before: Restrict to records before the cursor instead of after

        Returns:
            New filter mapping
        """
        values = cursor_data.values
        clauses: list[dict[str, Any]] = []
        for i, (field_name, direction) in enumerate(self.keys):
            value = values.get(field_name)
            prefix = {prev_field: values.get(prev_field) for prev_field, _ in self.keys[:i]}
            upward = seeks_upward(direction, before)
            if value is None:
                if upward:
                    clauses.append({**prefix, field_name: {"$ne": None}})
                continue
            clauses.append({**prefix, field_name: {"$gt" if upward else "$lt": value}})
            if not upward:
                clauses.append({**prefix, field_name: None})

        if not clauses:
            return dict(existing_filter or {})

        seek = clauses[0] if len(clauses) == 1 else {"$or": clauses}
        if not existing_filter:
            return seek
        return {"$and": [dict(existing_filter), seek]}


class SortRegistry(Mapping[str, SortStrategy]):
    """Ordered, immutable collection of named sort strategies.

    The first declared strategy is the default used when a request does not
    name one.
    """

    def __init__(self, strategies: Iterable[SortStrategy]) -> None:
        self._strategies: dict[str, SortStrategy] = {}
        for strategy in strategies:
            if not isinstance(strategy, SortStrategy):
                raise ConnectionConfigurationError(
                    detail=f"{strategy!r} does not implement the sort strategy interface",
                )
            if strategy.name in self._strategies:
                raise ConnectionConfigurationError(
                    detail=f"Sort '{strategy.name}' is declared more than once",
                    extra={"sort": strategy.name},
                )
            self._strategies[strategy.name] = strategy
        if not self._strategies:
            raise ConnectionConfigurationError(detail="At least one sort strategy is required")

    def __getitem__(self, name: str) -> SortStrategy:
        return self._strategies[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._strategies)

    def __len__(self) -> int:
        return len(self._strategies)

    @property
    def default(self) -> SortStrategy:
        return next(iter(self._strategies.values()))

    @property
    def names(self) -> Sequence[str]:
        return list(self._strategies)

    def resolve(self, sort: str | SortStrategy | None) -> SortStrategy:
        """Resolve a sort argument to a strategy.

        Accepts a sort name, an already-resolved strategy, an enum member whose
        value is a sort name, or None for the default strategy.

        Raises:
            UnknownSortError: If the name is not declared
        """
        if sort is None:
            return self.default
        if isinstance(sort, SortStrategy):
            return sort
        name = getattr(sort, "value", sort)
        try:
            return self._strategies[name]
        except KeyError:
            raise UnknownSortError(str(name), self.names) from None


__all__ = [
    "FieldSortStrategy",
    "SortDirection",
    "SortRegistry",
    "SortStrategy",
]
