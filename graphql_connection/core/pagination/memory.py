"""In-process record source with document-style filters.

``MemoryCollection`` stores mapping records and exposes ``count`` and
``findMany`` operations through a ``PaginatedType``. It understands the
filters produced by ``FieldSortStrategy`` plus the usual comparison
operators, which makes it a convenient source for tests, fixtures and
small static datasets.

Supported filter syntax:
    {"field": value}                      equality
    {"field": {"$gt": v, "$lte": w}}      $eq $ne $gt $gte $lt $lte $in $nin
    {"$and": [f1, f2]} / {"$or": [f1, f2]}

``None`` sorts below every other value. String filter values are parsed
back into datetime, date, Decimal or UUID when the stored value has that
type, so cursors built from such fields seek correctly.
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Iterable, Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from graphql_connection.core.pagination.host import FetchParams, PaginatedType
from graphql_connection.infra.logging import get_lazy_logger

logger = get_lazy_logger(__name__)

# Types that CursorCodec writes as strings; checked in order (datetime is a date)
_CURSOR_STRING_TYPES: tuple[tuple[type, Callable[[str], Any]], ...] = (
    (datetime, datetime.fromisoformat),
    (date, date.fromisoformat),
    (Decimal, Decimal),
    (UUID, UUID),
)


def coerce_to_stored(actual: Any, expected: Any) -> Any:
    """Parse a string filter value into the type of the stored value.

    Cursor values for datetimes, dates, decimals and UUIDs arrive as the
    strings ``CursorCodec`` serialized them to. Values that do not parse are
    returned unchanged.
    """
    if not isinstance(expected, str) or actual is None or isinstance(actual, str):
        return expected
    for stored_type, parse in _CURSOR_STRING_TYPES:
        if isinstance(actual, stored_type):
            try:
                return parse(expected)
            except (ValueError, ArithmeticError):
                return expected
    return expected


def _compare(op: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def check(actual: Any, expected: Any) -> bool:
        if actual is None or expected is None:
            return False
        try:
            return op(actual, coerce_to_stored(actual, expected))
        except TypeError:
            return False

    return check


OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "$eq": lambda actual, expected: actual == coerce_to_stored(actual, expected),
    "$ne": lambda actual, expected: actual != coerce_to_stored(actual, expected),
    "$gt": _compare(operator.gt),
    "$gte": _compare(operator.ge),
    "$lt": _compare(operator.lt),
    "$lte": _compare(operator.le),
    "$in": lambda actual, expected: actual in expected,
    "$nin": lambda actual, expected: actual not in expected,
}


def matches(record: Mapping[str, Any], filter_: Mapping[str, Any] | None) -> bool:
    """Evaluate a document-style filter against one record.

    Raises:
        ValueError: If the filter uses an unknown operator
    """
    if not filter_:
        return True
    for key, condition in filter_.items():
        if key == "$and":
            if not all(matches(record, sub) for sub in condition):
                return False
        elif key == "$or":
            if not any(matches(record, sub) for sub in condition):
                return False
        elif key.startswith("$"):
            raise ValueError(f"Unsupported filter operator: {key}")
        elif isinstance(condition, Mapping) and any(k.startswith("$") for k in condition):
            actual = record.get(key)
            for op_name, expected in condition.items():
                try:
                    check = OPERATORS[op_name]
                except KeyError:
                    raise ValueError(f"Unsupported filter operator: {op_name}") from None
                if not check(actual, expected):
                    return False
        elif record.get(key) != coerce_to_stored(record.get(key), condition):
            return False
    return True


def sort_records(records: Iterable[Mapping[str, Any]], sort: Mapping[str, int] | None) -> list[Mapping[str, Any]]:
    """Sort records by a ``{field: 1 | -1}`` descriptor; ``None`` sorts lowest."""
    result = list(records)
    for field_name, direction in reversed(list((sort or {}).items())):
        result.sort(
            key=lambda record: (record.get(field_name) is not None, record.get(field_name)),
            reverse=direction < 0,
        )
    return result


def project(record: Mapping[str, Any], projection: Mapping[str, Any] | None) -> dict[str, Any]:
    """Keep only the projected fields; an empty projection keeps everything."""
    if not projection:
        return dict(record)
    return {key: record[key] for key in projection if key in record and projection[key]}


class MemoryCollection:
    """Paginated in-memory collection.

    Example:
        products = MemoryCollection(
            "Product",
            [{"id": 1, "name": "Lamp"}, {"id": 2, "name": "Desk"}],
        )
        resolver = ConnectionResolver(products.paginated_type, sorts)
    """

    def __init__(
        self,
        name: str,
        records: Iterable[Mapping[str, Any]] = (),
        *,
        id_field: str = "id",
        filter_type: Any = None,
    ) -> None:
        self.name = name
        self.id_field = id_field
        self._records: list[dict[str, Any]] = [dict(record) for record in records]
        self.paginated_type = PaginatedType(name, record_id_fn=self.record_id)
        self.paginated_type.add_operation("count", self.count)
        self.paginated_type.add_operation("findMany", self.find_many, filter_type=filter_type)

    def __len__(self) -> int:
        return len(self._records)

    def record_id(self, record: Mapping[str, Any]) -> Any:
        return record[self.id_field]

    def insert(self, record: Mapping[str, Any]) -> None:
        self._records.append(dict(record))

    async def count(self, params: FetchParams) -> int:
        """Count records matching ``params.filter``."""
        return sum(1 for record in self._records if matches(record, params.filter))

    async def find_many(self, params: FetchParams) -> list[dict[str, Any]]:
        """Filter, sort, skip, limit and project the stored records."""
        found = [record for record in self._records if matches(record, params.filter)]
        found = sort_records(found, params.sort)
        start = params.skip or 0
        stop = start + params.limit if params.limit is not None else None
        page = [project(record, params.projection) for record in found[start:stop]]
        logger.debug(
            lambda: f"memory.find_many: {self.name}(skip={start}, limit={params.limit}) "
            f"-> {len(page)} of {len(found)} matching"
        )
        return page


__all__ = ["MemoryCollection", "coerce_to_stored", "matches", "project", "sort_records"]
