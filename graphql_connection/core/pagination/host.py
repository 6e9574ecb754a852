"""Host types that a connection resolver paginates over.

A host type names the record type, knows how to extract a stable
identifier from a record, and registers named asynchronous operations.
The resolver needs two of them: a count operation and a find-many
operation. Both receive a ``FetchParams`` value built fresh for each call.

Example:
    products = PaginatedType("Product", record_id_fn=lambda record: record["id"])
    products.add_operation("count", count_products)
    products.add_operation("findMany", find_products, filter_type=ProductFilter)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from graphql_connection.core.exceptions import ConnectionConfigurationError

Projection = Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class FetchParams:
    """Arguments passed to a host operation.

    Attributes:
        filter: Opaque filter understood by the data source
        sort: Sort descriptor from the active sort strategy
        skip: Number of records to skip
        limit: Maximum number of records to return (None for count)
        projection: Fields the caller needs on each record
    """

    filter: Any = None
    sort: Any = None
    skip: int = 0
    limit: int | None = None
    projection: Projection = field(default_factory=dict)


Operation = Callable[[FetchParams], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class OperationSpec:
    """A registered operation and the filter type it accepts.

    ``prepare_filter`` turns client filter input into the filter the data
    source understands. It runs before any cursor narrowing.
    """

    name: str
    resolve: Operation
    filter_type: Any = None
    description: str | None = None
    prepare_filter: Callable[[Any], Any] | None = None


@runtime_checkable
class SupportsPagination(Protocol):
    """Capabilities a host type must offer to be paginated."""

    name: str

    def has_record_id_fn(self) -> bool: ...

    def record_id(self, record: Any) -> Any: ...

    def get_operation(self, name: str) -> OperationSpec | None: ...


class PaginatedType:
    """Concrete host type with an identifier extractor and named operations."""

    def __init__(
        self,
        name: str,
        *,
        record_id_fn: Callable[[Any], Any] | None = None,
        operations: Mapping[str, Operation] | None = None,
    ) -> None:
        self.name = name
        self._record_id_fn = record_id_fn
        self._operations: dict[str, OperationSpec] = {}
        for op_name, resolve in (operations or {}).items():
            self.add_operation(op_name, resolve)

    def __repr__(self) -> str:
        return f"PaginatedType({self.name!r}, operations={sorted(self._operations)})"

    def has_record_id_fn(self) -> bool:
        return self._record_id_fn is not None

    def set_record_id_fn(self, record_id_fn: Callable[[Any], Any]) -> PaginatedType:
        self._record_id_fn = record_id_fn
        return self

    def record_id(self, record: Any) -> Any:
        """Extract the identifier of a record.

        Raises:
            ConnectionConfigurationError: If no identifier extractor is set
        """
        if self._record_id_fn is None:
            raise ConnectionConfigurationError(
                detail=f"Type '{self.name}' has no record id function",
                extra={"type_name": self.name},
            )
        return self._record_id_fn(record)

    def add_operation(
        self,
        name: str,
        resolve: Operation,
        *,
        filter_type: Any = None,
        description: str | None = None,
        prepare_filter: Callable[[Any], Any] | None = None,
    ) -> PaginatedType:
        """Register (or replace) a named operation."""
        if not callable(resolve):
            raise ConnectionConfigurationError(
                detail=f"Operation '{name}' on type '{self.name}' is not callable",
                extra={"type_name": self.name, "operation": name},
            )
        self._operations[name] = OperationSpec(
            name=name,
            resolve=resolve,
            filter_type=filter_type,
            description=description,
            prepare_filter=prepare_filter,
        )
        return self

    def get_operation(self, name: str) -> OperationSpec | None:
        return self._operations.get(name)

    def has_operation(self, name: str) -> bool:
        return name in self._operations

    def remove_operation(self, name: str) -> None:
        self._operations.pop(name, None)

    @property
    def operation_names(self) -> list[str]:
        return list(self._operations)


__all__ = [
    "FetchParams",
    "Operation",
    "OperationSpec",
    "PaginatedType",
    "Projection",
    "SupportsPagination",
]
