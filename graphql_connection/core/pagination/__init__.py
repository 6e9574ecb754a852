"""Cursor-based connection pagination.

This package answers forward ("first N after cursor X") and backward
("last N before cursor Y") pagination requests over any host type that
offers a count and a find-many operation:

- ``CursorCodec``: opaque base64 cursors holding sort-key values
- ``FieldSortStrategy`` / ``ColumnSortStrategy``: named keyset orderings
- ``ConnectionResolver``: computes limit/skip, narrows filters from
  cursors, over-fetches one sentinel record and builds the ``Connection``

Usage:
    resolver = ConnectionResolver(collection.paginated_type, sorts)
    connection = await resolver.resolve(PaginationArgs(first=10))
    next_args = PaginationArgs(first=10, after=connection.page_info.end_cursor)
"""

from graphql_connection.core.pagination.cursor import CursorCodec, CursorData
from graphql_connection.core.pagination.filters import ColumnSortStrategy
from graphql_connection.core.pagination.host import (
    FetchParams,
    Operation,
    OperationSpec,
    PaginatedType,
    SupportsPagination,
)
from graphql_connection.core.pagination.memory import MemoryCollection
from graphql_connection.core.pagination.params import PageWindow, PaginationArgs, compute_window
from graphql_connection.core.pagination.resolver import ConnectionResolver
from graphql_connection.core.pagination.schemas import (
    Connection,
    CursorPage,
    Edge,
    PageInfo,
    empty_connection,
)
from graphql_connection.core.pagination.sorting import (
    FieldSortStrategy,
    SortRegistry,
    SortStrategy,
)

__all__ = [
    "ColumnSortStrategy",
    "Connection",
    "ConnectionResolver",
    "CursorCodec",
    "CursorData",
    "CursorPage",
    "Edge",
    "FetchParams",
    "FieldSortStrategy",
    "MemoryCollection",
    "Operation",
    "OperationSpec",
    "PageInfo",
    "PageWindow",
    "PaginatedType",
    "PaginationArgs",
    "SortRegistry",
    "SortStrategy",
    "SupportsPagination",
    "compute_window",
    "empty_connection",
]
