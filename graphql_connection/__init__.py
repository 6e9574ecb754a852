"""Cursor-based connection pagination for GraphQL APIs.

Quick start:
    from graphql_connection import (
        ConnectionResolver,
        FieldSortStrategy,
        MemoryCollection,
        PaginationArgs,
    )

    products = MemoryCollection("Product", records)
    resolver = ConnectionResolver(
        products.paginated_type,
        [FieldSortStrategy("ID_ASC", [("id", "asc")])],
    )
    page = await resolver.resolve(PaginationArgs(first=10))
"""

from graphql_connection.core.exceptions import (
    AppException,
    ConnectionConfigurationError,
    InvalidPaginationArgsError,
    UnknownSortError,
    ValidationException,
)
from graphql_connection.core.pagination import (
    ColumnSortStrategy,
    Connection,
    ConnectionResolver,
    CursorCodec,
    CursorData,
    Edge,
    FetchParams,
    FieldSortStrategy,
    MemoryCollection,
    PageInfo,
    PaginatedType,
    PaginationArgs,
    SortRegistry,
    SortStrategy,
    SupportsPagination,
)

__version__ = "0.1.0"

__all__ = [
    "AppException",
    "ColumnSortStrategy",
    "Connection",
    "ConnectionConfigurationError",
    "ConnectionResolver",
    "CursorCodec",
    "CursorData",
    "Edge",
    "FetchParams",
    "FieldSortStrategy",
    "InvalidPaginationArgsError",
    "MemoryCollection",
    "PageInfo",
    "PaginatedType",
    "PaginationArgs",
    "SortRegistry",
    "SortStrategy",
    "SupportsPagination",
    "UnknownSortError",
    "ValidationException",
    "__version__",
]
