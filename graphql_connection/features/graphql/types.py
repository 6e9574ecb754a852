"""Strawberry types for connections.

Builds Relay-style ``<Prefix>Edge`` / ``<Prefix>Connection`` types and the
``<Prefix>SortEnum`` for a node type, so each paginated type does not need
hand-written Connection and Edge classes.

This module deliberately evaluates annotations eagerly: the generated
classes annotate fields with types that only exist as local variables.

Example:
    ProductEdge, ProductConnection = create_connection_types(ProductType, "Product")
    ProductSortEnum = create_sort_enum(resolver.sorts, "Product")
"""

from enum import Enum
from typing import Any

import strawberry

from graphql_connection.core.pagination.schemas import PageInfo
from graphql_connection.core.pagination.sorting import SortRegistry

__all__ = [
    "PageInfoType",
    "create_connection_types",
    "create_sort_enum",
]


@strawberry.type(name="PageInfo", description="Pagination metadata following GraphQL Relay specification")
class PageInfoType:
    """GraphQL Relay PageInfo for cursor-based pagination.

    Mirrors graphql_connection.core.pagination.schemas.PageInfo.
    """

    start_cursor: str = strawberry.field(default="", description="Cursor of the first edge")
    end_cursor: str = strawberry.field(default="", description="Cursor of the last edge")
    has_previous_page: bool = strawberry.field(default=False, description="Whether previous records exist")
    has_next_page: bool = strawberry.field(default=False, description="Whether more records exist")

    @classmethod
    def from_model(cls, page_info: PageInfo) -> "PageInfoType":
        return cls(
            start_cursor=page_info.start_cursor,
            end_cursor=page_info.end_cursor,
            has_previous_page=page_info.has_previous_page,
            has_next_page=page_info.has_next_page,
        )


def create_connection_types(node_type: type, type_name_prefix: str) -> tuple[type, type]:
    """Create Relay-compliant Edge and Connection types for a node type.

    Args:
        node_type: Strawberry type used for ``Edge.node``
        type_name_prefix: Prefix for the type names (e.g. "Product" -> "ProductConnection")

    Returns:
        Tuple of (edge type, connection type)

    Produces:
        type ProductEdge { cursor: String!  node: ProductType! }
        type ProductConnection { edges: [ProductEdge!]!  pageInfo: PageInfo!  count: Int }
    """

    @strawberry.type(
        name=f"{type_name_prefix}Edge",
        description=f"Edge containing a {type_name_prefix} node and cursor",
    )
    class Edge:
        cursor: str = strawberry.field(description="Opaque cursor for this edge used in pagination")
        node: node_type = strawberry.field(description="The node containing the actual data")  # type: ignore[valid-type]

    @strawberry.type(
        name=f"{type_name_prefix}Connection",
        description=f"Relay connection for {type_name_prefix} with cursor-based pagination",
    )
    class Connection:
        edges: list[Edge] = strawberry.field(description="List of edges containing nodes and their cursors")
        page_info: PageInfoType = strawberry.field(
            description="Pagination information including hasNextPage, hasPreviousPage, etc."
        )
        count: int | None = strawberry.field(
            default=None,
            description="Total number of records matching the filter",
        )

    return Edge, Connection


def create_sort_enum(sorts: SortRegistry, type_name_prefix: str) -> Any:
    """Create the sort enum for a connection.

    Member names and values are the declared sort names, in declaration
    order; the first member is the default sort.
    """
    enum_cls = Enum(f"{type_name_prefix}SortEnum", [(name, name) for name in sorts])
    return strawberry.enum(
        enum_cls,
        name=f"{type_name_prefix}SortEnum",
        description=f"Sort options for {type_name_prefix} connections",
    )
