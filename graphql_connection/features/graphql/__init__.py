"""Strawberry GraphQL integration for connection resolvers.

Usage:
    import strawberry

    from graphql_connection.features.graphql import connection_field

    @strawberry.type
    class Query:
        products = connection_field(product_resolver, ProductType)

    schema = strawberry.Schema(query=Query)
"""

from graphql_connection.features.graphql.connection import (
    build_projection,
    connection_field,
    default_node_factory,
    input_to_filter,
)
from graphql_connection.features.graphql.types import (
    PageInfoType,
    create_connection_types,
    create_sort_enum,
)

__all__ = [
    "PageInfoType",
    "build_projection",
    "connection_field",
    "create_connection_types",
    "create_sort_enum",
    "default_node_factory",
    "input_to_filter",
]
