"""GraphQL test fixtures.

Provides:
- Product node and filter types
- A strawberry schema exposing an in-memory product connection
"""

from typing import Optional

import pytest
import strawberry

from graphql_connection.core.pagination import ConnectionResolver, FieldSortStrategy, MemoryCollection
from graphql_connection.core.settings import PaginationSettings
from graphql_connection.features.graphql import connection_field


@strawberry.type
class ProductType:
    id: int
    name: Optional[str] = None
    unit_price: Optional[int] = None
    category: Optional[str] = None


@strawberry.input
class ProductFilter:
    category: Optional[str] = strawberry.UNSET
    name: Optional[str] = strawberry.UNSET


@pytest.fixture
def product_collection(product_records) -> MemoryCollection:
    records = [
        {key: value for key, value in record.items() if key != "price"} | {"unit_price": record["price"]}
        for record in product_records
    ]
    return MemoryCollection("Product", records, filter_type=ProductFilter)


@pytest.fixture
def graphql_sorts() -> list[FieldSortStrategy]:
    return [
        FieldSortStrategy("ID_ASC", [("id", "asc")], description="Oldest first"),
        FieldSortStrategy("ID_DESC", [("id", "desc")]),
        FieldSortStrategy("PRICE_DESC", [("unit_price", "desc"), ("id", "asc")]),
    ]


@pytest.fixture
def product_resolver(product_collection, graphql_sorts) -> ConnectionResolver:
    return ConnectionResolver(
        product_collection.paginated_type,
        graphql_sorts,
        settings=PaginationSettings(legacy_truncation=False),
    )


@pytest.fixture
def schema(product_resolver) -> strawberry.Schema:
    @strawberry.type
    class Query:
        products = connection_field(product_resolver, ProductType, description="Paginated products")

    return strawberry.Schema(query=Query)
