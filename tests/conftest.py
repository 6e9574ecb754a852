"""Pytest configuration and shared fixtures.

Organization:
    - Settings Fixtures: isolated pagination settings
    - Data Fixtures: product records and in-memory collections
    - Resolver Fixtures: sort registries and connection resolvers
    - Mock Fixtures: host types backed by AsyncMock operations
"""

from __future__ import annotations

import os
from typing import Any
from unittest.mock import AsyncMock

import pytest

from graphql_connection.core.pagination import (
    ConnectionResolver,
    FieldSortStrategy,
    MemoryCollection,
    PaginatedType,
    SortRegistry,
)
from graphql_connection.core.settings import PaginationSettings, get_pagination_settings

# Keep the environment from leaking into defaults
os.environ.setdefault("LOG_JSON_LOGS", "false")


# ============================================================================
# Settings Fixtures
# ============================================================================


@pytest.fixture
def pagination_settings() -> PaginationSettings:
    """Pagination settings with package defaults, independent of the environment."""
    return PaginationSettings(
        default_limit=20,
        max_limit=None,
        count_operation_name="count",
        find_operation_name="findMany",
        legacy_truncation=True,
    )


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Reset cached settings between tests."""
    get_pagination_settings.cache_clear()
    yield
    get_pagination_settings.cache_clear()


# ============================================================================
# Data Fixtures
# ============================================================================


@pytest.fixture
def product_records() -> list[dict[str, Any]]:
    """Ten products with ids 1..10; prices repeat so ties need the id tiebreak."""
    return [
        {"id": i, "name": f"Product {i}", "price": (i % 4) * 10, "category": "even" if i % 2 == 0 else "odd"}
        for i in range(1, 11)
    ]


@pytest.fixture
def products(product_records: list[dict[str, Any]]) -> MemoryCollection:
    """In-memory product collection."""
    return MemoryCollection("Product", product_records)


# ============================================================================
# Resolver Fixtures
# ============================================================================


@pytest.fixture
def product_sorts() -> SortRegistry:
    """Sorts for products; ID_ASC is the default."""
    return SortRegistry(
        [
            FieldSortStrategy("ID_ASC", [("id", "asc")]),
            FieldSortStrategy("ID_DESC", [("id", "desc")]),
            FieldSortStrategy("PRICE_DESC", [("price", "desc"), ("id", "asc")]),
        ]
    )


@pytest.fixture
def resolver(
    products: MemoryCollection,
    product_sorts: SortRegistry,
    pagination_settings: PaginationSettings,
) -> ConnectionResolver:
    """Connection resolver over the in-memory products."""
    return ConnectionResolver(products.paginated_type, product_sorts, settings=pagination_settings)


# ============================================================================
# Mock Fixtures
# ============================================================================


@pytest.fixture
def count_op() -> AsyncMock:
    return AsyncMock(return_value=42)


@pytest.fixture
def find_op() -> AsyncMock:
    return AsyncMock(return_value=[])


@pytest.fixture
def mock_host(count_op: AsyncMock, find_op: AsyncMock) -> PaginatedType:
    """Host type whose operations are AsyncMocks."""
    return PaginatedType(
        "Item",
        record_id_fn=lambda record: record["id"],
        operations={"count": count_op, "findMany": find_op},
    )


@pytest.fixture
def mock_resolver(
    mock_host: PaginatedType,
    product_sorts: SortRegistry,
    pagination_settings: PaginationSettings,
) -> ConnectionResolver:
    return ConnectionResolver(mock_host, product_sorts, settings=pagination_settings)
