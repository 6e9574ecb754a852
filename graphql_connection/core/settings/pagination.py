"""Pagination settings for connection resolvers.

This module provides configurable defaults for every connection resolver
built by the package. Having centralized pagination settings ensures
consistency and allows easy tuning based on performance requirements.

Environment variables use PAGINATION_ prefix.
Example: PAGINATION_DEFAULT_LIMIT=20, PAGINATION_MAX_LIMIT=500
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Connection pagination configuration settings.

    Attributes:
        default_limit: Page size used when neither `first` nor `last` is given.
        max_limit: Largest accepted `first`/`last`. Larger requests are
            rejected with InvalidPaginationArgsError. None (default) accepts any size.
        count_operation_name: Name of the host type's count operation.
        find_operation_name: Name of the host type's find-many operation.
        legacy_truncation: Keep `limit - 1` records after the sentinel record
            signals a next page. When False, `limit` records are kept.

    Example:
        settings = PaginationSettings(default_limit=10)
        resolver = ConnectionResolver(products, sorts, settings=settings)
    """

    default_limit: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Default page size when first/last are not specified",
    )
    max_limit: int | None = Field(
        default=None,
        ge=1,
        description="Largest page size a request may ask for; None allows any size",
    )
    count_operation_name: str = Field(
        default="count",
        min_length=1,
        description="Name of the count operation on the paginated type",
    )
    find_operation_name: str = Field(
        default="findMany",
        min_length=1,
        description="Name of the find-many operation on the paginated type",
    )
    legacy_truncation: bool = Field(
        default=True,
        description="Truncate to limit - 1 records when a next page is detected",
    )

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )
