"""Pydantic Settings v2 configuration.

Settings are read from environment variables (and an optional .env file),
validated once, and cached:

    from graphql_connection.core.settings import get_pagination_settings

    settings = get_pagination_settings()
    print(settings.default_limit)

Configuration precedence (highest to lowest):
    1. init kwargs (testing/overrides)
    2. Environment variables
    3. .env file
"""

from __future__ import annotations

from .loader import get_logging_settings, get_pagination_settings
from .logs import LoggingSettings
from .pagination import PaginationSettings

__all__ = [
    "LoggingSettings",
    "PaginationSettings",
    "get_logging_settings",
    "get_pagination_settings",
]
