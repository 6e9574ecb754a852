"""Logging infrastructure.

Basic usage:
    import logging

    from graphql_connection.infra.logging import configure_logging, get_lazy_logger

    configure_logging()  # LOG_LEVEL / LOG_JSON_LOGS from the environment

    logger = get_lazy_logger(__name__)
    logger.debug(lambda: f"Expensive: {compute_heavy_data()}")  # Only runs if DEBUG enabled
"""

from graphql_connection.infra.logging.config import build_logging_config, configure_logging
from graphql_connection.infra.logging.formatters import JSONFormatter
from graphql_connection.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger, lazy_repr

__all__ = [
    "JSONFormatter",
    "LazyLoggerAdapter",
    "build_logging_config",
    "configure_logging",
    "get_lazy_logger",
    "lazy_repr",
]
