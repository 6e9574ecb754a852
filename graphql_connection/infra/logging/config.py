"""Logging configuration setup.

Uses dictConfig with a single console handler on the root logger; package
loggers propagate up. The formatter is either JSON Lines or plain text.
"""

from __future__ import annotations

import logging
import logging.config
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from graphql_connection.core.settings.logs import LoggingSettings

logger = logging.getLogger(__name__)

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def build_logging_config(
    log_level: str = "INFO",
    json_logs: bool = True,
    service_name: str = "graphql-connection",
    include_process_info: bool = False,
) -> dict[str, Any]:
    """Build the dictConfig mapping.

    Args:
        log_level: Root logger level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        json_logs: Use JSONL format instead of plain text.
        service_name: Static ``service`` field for JSON records.
        include_process_info: Include process ID and name in records.

    Returns:
        Configuration dict accepted by logging.config.dictConfig.
    """
    if json_logs:
        formatter: dict[str, Any] = {
            "()": "graphql_connection.infra.logging.formatters.JSONFormatter",
            "static": {"service": service_name},
            "include_process_info": include_process_info,
        }
    else:
        fmt = TEXT_FORMAT
        if include_process_info:
            fmt = "%(asctime)s %(levelname)s [%(processName)s:%(process)d] %(name)s %(message)s"
        formatter = {"format": fmt}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"default": formatter},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "default",
                "stream": "ext://sys.stderr",
            },
        },
        "root": {
            "level": log_level.upper(),
            "handlers": ["console"],
        },
    }


def configure_logging(settings: LoggingSettings | None = None, **overrides: Any) -> None:
    """Configure root logging from LoggingSettings.

    Args:
        settings: Logging settings; defaults to the cached environment settings.
        **overrides: Keyword overrides for build_logging_config.

    Example:
        configure_logging()
        configure_logging(log_level="DEBUG", json_logs=False)
    """
    if settings is None:
        from graphql_connection.core.settings import get_logging_settings

        settings = get_logging_settings()

    kwargs = settings.to_logging_kwargs()
    kwargs.update(overrides)
    logging.config.dictConfig(build_logging_config(**kwargs))
    logger.debug("Logging configured: level=%s json=%s", kwargs["log_level"], kwargs["json_logs"])
