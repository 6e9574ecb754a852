"""Unit tests for logging configuration, formatter and lazy logger."""
from __future__ import annotations

import json
import logging
import logging.config
import sys

import pytest

from graphql_connection.core.settings import LoggingSettings, get_logging_settings
from graphql_connection.infra.logging import (
    JSONFormatter,
    LazyLoggerAdapter,
    build_logging_config,
    configure_logging,
    get_lazy_logger,
    lazy_repr,
)


def make_record(msg="hello %s", args=("world",), level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="graphql_connection.test",
        level=level,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=args,
        exc_info=None,
    )
    record.__dict__.update(extra)
    return record


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def test_basic_fields(self):
        payload = json.loads(JSONFormatter(static={"service": "catalog"}).format(make_record()))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "graphql_connection.test"
        assert payload["message"] == "hello world"
        assert payload["service"] == "catalog"
        assert payload["timestamp"].endswith("Z")

    def test_extra_fields_are_included(self):
        payload = json.loads(JSONFormatter().format(make_record(type_name="Product")))

        assert payload["type_name"] == "Product"
        assert "lineno" not in payload

    def test_exception_is_single_line(self):
        try:
            raise ValueError("boom")
        except ValueError:
            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        output = JSONFormatter().format(record)

        assert "\n" not in output
        assert "ValueError: boom" in json.loads(output)["exception"]

    def test_process_info(self):
        payload = json.loads(JSONFormatter(include_process_info=True).format(make_record()))

        assert "process_id" in payload
        assert "process_name" in payload


class TestLazyLogger:
    """Tests for LazyLoggerAdapter."""

    def test_get_lazy_logger(self):
        logger = get_lazy_logger("graphql_connection.lazy", type_name="Product")

        assert isinstance(logger, LazyLoggerAdapter)
        assert logger.extra == {"type_name": "Product"}

    def test_callables_not_evaluated_when_disabled(self):
        logger = get_lazy_logger("graphql_connection.lazy.disabled")
        logger.logger.setLevel(logging.INFO)
        calls = []

        logger.debug(lambda: calls.append("msg") or "message")
        logger.debug("value=%s", lambda: calls.append("arg") or 1)

        assert calls == []

    def test_callables_evaluated_when_enabled(self, caplog):
        logger = get_lazy_logger("graphql_connection.lazy.enabled")

        with caplog.at_level(logging.DEBUG, logger="graphql_connection.lazy.enabled"):
            logger.debug(lambda: "computed message")
            logger.info("limit=%s", lambda: 20)

        assert [r.getMessage() for r in caplog.records] == ["computed message", "limit=20"]

    def test_exception_sets_exc_info(self, caplog):
        logger = get_lazy_logger("graphql_connection.lazy.exc")

        with caplog.at_level(logging.ERROR, logger="graphql_connection.lazy.exc"):
            try:
                raise KeyError("missing")
            except KeyError:
                logger.exception("failed")

        assert caplog.records[0].exc_info is not None

    def test_lazy_repr(self):
        render = lazy_repr(lambda: {"id": {"$gt": 5}})

        assert render() == "{'id': {'$gt': 5}}"


class TestLoggingConfig:
    """Tests for build_logging_config and configure_logging."""

    def test_json_config(self):
        config = build_logging_config(log_level="debug", service_name="catalog")

        formatter = config["formatters"]["default"]
        assert formatter["()"].endswith("JSONFormatter")
        assert formatter["static"] == {"service": "catalog"}
        assert config["root"]["level"] == "DEBUG"
        assert config["handlers"]["console"]["stream"] == "ext://sys.stderr"

    def test_text_config(self):
        config = build_logging_config(json_logs=False, include_process_info=True)

        assert "%(process)d" in config["formatters"]["default"]["format"]

    @pytest.fixture
    def captured_config(self, monkeypatch):
        captured: list[dict] = []
        monkeypatch.setattr(logging.config, "dictConfig", captured.append)
        return captured

    def test_configure_logging_from_settings(self, captured_config):
        configure_logging(LoggingSettings(level="WARNING", json_logs=True, service_name="catalog"))

        (config,) = captured_config
        assert config["root"]["level"] == "WARNING"
        assert config["formatters"]["default"]["static"] == {"service": "catalog"}

    def test_configure_logging_overrides(self, captured_config):
        configure_logging(LoggingSettings(level="WARNING"), log_level="ERROR", json_logs=False)

        (config,) = captured_config
        assert config["root"]["level"] == "ERROR"
        assert "format" in config["formatters"]["default"]

    def test_configure_logging_defaults_to_cached_settings(self, captured_config, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        get_logging_settings.cache_clear()
        try:
            configure_logging()
        finally:
            get_logging_settings.cache_clear()

        assert captured_config[0]["root"]["level"] == "DEBUG"
