"""Connection resolver: cursor pagination over a host type's operations.

The resolver turns ``first``/``last``/``after``/``before``/``sort`` into a
single find call (plus an optional, concurrent count call) and shapes the
result into a ``Connection``.

Example:
    from graphql_connection.core.pagination import (
        ConnectionResolver,
        FieldSortStrategy,
        PaginationArgs,
    )

    resolver = ConnectionResolver(
        products,  # PaginatedType with "count" and "findMany" operations
        [FieldSortStrategy("ID_ASC", [("id", "asc")])],
    )
    connection = await resolver.resolve(
        PaginationArgs(first=10, after=cursor),
        projection={"count": True, "edges": {"node": {"name": True}}},
    )
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable, Mapping
from typing import Any

from graphql_connection.core.exceptions import ConnectionConfigurationError
from graphql_connection.core.pagination.cursor import CursorCodec, CursorData
from graphql_connection.core.pagination.host import (
    FetchParams,
    OperationSpec,
    Projection,
    SupportsPagination,
)
from graphql_connection.core.pagination.params import (
    PaginationArgs,
    compute_window,
    truncate_records,
)
from graphql_connection.core.pagination.schemas import Connection, Edge, PageInfo
from graphql_connection.core.pagination.sorting import SortRegistry, SortStrategy
from graphql_connection.core.settings import PaginationSettings, get_pagination_settings
from graphql_connection.infra.logging import get_lazy_logger, lazy_repr

logger = get_lazy_logger(__name__)

# Top-level projection keys that belong to the connection, not to records.
CONNECTION_KEYS = frozenset({"count", "edges", "pageInfo", "page_info"})


class ConnectionResolver:
    """Resolve connection requests against a paginated host type.

    Construction validates the host: it must offer an identifier extractor
    and both named operations, otherwise ``ConnectionConfigurationError`` is
    raised before any query can run.

    Attributes:
        host: The paginated host type
        sorts: Registry of named sort strategies; the first is the default
        settings: Pagination settings in effect
        count_operation: Registered count operation
        find_operation: Registered find-many operation
    """

    def __init__(
        self,
        host: SupportsPagination,
        sorts: SortRegistry | Iterable[SortStrategy],
        *,
        count_operation: str | None = None,
        find_operation: str | None = None,
        settings: PaginationSettings | None = None,
    ) -> None:
        self.settings = settings or get_pagination_settings()

        if not isinstance(host, SupportsPagination):
            raise _configuration_error(
                f"{host!r} cannot be paginated: it must provide name, has_record_id_fn(), "
                "record_id() and get_operation()",
            )
        self.host = host

        if not host.has_record_id_fn():
            raise _configuration_error(
                f"Type '{host.name}' should have a record id function. "
                "This function returns the ID of a provided record.",
                type_name=host.name,
            )

        self.count_operation = self._require_operation(
            count_operation or self.settings.count_operation_name
        )
        self.find_operation = self._require_operation(
            find_operation or self.settings.find_operation_name
        )
        self.sorts = sorts if isinstance(sorts, SortRegistry) else SortRegistry(sorts)

        logger.debug(
            lambda: f"connection resolver ready: {host.name} "
            f"(count={self.count_operation.name}, find={self.find_operation.name}, "
            f"sorts={list(self.sorts)})"
        )

    def __repr__(self) -> str:
        return f"ConnectionResolver({self.host.name!r}, sorts={list(self.sorts)})"

    @property
    def type_name(self) -> str:
        return self.host.name

    @property
    def filter_type(self) -> Any:
        """Filter type declared by the find operation, if any."""
        return self.find_operation.filter_type

    def prepare_filter(self, filter_: Any) -> Any:
        """Translate client filter input with the find operation's ``prepare_filter``."""
        prepare = self.find_operation.prepare_filter
        if filter_ is None or prepare is None:
            return filter_
        return prepare(filter_)

    def _require_operation(self, name: str) -> OperationSpec:
        operation = self.host.get_operation(name)
        if operation is None:
            raise _configuration_error(
                f"Type '{self.host.name}' should have an operation named '{name}'",
                type_name=self.host.name,
                operation=name,
            )
        return operation

    async def resolve(
        self,
        args: PaginationArgs | None = None,
        projection: Projection | None = None,
    ) -> Connection:
        """Resolve one page.

        Args:
            args: Pagination arguments; defaults to an empty request
            projection: Requested output fields. ``count`` is resolved only
                when ``projection["count"]`` is truthy; record fields are
                read from ``projection["edges"]["node"]``.

        Returns:
            Connection with edges, page info and (if requested) count

        Raises:
            InvalidPaginationArgsError: If ``first`` or ``last`` is negative
            UnknownSortError: If ``args.sort`` names an undeclared sort
        """
        args = args or PaginationArgs()
        projection = projection or {}

        strategy = self.sorts.resolve(args.sort)
        window = compute_window(args, self.settings)

        base_filter = self.prepare_filter(args.filter)
        filter_ = base_filter
        after_data = self._decode_cursor(args.after, strategy)
        if after_data is not None:
            filter_ = strategy.cursor_to_filter(after_data, filter_)
        before_data = self._decode_cursor(args.before, strategy)
        if before_data is not None:
            filter_ = strategy.cursor_to_filter(before_data, filter_, before=True)

        find_params = FetchParams(
            filter=filter_,
            sort=strategy.sort_value,
            skip=window.skip,
            limit=window.fetch_limit,
            projection=self.node_projection(projection, strategy.unique_fields),
        )
        logger.debug("connection.find: %s filter=%s", self.host.name, lazy_repr(lambda: filter_))

        count_task: asyncio.Future[Any] | None = None
        if projection.get("count"):
            count_task = asyncio.ensure_future(
                self.count_operation.resolve(FetchParams(filter=base_filter))
            )

        try:
            records = await self.find_operation.resolve(find_params)
            kept, has_next_page = truncate_records(
                records or [],
                window.limit,
                legacy_truncation=self.settings.legacy_truncation,
            )
            edges = [
                Edge(cursor=CursorCodec.from_record(record, strategy.unique_fields), node=record)
                for record in kept
            ]
        except BaseException:
            if count_task is not None:
                _discard(count_task)
            raise

        if edges:
            page_info = PageInfo(
                start_cursor=edges[0].cursor,
                end_cursor=edges[-1].cursor,
                has_previous_page=window.has_previous_page,
                has_next_page=has_next_page,
            )
        else:
            page_info = PageInfo()

        data: dict[str, Any] = {"edges": edges, "page_info": page_info}
        if count_task is not None:
            data["count"] = await count_task

        logger.debug(
            lambda: f"connection.resolve: {self.host.name}(sort={strategy.name}, "
            f"limit={window.limit}, skip={window.skip}) -> {len(edges)} edges, "
            f"has_next={page_info.has_next_page}"
        )
        return Connection(**data)

    def _decode_cursor(self, cursor: str | None, strategy: SortStrategy) -> CursorData | None:
        """Decode a cursor, treating cursors from another sort as absent."""
        data = CursorCodec.decode(cursor)
        if data is not None and not data.covers(strategy.unique_fields):
            logger.debug(
                lambda: f"Ignoring cursor without {list(strategy.unique_fields)} "
                f"for sort {strategy.name}: {sorted(data.values)}"
            )
            return None
        return data

    @staticmethod
    def node_projection(projection: Projection, unique_fields: Iterable[str]) -> dict[str, Any]:
        """Record projection for the find operation.

        Uses ``projection["edges"]["node"]`` when present, otherwise the
        top-level keys that are not connection fields. The sort's unique
        fields are always added so every edge can build its cursor. The
        caller's projection is never mutated.
        """
        edges = projection.get("edges")
        node = edges.get("node") if isinstance(edges, Mapping) else None
        if isinstance(node, Mapping):
            result = dict(node)
        else:
            result = {key: value for key, value in projection.items() if key not in CONNECTION_KEYS}
        for field_name in unique_fields:
            result[field_name] = True
        return result


def _configuration_error(detail: str, **extra: Any) -> ConnectionConfigurationError:
    logger.error("Connection configuration error: %s", detail)
    return ConnectionConfigurationError(detail=detail, extra=extra or None)


def _discard(task: asyncio.Future[Any]) -> None:
    """Cancel a pending count and retrieve its outcome so it is never reported as lost."""
    task.cancel()
    task.add_done_callback(lambda done: done.cancelled() or done.exception())


__all__ = ["CONNECTION_KEYS", "ConnectionResolver"]
