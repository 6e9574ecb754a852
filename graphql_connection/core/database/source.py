"""Async SQLAlchemy record source for connection resolvers.

``SelectSource`` wraps a base ``Select`` (the unpaginated query) and an
async session factory, and exposes ``count`` and ``findMany`` operations
that understand the clause-tuple filters produced by
``ColumnSortStrategy``.

Client filter input is translated into clauses before any cursor
narrowing: a mapping becomes equality clauses on the selected entity,
unless a ``filter_translator`` is given.

Example:
    from sqlalchemy import select
    from sqlalchemy.ext.asyncio import async_sessionmaker

    source = SelectSource(
        "Product",
        select(Product).where(Product.archived.is_(False)),
        session_factory=async_sessionmaker(engine),
        id_attr="id",
    )
    resolver = ConnectionResolver(
        source.paginated_type,
        [ColumnSortStrategy("ID_ASC", [(Product.id, "asc")])],
    )
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from sqlalchemy import Select, func, inspect, select

from graphql_connection.core.exceptions import ValidationException
from graphql_connection.core.pagination.cursor import read_field
from graphql_connection.core.pagination.host import FetchParams, PaginatedType
from graphql_connection.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql.elements import ColumnElement

logger = get_lazy_logger(__name__)

FilterTranslator = Callable[[Any], Iterable["ColumnElement[bool]"]]


class SelectSource:
    """Paginated source backed by a SQLAlchemy ``Select``.

    Attributes:
        name: Host type name
        statement: Base select statement without pagination
        session_factory: Callable returning an ``AsyncSession`` context manager
        id_attr: Attribute holding the record identifier
        filter_translator: Turns client filter input into WHERE clauses
    """

    def __init__(
        self,
        name: str,
        statement: Select[Any],
        *,
        session_factory: Callable[[], AsyncSession],
        id_attr: str = "id",
        filter_type: Any = None,
        filter_translator: FilterTranslator | None = None,
    ) -> None:
        self.name = name
        self.statement = statement
        self.session_factory = session_factory
        self.id_attr = id_attr
        self.filter_translator = filter_translator
        self.paginated_type = PaginatedType(name, record_id_fn=self.record_id)
        self.paginated_type.add_operation("count", self.count)
        self.paginated_type.add_operation(
            "findMany",
            self.find_many,
            filter_type=filter_type,
            prepare_filter=self.where_clauses,
        )

    def record_id(self, record: Any) -> Any:
        return read_field(record, self.id_attr)

    @property
    def entity(self) -> Any:
        """The first entity selected by the base statement."""
        return self.statement.column_descriptions[0]["entity"]

    def where_clauses(self, filter_: Any) -> tuple[ColumnElement[bool], ...]:
        """Translate filter input into a clause tuple.

        Lists and tuples are taken as clauses already. Anything else goes to
        ``filter_translator``, or for a mapping without one, becomes
        ``column == value`` per key (``IN`` for lists, ``IS NULL`` for None).

        Raises:
            ValidationException: If a mapping key is not a column of the entity
        """
        if filter_ is None:
            return ()
        if isinstance(filter_, list | tuple):
            return tuple(filter_)
        if self.filter_translator is not None:
            return tuple(self.filter_translator(filter_))
        if not isinstance(filter_, Mapping):
            raise ValidationException(
                detail=f"Cannot filter {self.name} by {type(filter_).__name__}",
                type="invalid-filter",
            )

        columns = inspect(self.entity).column_attrs
        clauses = []
        for key, value in filter_.items():
            if key not in columns:
                raise ValidationException(
                    detail=f"Cannot filter {self.name} by unknown field '{key}'",
                    type="invalid-filter",
                    extra={"field": key},
                )
            column = getattr(self.entity, key)
            if value is None:
                clauses.append(column.is_(None))
            elif isinstance(value, list | tuple):
                clauses.append(column.in_(value))
            else:
                clauses.append(column == value)
        return tuple(clauses)

    def filtered(self, clauses: Sequence[ColumnElement[bool]] | None) -> Select[Any]:
        """Base statement narrowed by a clause tuple."""
        if not clauses:
            return self.statement
        return self.statement.where(*clauses)

    def build_find_statement(self, params: FetchParams) -> Select[Any]:
        """Select statement for one find call."""
        stmt = self.filtered(params.filter)
        if params.sort:
            stmt = stmt.order_by(*params.sort)
        if params.skip:
            stmt = stmt.offset(params.skip)
        if params.limit is not None:
            stmt = stmt.limit(params.limit)
        return stmt

    def build_count_statement(self, params: FetchParams) -> Select[Any]:
        """COUNT(*) over the filtered base statement."""
        return select(func.count()).select_from(self.filtered(params.filter).subquery())

    async def count(self, params: FetchParams) -> int:
        async with self.session_factory() as session:
            result = await session.execute(self.build_count_statement(params))
            return result.scalar_one()

    async def find_many(self, params: FetchParams) -> list[Any]:
        stmt = self.build_find_statement(params)
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            rows = list(result.scalars().all())
        logger.debug(
            lambda: f"db.find_many: {self.name}(skip={params.skip}, limit={params.limit}) -> {len(rows)} rows"
        )
        return rows


__all__ = ["FilterTranslator", "SelectSource"]
