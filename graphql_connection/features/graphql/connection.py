"""Strawberry field factory for connection resolvers.

``connection_field`` exposes a ``ConnectionResolver`` as a GraphQL field with
the standard arguments (``first``, ``after``, ``last``, ``before``,
``sort``, ``filter``). The projection handed to the resolver is derived
from the query's selection set, so ``count`` is only computed when a client
asks for it.

Example:
    @strawberry.type
    class Query:
        products = connection_field(product_resolver, ProductType)

    # query { products(first: 2, sort: PRICE_DESC) { count edges { cursor node { name } } } }
"""

import dataclasses
from collections.abc import Callable, Iterable, Mapping
from typing import Annotated, Any

import strawberry
from graphql import GraphQLError
from strawberry import UNSET
from strawberry.scalars import JSON
from strawberry.types import Info
from strawberry.types.nodes import FragmentSpread, InlineFragment, SelectedField
from strawberry.utils.str_converters import to_snake_case

from graphql_connection.core.exceptions import AppException
from graphql_connection.core.pagination.params import PaginationArgs
from graphql_connection.core.pagination.resolver import ConnectionResolver
from graphql_connection.core.pagination.schemas import Connection
from graphql_connection.features.graphql.types import (
    PageInfoType,
    create_connection_types,
    create_sort_enum,
)
from graphql_connection.infra.logging import get_lazy_logger

logger = get_lazy_logger(__name__)

__all__ = [
    "build_projection",
    "connection_field",
    "default_node_factory",
    "input_to_filter",
]


def build_projection(selections: Iterable[Any]) -> dict[str, Any]:
    """Turn a strawberry selection set into a nested projection mapping.

    Leaf fields map to True, fields with sub-selections map to nested
    mappings. Field names are converted to snake_case and fragments are
    flattened into their parent.

    Example:
        { count edges { node { unitPrice } } }
        -> {"count": True, "edges": {"node": {"unit_price": True}}}
    """
    projection: dict[str, Any] = {}
    for selection in selections:
        if isinstance(selection, FragmentSpread | InlineFragment):
            _merge(projection, build_projection(selection.selections))
            continue
        if not isinstance(selection, SelectedField) or selection.name.startswith("__"):
            continue
        key = to_snake_case(selection.name)
        if selection.selections:
            _merge(projection, {key: build_projection(selection.selections)})
        else:
            projection.setdefault(key, True)
    return projection


def _merge(target: dict[str, Any], source: Mapping[str, Any]) -> None:
    for key, value in source.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge(current, value)
        else:
            target[key] = dict(value) if isinstance(value, Mapping) else value


def input_to_filter(value: Any) -> Any:
    """Convert a strawberry input instance into a plain filter mapping.

    Unset and None fields are dropped; nested inputs and lists are
    converted recursively. Plain values (e.g. JSON) pass through unchanged.
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        result = {}
        for field in dataclasses.fields(value):
            item = getattr(value, field.name)
            if item is None or item is UNSET:
                continue
            result[field.name] = input_to_filter(item)
        return result
    if isinstance(value, list):
        return [input_to_filter(item) for item in value]
    return value


def default_node_factory(node_type: type) -> Callable[[Any], Any]:
    """Build node instances from mapping records; other records pass through.

    Fields missing from a projected record are set to None; they were not
    selected, so they are never resolved.
    """
    field_names = [field.name for field in dataclasses.fields(node_type) if field.init]

    def to_node(record: Any) -> Any:
        if isinstance(record, Mapping):
            return node_type(**{name: record.get(name) for name in field_names})
        return record

    return to_node


def connection_field(
    resolver: ConnectionResolver,
    node_type: type,
    *,
    type_name_prefix: str | None = None,
    description: str | None = None,
    node_factory: Callable[[Any], Any] | None = None,
) -> Any:
    """Create a strawberry field that resolves through a ConnectionResolver.

    Args:
        resolver: Configured connection resolver
        node_type: Strawberry type for the edge nodes
        type_name_prefix: Prefix for generated type names (defaults to the host type name)
        description: Field description
        node_factory: Converts a record into a ``node_type`` value

    Returns:
        A strawberry field to assign on a Query type
    """
    prefix = type_name_prefix or resolver.type_name
    edge_type, connection_type = create_connection_types(node_type, prefix)
    sort_enum = create_sort_enum(resolver.sorts, prefix)
    default_sort = next(iter(sort_enum))
    filter_type = resolver.filter_type or JSON
    to_node = node_factory or default_node_factory(node_type)

    def to_graphql(connection: Connection) -> Any:
        return connection_type(
            edges=[edge_type(cursor=edge.cursor, node=to_node(edge.node)) for edge in connection.edges],
            page_info=PageInfoType.from_model(connection.page_info),
            count=connection.count,
        )

    async def resolve_connection(
        info: Info,
        first: Annotated[
            int | None,
            strawberry.argument(description="Forward pagination argument for returning at most first edges"),
        ] = None,
        after: Annotated[
            str | None,
            strawberry.argument(description="Forward pagination argument for returning edges after this cursor"),
        ] = None,
        last: Annotated[
            int | None,
            strawberry.argument(description="Backward pagination argument for returning at most last edges"),
        ] = None,
        before: Annotated[
            str | None,
            strawberry.argument(description="Backward pagination argument for returning edges before this cursor"),
        ] = None,
        sort: Annotated[
            sort_enum,
            strawberry.argument(description="Sort argument for data ordering"),
        ] = default_sort,
        filter: Annotated[
            filter_type | None,
            strawberry.argument(description="Filter passed through to the find operation"),
        ] = None,
    ) -> connection_type:
        args = PaginationArgs(
            first=first,
            after=after,
            last=last,
            before=before,
            sort=sort.value,
            filter=input_to_filter(filter),
        )
        projection = build_projection(info.selected_fields[0].selections)
        try:
            connection = await resolver.resolve(args, projection)
        except AppException as exc:
            logger.info("Rejected %s connection request: %s", prefix, exc.detail)
            raise GraphQLError(exc.detail, extensions=exc.to_problem()) from exc
        return to_graphql(connection)

    return strawberry.field(
        resolver=resolve_connection,
        description=description or f"Cursor-paginated {prefix} connection",
    )
