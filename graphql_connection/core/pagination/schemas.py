"""Connection response schemas for cursor-based pagination.

This module provides two pagination styles:

1. Connection pattern (Relay specification):
   - Edges with cursors and nodes
   - PageInfo with navigation metadata
   - Optional total count, present only when requested

2. Simple REST style:
   - Just items, cursors, and a has_more flag

Both styles use the same underlying cursor mechanism.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PageInfo(BaseModel):
    """Pagination metadata following the Relay specification.

    An empty page always carries the zero value: empty cursors and both
    flags False.

    Attributes:
        start_cursor: Cursor of the first edge in this page
        end_cursor: Cursor of the last edge in this page
        has_previous_page: Whether there are records before the current page
        has_next_page: Whether there are records after the current page
    """

    model_config = ConfigDict(frozen=True)

    start_cursor: str = Field(default="", description="Cursor of the first edge")
    end_cursor: str = Field(default="", description="Cursor of the last edge")
    has_previous_page: bool = Field(default=False, description="Whether previous records exist")
    has_next_page: bool = Field(default=False, description="Whether more records exist")


class Edge(BaseModel, Generic[T]):
    """Edge wrapper for a paginated record.

    Attributes:
        cursor: Cursor encoding this record's position
        node: The record itself
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    cursor: str = Field(description="Cursor for this record")
    node: T = Field(description="The record")


class Connection(BaseModel, Generic[T]):
    """Connection payload returned by the resolver.

    ``count`` is only set when the caller asked for it; dump with
    ``exclude_unset=True`` to omit it otherwise.

    Usage:
        connection = await resolver.resolve(PaginationArgs(first=10), {"count": True})
        for edge in connection.edges:
            print(edge.cursor, edge.node)

        # Next page
        if connection.page_info.has_next_page:
            args = PaginationArgs(first=10, after=connection.page_info.end_cursor)
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    count: int | None = Field(default=None, description="Total records matching the filter")
    edges: list[Edge[T]] = Field(
        default_factory=list,
        description="List of edges (records with cursors)",
    )
    page_info: PageInfo = Field(
        default_factory=PageInfo,
        description="Pagination metadata",
    )

    @property
    def nodes(self) -> list[T]:
        """Get just the records without edge wrappers."""
        return [edge.node for edge in self.edges]

    def to_cursor_page(self) -> CursorPage[T]:
        """Convert to simple REST-style pagination.

        Returns:
            CursorPage with items and cursors
        """
        return CursorPage(
            items=self.nodes,
            next_cursor=self.page_info.end_cursor if self.page_info.has_next_page else None,
            prev_cursor=self.page_info.start_cursor if self.page_info.has_previous_page else None,
            has_more=self.page_info.has_next_page,
            total_count=self.count,
        )


class CursorPage(BaseModel, Generic[T]):
    """Simple REST-style cursor pagination response.

    Attributes:
        items: List of records
        next_cursor: Cursor for the next page (None if no more)
        prev_cursor: Cursor for the previous page (None if at start)
        has_more: Whether more records exist after this page
        total_count: Total count (optional)
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    items: list[T] = Field(default_factory=list, description="List of records")
    next_cursor: str | None = Field(default=None, description="Cursor to fetch next page")
    prev_cursor: str | None = Field(default=None, description="Cursor to fetch previous page")
    has_more: bool = Field(default=False, description="Whether more records exist")
    total_count: int | None = Field(default=None, description="Total count (optional)")


def empty_connection() -> Connection:
    """Zero-value connection: no edges, empty page info, no count."""
    return Connection()


__all__ = [
    "Connection",
    "CursorPage",
    "Edge",
    "PageInfo",
    "empty_connection",
]
