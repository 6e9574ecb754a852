"""Pagination arguments and the fetch window derived from them."""

from __future__ import annotations

import math
import re
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from graphql_connection.core.exceptions import InvalidPaginationArgsError

if TYPE_CHECKING:
    from graphql_connection.core.settings.pagination import PaginationSettings

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


class PaginationArgs(BaseModel):
    """Arguments of one connection request.

    ``first`` and ``last`` are kept as received; ``compute_window`` owns
    their coercion so that the GraphQL layer and direct Python callers
    behave the same.

    Attributes:
        first: Forward page size
        last: Backward page size
        after: Cursor to start after
        before: Cursor to end before
        sort: Sort name, enum member, strategy, or None for the default
        filter: Pass-through filter for the data source
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    first: Any = Field(default=None, description="Forward pagination page size")
    last: Any = Field(default=None, description="Backward pagination page size")
    after: str | None = Field(default=None, description="Cursor to start after")
    before: str | None = Field(default=None, description="Cursor to end before")
    sort: Any = Field(default=None, description="Sort name; defaults to the first declared sort")
    filter: Any = Field(default=None, description="Pass-through filter")


def to_non_negative_int(value: Any, argument: str) -> int:
    """Coerce a page size argument the way ``parseInt`` would.

    Integers are kept, floats truncated, numeric strings parsed from their
    leading digits. Anything else (None, booleans, garbage) counts as 0.

    Raises:
        InvalidPaginationArgsError: If the coerced value is negative
    """
    if value is None or isinstance(value, bool):
        number = 0
    elif isinstance(value, int):
        number = value
    elif isinstance(value, float):
        number = int(value) if math.isfinite(value) else 0
    elif isinstance(value, str):
        match = _LEADING_INT.match(value)
        number = int(match.group(1)) if match else 0
    else:
        number = 0

    if number < 0:
        raise InvalidPaginationArgsError(argument, value)
    return number


@dataclass(frozen=True, slots=True)
class PageWindow:
    """Resolved page size and offset for one request.

    Attributes:
        first: Coerced ``first`` argument
        last: Coerced ``last`` argument
        limit: Page size (``last`` wins over ``first``)
        skip: Offset shift for the combined first/last case
    """

    first: int
    last: int
    limit: int
    skip: int

    @property
    def fetch_limit(self) -> int:
        """Records to request: one sentinel beyond the page size."""
        return self.limit + 1

    @property
    def has_previous_page(self) -> bool:
        return self.skip > 0


def compute_window(args: PaginationArgs, settings: PaginationSettings) -> PageWindow:
    """Translate ``first``/``last`` into ``limit`` and ``skip``.

    ``limit = last or first``; when neither is given the configured default
    applies. A ``limit`` above ``max_limit``, when one is configured, is
    rejected. ``skip`` is ``first - last`` when both are positive and the
    difference is positive, otherwise 0.

    Raises:
        InvalidPaginationArgsError: If an argument is negative or too large
    """
    first = to_non_negative_int(args.first, "first")
    last = to_non_negative_int(args.last, "last")

    limit = last or first
    max_limit = settings.max_limit
    if not limit:
        limit = settings.default_limit if max_limit is None else min(settings.default_limit, max_limit)
    elif max_limit is not None and limit > max_limit:
        argument = "last" if last else "first"
        raise InvalidPaginationArgsError(
            argument,
            getattr(args, argument),
            reason=f"must not exceed {max_limit}",
        )

    skip = max(first - last, 0) if first > 0 and last > 0 else 0
    return PageWindow(first=first, last=last, limit=limit, skip=skip)


def truncate_records(
    records: Sequence[Any],
    limit: int,
    *,
    legacy_truncation: bool = True,
) -> tuple[list[Any], bool]:
    """Drop the sentinel record and report whether a next page exists.

    When more than ``limit`` records came back there is a next page. The
    list is then cut to ``limit - 1`` records under legacy truncation, or to
    ``limit`` records otherwise.

    Returns:
        Tuple of (kept records, has_next_page)
    """
    records = list(records)
    if len(records) <= limit:
        return records, False
    keep = limit - 1 if legacy_truncation else limit
    return records[: max(keep, 0)], True


__all__ = [
    "PageWindow",
    "PaginationArgs",
    "compute_window",
    "to_non_negative_int",
    "truncate_records",
]
