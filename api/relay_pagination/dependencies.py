"""FastAPI dependencies for relay pagination query parameters."""

import logging
from typing import Annotated, Optional, Union

from fastapi import Depends, Query

from .errors.problem_details import InvalidArgumentsError
from .pagination.models import PaginationArgs, SortDirection


logger = logging.getLogger(__name__)


def _parse_page_size(name: str, raw: Optional[Union[str, int]]) -> Optional[Union[int, float]]:
    """Read a page size as a number, leaving integrality and range to the engine."""
    if raw is None:
        return None
    for convert in (int, float):
        try:
            return convert(raw)
        except ValueError:
            continue
    logger.warning(f"Rejected pagination arguments: {name}={raw!r} is not a number")
    raise InvalidArgumentsError(f"{name} must be a positive integer")


def get_pagination_args(
    first: Annotated[Optional[str], Query(description="Number of items after the cursor")] = None,
    after: Annotated[Optional[str], Query(description="Cursor to paginate forward from")] = None,
    last: Annotated[Optional[str], Query(description="Number of items before the cursor")] = None,
    before: Annotated[Optional[str], Query(description="Cursor to paginate backward from")] = None,
    order_by: Annotated[
        Optional[str],
        Query(alias="orderBy", pattern="^(asc|desc)$", description="Sort order")
    ] = None
) -> PaginationArgs:
    """Read relay pagination arguments from the query string.

    ``first``/``last`` are taken as raw strings so that a malformed or
    non-positive page size is reported as ``InvalidArgumentsError`` (400)
    rather than a request validation error.
    """
    return PaginationArgs(
        first=_parse_page_size("first", first),
        after=after,
        last=_parse_page_size("last", last),
        before=before,
        order_by=SortDirection(order_by) if order_by else None,
    )


RelayArgs = Annotated[PaginationArgs, Depends(get_pagination_args)]
