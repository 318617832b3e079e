"""Assemble relay connections from an ordered page of records."""

from typing import Any, List, Optional, Sequence

from .cursor import create_edge
from .models import Connection, Edge, PageInfo, PaginationArgs, SortKey


def build_page_info(
    edges: List[Edge],
    args: PaginationArgs,
    has_more: bool,
    is_forward: bool
) -> PageInfo:
    """Build page info for a page of edges.

    Forward pages learn ``hasNextPage`` from the over-fetch and report a
    previous page whenever an ``after`` cursor was given. Backward pages
    learn ``hasPreviousPage`` from the over-fetch and report a next page
    whenever a ``before`` cursor was given; the tail beyond ``before`` is
    not queried.
    """
    return PageInfo(
        has_next_page=has_more if is_forward else args.before is not None,
        has_previous_page=args.after is not None if is_forward else has_more,
        start_cursor=edges[0].cursor if edges else None,
        end_cursor=edges[-1].cursor if edges else None,
    )


def build_connection(
    records: Sequence[Any],
    args: PaginationArgs,
    sort_key: SortKey,
    has_more: bool,
    is_forward: bool,
    total_count: Optional[int] = None
) -> Connection:
    """Map records (already in presentation order) to a connection."""
    edges = [create_edge(record, sort_key) for record in records]
    return Connection(
        edges=edges,
        page_info=build_page_info(edges, args, has_more, is_forward),
        total_count=total_count,
    )
