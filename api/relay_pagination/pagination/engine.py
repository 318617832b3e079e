"""Relay pagination engine: one ``paginate`` call per page request."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Sequence

from ..config import Settings, get_settings
from ..errors.problem_details import InvalidArgumentsError
from .assembler import build_connection
from .conditions import Predicate, build_conditions, build_order
from .cursor import check_cursor_matches, validate_cursor
from .models import Connection, PaginationArgs, SortKey

if TYPE_CHECKING:
    from ..store.base import OrderedQueryStore


logger = logging.getLogger(__name__)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_pagination_args(args: PaginationArgs) -> None:
    """Validate pagination arguments.

    Raises:
        InvalidArgumentsError: If first and last (or after and before) are
            both given, or first/last is not a positive integer
    """
    problem = None
    if args.first is not None and args.last is not None:
        problem = "Cannot specify both first and last"
    elif args.first is not None and not _is_positive_int(args.first):
        problem = "first must be a positive integer"
    elif args.last is not None and not _is_positive_int(args.last):
        problem = "last must be a positive integer"
    elif args.after is not None and args.before is not None:
        problem = "Cannot specify both after and before"

    if problem:
        logger.warning(f"Rejected pagination arguments: {problem}")
        raise InvalidArgumentsError(problem)


def is_forward(args: PaginationArgs) -> bool:
    """Backward only when last/before is given without first/after."""
    if args.first is not None or args.after is not None:
        return True
    return args.last is None and args.before is None


def get_limit(args: PaginationArgs, default_limit: int, max_limit: int) -> int:
    """Requested page size, falling back to ``default_limit`` and capped at ``max_limit``."""
    requested = args.first if args.first is not None else args.last
    if requested is None:
        requested = default_limit
    return min(requested, max_limit)


@dataclass(frozen=True)
class PaginationEngine:
    """Cursor pagination over an ordered query store.

    The engine only holds configuration, so one instance can serve any
    number of concurrent calls.

    Usage:
        engine = PaginationEngine(
            store=InMemoryStore(records),
            sort_key=SortKey.parse("createdAt:date:desc"),
        )
        connection = await engine.paginate(PaginationArgs(first=10))
    """

    store: "OrderedQueryStore"
    sort_key: SortKey
    default_limit: int = 20
    max_limit: int = 100
    include_total_count: bool = False

    def __post_init__(self):
        if not _is_positive_int(self.default_limit):
            raise ValueError("default_limit must be a positive integer")
        if not _is_positive_int(self.max_limit):
            raise ValueError("max_limit must be a positive integer")

    @classmethod
    def from_settings(
        cls,
        store: "OrderedQueryStore",
        sort_key: SortKey,
        settings: Optional[Settings] = None
    ) -> "PaginationEngine":
        """Build an engine from page size and count settings."""
        settings = settings or get_settings()
        return cls(
            store=store,
            sort_key=sort_key,
            default_limit=settings.default_page_size,
            max_limit=settings.max_page_size,
            include_total_count=settings.include_total_count,
        )

    async def paginate(
        self,
        args: PaginationArgs,
        conditions: Sequence[Predicate] = (),
        sort_key: Optional[SortKey] = None,
        include_total_count: Optional[bool] = None
    ) -> Connection:
        """Fetch one page.

        Args:
            args: Relay pagination arguments
            conditions: Base filter conditions, ANDed with the cursor condition
            sort_key: Overrides the engine's sort key for this call
            include_total_count: Overrides the engine's count setting for this call

        Returns:
            Connection with edges in sort key order

        Raises:
            InvalidArgumentsError: If the arguments conflict or are malformed
            InvalidCursorError: If the cursor cannot be decoded or does not
                match the sort key
        """
        validate_pagination_args(args)

        sort_key = sort_key or self.sort_key
        if args.order_by is not None:
            sort_key = sort_key.with_direction(args.order_by)

        forward = is_forward(args)
        limit = get_limit(args, self.default_limit, self.max_limit)

        cursor = validate_cursor(args.after or args.before)
        if cursor is not None:
            check_cursor_matches(cursor, sort_key)

        query_conditions = build_conditions(
            cursor, sort_key, is_after=args.after is not None, base_conditions=conditions
        )
        order = build_order(sort_key, forward)

        # One extra row tells whether more pages exist
        records = list(await self.store.query(query_conditions, order, limit + 1))

        has_more = len(records) > limit
        if has_more:
            records.pop()

        if not forward:
            records.reverse()

        count_requested = self.include_total_count if include_total_count is None else include_total_count
        total_count = None
        if count_requested:
            total_count = await self.store.count(list(conditions))

        logger.debug(
            f"Paginated {'forward' if forward else 'backward'} with limit {limit}: "
            f"{len(records)} records, has_more={has_more}"
        )

        return build_connection(
            records, args, sort_key, has_more=has_more, is_forward=forward, total_count=total_count
        )


async def paginate(
    store: "OrderedQueryStore",
    args: PaginationArgs,
    sort_key: SortKey,
    conditions: Sequence[Predicate] = (),
    **options: Any
) -> Connection:
    """Build an engine with ``options`` and fetch one page."""
    engine = PaginationEngine(store=store, sort_key=sort_key, **options)
    return await engine.paginate(args, conditions)
