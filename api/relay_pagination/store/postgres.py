"""PostgreSQL ordered query store backed by asyncpg."""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Tuple

import asyncpg
from asyncpg import Pool

from ..db.connection import get_db_pool
from ..errors.problem_details import StoreError
from ..pagination.conditions import And, Comparison, Operator, Or, OrderTerm, Predicate
from ..pagination.models import SortDirection


logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_SQL_OPERATORS = {
    Operator.EQ: "=",
    Operator.NE: "<>",
    Operator.GT: ">",
    Operator.GTE: ">=",
    Operator.LT: "<",
    Operator.LTE: "<=",
}


def quote_identifier(name: str) -> str:
    """Quote a column or table name, allowing ``schema.table``.

    Raises:
        ValueError: If any part is not a plain identifier
    """
    parts = name.split(".")
    for part in parts:
        if not _IDENTIFIER.match(part):
            raise ValueError(f"Invalid SQL identifier: {name!r}")
    return ".".join(f'"{part}"' for part in parts)


class _Params:
    """Positional ``$n`` parameter collector."""

    def __init__(self, start: int = 0):
        self.values: List[Any] = []
        self._start = start

    def add(self, value: Any) -> str:
        self.values.append(value)
        return f"${self._start + len(self.values)}"


def _render(predicate: Predicate, params: _Params) -> str:
    if isinstance(predicate, Comparison):
        return f"{quote_identifier(predicate.field)} {_SQL_OPERATORS[predicate.op]} {params.add(predicate.value)}"
    if isinstance(predicate, And):
        return "(" + " AND ".join(_render(term, params) for term in predicate.terms) + ")"
    if isinstance(predicate, Or):
        return "(" + " OR ".join(_render(term, params) for term in predicate.terms) + ")"
    raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")


def build_where_clause(conditions: Sequence[Predicate]) -> Tuple[str, List[Any]]:
    """Build a WHERE clause for ANDed conditions.

    Args:
        conditions: Predicates to combine

    Returns:
        Tuple of (where_clause, parameters); the clause is empty when there
        are no conditions
    """
    params = _Params()
    rendered = [_render(condition, params) for condition in conditions]
    if not rendered:
        return "", []
    return "WHERE " + " AND ".join(rendered), params.values


def build_order_clause(order: Sequence[OrderTerm]) -> str:
    """Build ORDER BY clause for pagination.

    Args:
        order: Order terms, id last

    Returns:
        ORDER BY clause string
    """
    terms = [
        f"{quote_identifier(term.field)} {'DESC' if term.direction is SortDirection.DESC else 'ASC'}"
        for term in order
    ]
    return "ORDER BY " + ", ".join(terms)


class PostgresStore:
    """Ordered query store over one PostgreSQL table or view."""

    def __init__(
        self,
        table: str,
        columns: Optional[Sequence[str]] = None,
        pool: Optional[Pool] = None
    ):
        self.table = quote_identifier(table)
        self.columns = ", ".join(quote_identifier(c) for c in columns) if columns else "*"
        self._pool = pool

    async def _get_pool(self) -> Pool:
        if self._pool is None:
            self._pool = await get_db_pool()
        return self._pool

    async def query(
        self,
        conditions: Sequence[Predicate],
        order: Sequence[OrderTerm],
        limit: int
    ) -> List[Dict[str, Any]]:
        """Run a filtered, ordered and limited SELECT.

        Raises:
            StoreError: If the database operation fails
        """
        where_clause, params = build_where_clause(conditions)
        order_clause = build_order_clause(order)
        query = f"""
            SELECT {self.columns}
            FROM {self.table}
            {where_clause}
            {order_clause}
            LIMIT ${len(params) + 1}
        """

        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                rows = await conn.fetch(query, *params, limit)
        except asyncpg.PostgresError as e:
            logger.error(f"Database error querying {self.table}: {e}")
            raise StoreError(f"Database error: {e}") from e
        except (OSError, asyncpg.InterfaceError) as e:
            logger.error(f"Connection error querying {self.table}: {e}")
            raise StoreError(f"Database unavailable: {e}") from e

        logger.debug(f"Fetched {len(rows)} rows from {self.table}")
        return [dict(row) for row in rows]

    async def count(self, conditions: Sequence[Predicate]) -> int:
        """Count rows matching ``conditions``.

        Raises:
            StoreError: If the database operation fails
        """
        where_clause, params = build_where_clause(conditions)
        query = f"SELECT COUNT(*) FROM {self.table} {where_clause}".rstrip()

        try:
            pool = await self._get_pool()
            async with pool.acquire() as conn:
                count = await conn.fetchval(query, *params)
        except asyncpg.PostgresError as e:
            logger.error(f"Database error counting {self.table}: {e}")
            raise StoreError(f"Database error: {e}") from e
        except (OSError, asyncpg.InterfaceError) as e:
            logger.error(f"Connection error counting {self.table}: {e}")
            raise StoreError(f"Database unavailable: {e}") from e

        return count or 0
