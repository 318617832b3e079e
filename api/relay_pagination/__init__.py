"""Cursor-based relay pagination over ordered query stores."""

from .errors import InvalidArgumentsError, InvalidCursorError, StoreError
from .pagination import (
    Connection,
    PaginationArgs,
    PaginationEngine,
    SortDirection,
    SortField,
    SortKey,
    ValueKind,
    paginate
)
from .store import InMemoryStore, OrderedQueryStore, PostgresStore

__version__ = "1.0.0"

__all__ = [
    "InvalidArgumentsError",
    "InvalidCursorError",
    "StoreError",
    "Connection",
    "PaginationArgs",
    "PaginationEngine",
    "SortDirection",
    "SortField",
    "SortKey",
    "ValueKind",
    "paginate",
    "InMemoryStore",
    "OrderedQueryStore",
    "PostgresStore"
]
