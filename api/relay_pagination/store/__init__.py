"""Ordered query stores."""

from .base import OrderedQueryStore
from .memory import InMemoryStore
from .postgres import PostgresStore

__all__ = [
    "OrderedQueryStore",
    "InMemoryStore",
    "PostgresStore"
]
