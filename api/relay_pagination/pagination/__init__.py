"""Relay-style cursor pagination."""

from .models import (
    ValueKind,
    SortDirection,
    SortField,
    SortKey,
    CursorField,
    Cursor,
    PaginationArgs,
    Edge,
    PageInfo,
    Connection
)
from .cursor import (
    encode_cursor,
    decode_cursor,
    validate_cursor,
    extract_cursor,
    create_cursor,
    create_edge
)
from .conditions import (
    Operator,
    Comparison,
    And,
    Or,
    Predicate,
    OrderTerm,
    build_cursor_condition,
    build_conditions,
    build_order
)
from .assembler import build_page_info, build_connection
from .engine import PaginationEngine, paginate, validate_pagination_args
from .links import create_link_header

__all__ = [
    "ValueKind",
    "SortDirection",
    "SortField",
    "SortKey",
    "CursorField",
    "Cursor",
    "PaginationArgs",
    "Edge",
    "PageInfo",
    "Connection",
    "encode_cursor",
    "decode_cursor",
    "validate_cursor",
    "extract_cursor",
    "create_cursor",
    "create_edge",
    "Operator",
    "Comparison",
    "And",
    "Or",
    "Predicate",
    "OrderTerm",
    "build_cursor_condition",
    "build_conditions",
    "build_order",
    "build_page_info",
    "build_connection",
    "PaginationEngine",
    "paginate",
    "validate_pagination_args",
    "create_link_header"
]
