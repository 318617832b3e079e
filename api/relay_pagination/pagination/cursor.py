"""Cursor encoding and decoding for relay pagination.

A cursor token is base64 of a JSON document holding the sort field values
of one record plus its id:

    {"fields": [{"field": "createdAt", "value": "2025-01-15T10:30:00+00:00", "isDate": true}],
     "id": "abc-123"}

Tokens issued by the single-field format
``{"field": ..., "value": ..., "id": ..., "isDate": ...}`` are still
accepted on decode.
"""

import base64
import json
import logging
import math
from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any, List, Optional
from uuid import UUID

from ..errors.problem_details import InvalidCursorError
from .models import Cursor, CursorField, Edge, SortField, SortKey, ValueKind


logger = logging.getLogger(__name__)


def read_field(record: Any, name: str) -> Any:
    """Read ``name`` from a mapping-like record or an attribute object."""
    if isinstance(record, Mapping) or hasattr(record, "keys"):
        try:
            return record[name]
        except KeyError:
            return None
    return getattr(record, name, None)


def _encode_value(field: CursorField) -> Any:
    if field.kind is ValueKind.DATE:
        return field.value.isoformat()
    return field.value


def _decode_date(value: Any) -> date:
    if isinstance(value, bool):
        raise ValueError("boolean is not a date")
    if isinstance(value, (int, float)):
        # Epoch milliseconds
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if not isinstance(value, str):
        raise ValueError(f"unsupported date value: {value!r}")
    if len(value) == 10:
        return date.fromisoformat(value)
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-finite number in cursor: {name}")


def _decode_field(raw: Any) -> CursorField:
    if not isinstance(raw, dict) or "field" not in raw or "value" not in raw:
        raise ValueError("cursor field must have 'field' and 'value'")

    value = raw["value"]
    if raw.get("isDate"):
        return CursorField(field=raw["field"], value=_decode_date(value), kind=ValueKind.DATE)
    if isinstance(value, bool) or value is None:
        raise ValueError(f"unsupported cursor value: {value!r}")
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            raise ValueError(f"non-finite number in cursor: {value!r}")
        return CursorField(field=raw["field"], value=value, kind=ValueKind.NUMBER)
    if isinstance(value, str):
        return CursorField(field=raw["field"], value=value, kind=ValueKind.STRING)
    raise ValueError(f"unsupported cursor value: {value!r}")


def encode_cursor(cursor: Cursor) -> str:
    """Encode a cursor to an opaque, URL-safe token.

    Args:
        cursor: Sort field values and id of one record

    Returns:
        Base64 encoded cursor string
    """
    payload = {
        "fields": [
            {"field": f.field, "value": _encode_value(f), "isDate": f.kind is ValueKind.DATE}
            for f in cursor.fields
        ],
        "id": cursor.id,
    }
    cursor_json = json.dumps(payload, separators=(",", ":"))
    return base64.urlsafe_b64encode(cursor_json.encode("utf-8")).decode("ascii")


def decode_cursor(token: str) -> Cursor:
    """Decode a cursor token.

    Args:
        token: Base64 encoded cursor string

    Returns:
        Decoded cursor with typed field values

    Raises:
        InvalidCursorError: If the token is not valid base64/JSON or lacks
            the ``fields``/``id`` structure
    """
    if not token:
        raise InvalidCursorError("Empty cursor provided")

    try:
        # Accept both the URL-safe and the standard alphabet
        normalized = token.strip().replace("-", "+").replace("_", "/")
        cursor_bytes = base64.b64decode(normalized.encode("ascii"), validate=True)
        payload = json.loads(cursor_bytes.decode("utf-8"), parse_constant=_reject_constant)
        if not isinstance(payload, dict):
            raise ValueError("cursor payload must be an object")

        if "fields" not in payload and "field" in payload:
            # Single-field format
            fields = [_decode_field(payload)]
        elif isinstance(payload.get("fields"), list):
            fields = [_decode_field(raw) for raw in payload["fields"]]
        else:
            raise ValueError("cursor is missing 'fields'")

        cursor_id = payload.get("id")
        if cursor_id is None or isinstance(cursor_id, bool) or not isinstance(cursor_id, (int, str)):
            raise ValueError("cursor is missing 'id'")

        return Cursor(fields=tuple(fields), id=cursor_id)

    except (ValueError, TypeError, OverflowError, OSError) as e:
        logger.warning(f"Rejected cursor token: {e}")
        raise InvalidCursorError(f"Invalid cursor format: {e}")


def validate_cursor(token: Optional[str]) -> Optional[Cursor]:
    """Decode ``token`` if one was given, returning None for a missing cursor."""
    if not token:
        return None
    return decode_cursor(token)


def check_cursor_matches(cursor: Cursor, sort_key: SortKey) -> None:
    """Ensure a cursor was produced under ``sort_key``.

    Raises:
        InvalidCursorError: If field names, order or kinds differ
    """
    expected = [(f.field, f.kind) for f in sort_key.fields]
    actual = [(f.field, f.kind) for f in cursor.fields]
    if expected != actual:
        logger.warning(f"Cursor fields {actual} do not match sort key {expected}")
        raise InvalidCursorError("Cursor does not match the requested sort order")


def _cursor_id(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    return value


def _check_kind(sort_field: SortField, value: Any) -> None:
    kind = sort_field.kind
    if kind is ValueKind.DATE:
        valid = isinstance(value, date)
    elif kind is ValueKind.NUMBER:
        valid = isinstance(value, (int, float)) and not isinstance(value, bool)
    else:
        valid = isinstance(value, str)
    if not valid:
        raise ValueError(f"Field {sort_field.field} holds {type(value).__name__}, expected {kind.value}")


def extract_cursor(record: Any, sort_key: SortKey) -> Cursor:
    """Build the cursor of ``record`` under ``sort_key``.

    Raises:
        ValueError: If the record has no id or a sort field value is missing
    """
    record_id = read_field(record, sort_key.id_field)
    if record_id is None:
        raise ValueError(f"Record must have an '{sort_key.id_field}' field")

    fields: List[CursorField] = []
    for sort_field in sort_key.fields:
        value = read_field(record, sort_field.field)
        if value is None:
            raise ValueError(f"Field {sort_field.field} not found in record")
        _check_kind(sort_field, value)
        fields.append(CursorField(field=sort_field.field, value=value, kind=sort_field.kind))

    return Cursor(fields=tuple(fields), id=_cursor_id(record_id))


def create_cursor(record: Any, sort_key: SortKey) -> str:
    """Create the cursor token of ``record``."""
    return encode_cursor(extract_cursor(record, sort_key))


def create_edge(record: Any, sort_key: SortKey) -> Edge:
    """Pair ``record`` with its cursor token."""
    return Edge(node=record, cursor=create_cursor(record, sort_key))
