"""Seek conditions and ordering for multi-field cursor pagination.

Conditions are a small predicate tree that every ordered query store can
evaluate or render. For a sort key ``(a ASC, b DESC)`` with id tie-break
and a cursor at ``(va, vb, vid)``, paging ``after`` the cursor yields::

    a > va OR (a = va AND (b < vb OR (b = vb AND id < vid)))

which is the tuple comparison ``(a, b, id) > (va, vb, vid)`` under the
key's per-field directions.
"""

from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict

from .models import Cursor, SortDirection, SortKey


class Operator(str, Enum):
    """Comparison operators understood by every store."""

    EQ = "eq"
    NE = "ne"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"


class Comparison(BaseModel):
    """``field <op> value``."""

    field: str
    op: Operator
    value: Any

    model_config = ConfigDict(frozen=True)


class And(BaseModel):
    """All terms hold."""

    terms: Tuple["Predicate", ...]

    model_config = ConfigDict(frozen=True)


class Or(BaseModel):
    """At least one term holds."""

    terms: Tuple["Predicate", ...]

    model_config = ConfigDict(frozen=True)


Predicate = Union[Comparison, And, Or]

And.model_rebuild()
Or.model_rebuild()


class OrderTerm(BaseModel):
    """One ORDER BY term."""

    field: str
    direction: SortDirection

    model_config = ConfigDict(frozen=True)


def eq(field: str, value: Any) -> Comparison:
    return Comparison(field=field, op=Operator.EQ, value=value)


def gt(field: str, value: Any) -> Comparison:
    return Comparison(field=field, op=Operator.GT, value=value)


def lt(field: str, value: Any) -> Comparison:
    return Comparison(field=field, op=Operator.LT, value=value)


def and_(*terms: Predicate) -> Predicate:
    if len(terms) == 1:
        return terms[0]
    return And(terms=terms)


def or_(*terms: Predicate) -> Predicate:
    if len(terms) == 1:
        return terms[0]
    return Or(terms=terms)


def _beyond(field: str, value: Any, direction: SortDirection, is_after: bool) -> Comparison:
    """Strict comparison selecting rows past ``value`` for one column.

    ``after`` an ascending column means greater, ``after`` a descending
    column means less; ``before`` mirrors ``after``.
    """
    if (direction is SortDirection.ASC) == is_after:
        return gt(field, value)
    return lt(field, value)


def build_cursor_condition(cursor: Cursor, sort_key: SortKey, is_after: bool) -> Predicate:
    """Build the predicate for rows strictly beyond ``cursor`` in ``sort_key`` order.

    Args:
        cursor: Decoded cursor, fields in sort key order
        sort_key: Active sort key
        is_after: True for an ``after`` cursor, False for ``before``

    Returns:
        Predicate equivalent to lexicographic comparison over the key fields
        followed by the id
    """
    # The id term ends the recursion: ids are unique, so it is always strict
    condition: Predicate = _beyond(sort_key.id_field, cursor.id, sort_key.id_direction, is_after)

    for sort_field, cursor_field in reversed(list(zip(sort_key.fields, cursor.fields))):
        condition = or_(
            _beyond(sort_field.field, cursor_field.value, sort_field.direction, is_after),
            and_(eq(sort_field.field, cursor_field.value), condition),
        )

    return condition


def build_conditions(
    cursor: Optional[Cursor],
    sort_key: SortKey,
    is_after: bool,
    base_conditions: Sequence[Predicate] = ()
) -> List[Predicate]:
    """Combine caller conditions with the cursor condition (ANDed by the store).

    Without a cursor only the caller conditions apply.
    """
    conditions = list(base_conditions)
    if cursor is not None:
        conditions.append(build_cursor_condition(cursor, sort_key, is_after))
    return conditions


def build_order(sort_key: SortKey, is_forward: bool) -> List[OrderTerm]:
    """Build the physical order for a query.

    Backward traversal requests the reverse of the key order so the last
    rows come first; the id tie-break is always the final term.
    """
    terms = [OrderTerm(field=f.field, direction=f.direction) for f in sort_key.fields]
    terms.append(OrderTerm(field=sort_key.id_field, direction=sort_key.id_direction))

    if not is_forward:
        terms = [OrderTerm(field=t.field, direction=t.direction.reversed()) for t in terms]

    return terms
