"""Unit tests for seek condition and order construction."""

from datetime import datetime, timezone

import pytest

from relay_pagination.pagination.conditions import (
    And, Comparison, Operator, Or, OrderTerm,
    build_conditions, build_cursor_condition, build_order
)
from relay_pagination.pagination.cursor import extract_cursor
from relay_pagination.pagination.models import (
    Cursor, CursorField, SortDirection, SortField, SortKey, ValueKind
)
from relay_pagination.store.memory import evaluate


class TestBuildCursorCondition:
    """Test lexicographic cursor predicates."""

    def test_single_field_ascending_after(self, score_key):
        """after in ascending order: score > 20 OR (score = 20 AND id > 2)."""
        cursor = Cursor(fields=(CursorField(field="score", value=20, kind=ValueKind.NUMBER),), id=2)

        condition = build_cursor_condition(cursor, score_key, is_after=True)

        assert condition == Or(terms=(
            Comparison(field="score", op=Operator.GT, value=20),
            And(terms=(
                Comparison(field="score", op=Operator.EQ, value=20),
                Comparison(field="id", op=Operator.GT, value=2),
            )),
        ))

    def test_single_field_ascending_before(self, score_key):
        """before mirrors after."""
        cursor = Cursor(fields=(CursorField(field="score", value=20, kind=ValueKind.NUMBER),), id=2)

        condition = build_cursor_condition(cursor, score_key, is_after=False)

        assert condition.terms[0] == Comparison(field="score", op=Operator.LT, value=20)
        assert condition.terms[1].terms[1] == Comparison(field="id", op=Operator.LT, value=2)

    def test_descending_after_is_less_than(self):
        sort_key = SortKey(fields=(SortField(field="score", kind=ValueKind.NUMBER, direction=SortDirection.DESC),))
        cursor = Cursor(fields=(CursorField(field="score", value=5, kind=ValueKind.NUMBER),), id=1)

        condition = build_cursor_condition(cursor, sort_key, is_after=True)

        assert condition.terms[0].op == Operator.LT
        # id follows the direction of the last explicit field
        assert condition.terms[1].terms[1].op == Operator.LT

    def test_mixed_directions_nest_per_field(self):
        """(a ASC, b DESC) after (1, 'x', 7)."""
        sort_key = SortKey(fields=(
            SortField(field="a", kind=ValueKind.NUMBER),
            SortField(field="b", direction=SortDirection.DESC),
        ))
        cursor = Cursor(fields=(
            CursorField(field="a", value=1, kind=ValueKind.NUMBER),
            CursorField(field="b", value="x", kind=ValueKind.STRING),
        ), id=7)

        condition = build_cursor_condition(cursor, sort_key, is_after=True)

        assert condition == Or(terms=(
            Comparison(field="a", op=Operator.GT, value=1),
            And(terms=(
                Comparison(field="a", op=Operator.EQ, value=1),
                Or(terms=(
                    Comparison(field="b", op=Operator.LT, value="x"),
                    And(terms=(
                        Comparison(field="b", op=Operator.EQ, value="x"),
                        Comparison(field="id", op=Operator.LT, value=7),
                    )),
                )),
            )),
        ))

    def test_matches_tuple_comparison(self, file_key, file_records):
        """The predicate selects exactly the records past the cursor in key order."""
        ordered = sorted(
            file_records,
            key=lambda r: (r["created_at"], r["name"], r["id"]),
            reverse=True
        )
        for position, pivot in enumerate(ordered):
            cursor = extract_cursor(pivot, file_key)

            after = build_cursor_condition(cursor, file_key, is_after=True)
            before = build_cursor_condition(cursor, file_key, is_after=False)

            assert [r for r in ordered if evaluate(after, r)] == ordered[position + 1:]
            assert [r for r in ordered if evaluate(before, r)] == ordered[:position]


class TestBuildConditions:
    """Test combination with caller conditions."""

    def test_no_cursor_keeps_base_conditions(self, score_key):
        base = [Comparison(field="name", op=Operator.NE, value="x")]
        assert build_conditions(None, score_key, is_after=True, base_conditions=base) == base

    def test_no_cursor_no_conditions(self, score_key):
        assert build_conditions(None, score_key, is_after=True) == []

    def test_cursor_condition_appended(self, score_key):
        base = [Comparison(field="name", op=Operator.NE, value="x")]
        cursor = Cursor(fields=(CursorField(field="score", value=1, kind=ValueKind.NUMBER),), id=1)

        conditions = build_conditions(cursor, score_key, is_after=True, base_conditions=base)

        assert conditions[0] == base[0]
        assert isinstance(conditions[1], Or)
        assert len(conditions) == 2


class TestBuildOrder:
    """Test physical order construction."""

    def test_forward_order_appends_id(self, file_key):
        assert build_order(file_key, is_forward=True) == [
            OrderTerm(field="created_at", direction=SortDirection.DESC),
            OrderTerm(field="name", direction=SortDirection.DESC),
            OrderTerm(field="id", direction=SortDirection.DESC),
        ]

    def test_backward_order_is_reversed(self, file_key):
        assert build_order(file_key, is_forward=False) == [
            OrderTerm(field="created_at", direction=SortDirection.ASC),
            OrderTerm(field="name", direction=SortDirection.ASC),
            OrderTerm(field="id", direction=SortDirection.ASC),
        ]

    def test_custom_id_field(self):
        sort_key = SortKey(fields=(SortField(field="name"),), id_field="uuid")
        assert build_order(sort_key, is_forward=True)[-1] == OrderTerm(field="uuid", direction=SortDirection.ASC)


class TestSortKey:
    """Test sort key helpers."""

    def test_parse(self):
        sort_key = SortKey.parse("createdAt:date:desc, name")
        assert sort_key.fields == (
            SortField(field="createdAt", kind=ValueKind.DATE, direction=SortDirection.DESC),
            SortField(field="name", kind=ValueKind.STRING, direction=SortDirection.ASC),
        )

    def test_with_direction(self, file_key):
        flipped = file_key.with_direction("asc")
        assert [f.direction for f in flipped.fields] == [SortDirection.ASC, SortDirection.ASC]
        assert flipped.id_direction == SortDirection.ASC
        # The original key is unchanged
        assert file_key.id_direction == SortDirection.DESC

    def test_empty_key_rejected(self):
        with pytest.raises(ValueError):
            SortKey(fields=())

    def test_duplicate_fields_rejected(self):
        with pytest.raises(ValueError, match="unique"):
            SortKey.parse("name,name")

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValueError):
            SortKey.parse("created:timestamp")
