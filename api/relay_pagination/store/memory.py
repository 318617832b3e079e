"""In-memory ordered query store."""

import logging
from datetime import date, datetime, time
from functools import cmp_to_key
from typing import Any, Iterable, List, Sequence
from uuid import UUID

from ..pagination.conditions import And, Comparison, Operator, Or, OrderTerm, Predicate
from ..pagination.cursor import read_field
from ..pagination.models import SortDirection


logger = logging.getLogger(__name__)


def _comparable(value: Any) -> Any:
    # Cursor ids travel as strings and cursor dates may come back as datetimes
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, date) and not isinstance(value, datetime):
        return datetime.combine(value, time.min)
    return value


def _compare(left: Any, right: Any) -> int:
    left, right = _comparable(left), _comparable(right)
    if left == right:
        return 0
    return -1 if left < right else 1


def evaluate(predicate: Predicate, record: Any) -> bool:
    """Evaluate ``predicate`` against one record."""
    if isinstance(predicate, And):
        return all(evaluate(term, record) for term in predicate.terms)
    if isinstance(predicate, Or):
        return any(evaluate(term, record) for term in predicate.terms)
    if isinstance(predicate, Comparison):
        value = read_field(record, predicate.field)
        if value is None:
            # SQL semantics: comparisons with NULL never hold
            return False
        result = _compare(value, predicate.value)
        return {
            Operator.EQ: result == 0,
            Operator.NE: result != 0,
            Operator.GT: result > 0,
            Operator.GTE: result >= 0,
            Operator.LT: result < 0,
            Operator.LTE: result <= 0,
        }[predicate.op]
    raise TypeError(f"Unsupported predicate: {type(predicate).__name__}")


class InMemoryStore:
    """Ordered query store over a list of records (mappings or objects)."""

    def __init__(self, records: Iterable[Any] = ()):
        self.records: List[Any] = list(records)

    def _matching(self, conditions: Sequence[Predicate]) -> List[Any]:
        return [r for r in self.records if all(evaluate(c, r) for c in conditions)]

    async def query(
        self,
        conditions: Sequence[Predicate],
        order: Sequence[OrderTerm],
        limit: int
    ) -> List[Any]:
        """Filter, sort and limit the records."""
        def compare_records(a: Any, b: Any) -> int:
            for term in order:
                result = _compare(read_field(a, term.field), read_field(b, term.field))
                if result:
                    return -result if term.direction is SortDirection.DESC else result
            return 0

        matching = sorted(self._matching(conditions), key=cmp_to_key(compare_records))
        logger.debug(f"In-memory query matched {len(matching)} of {len(self.records)} records")
        return matching[:limit]

    async def count(self, conditions: Sequence[Predicate]) -> int:
        """Count the records matching ``conditions``."""
        return len(self._matching(conditions))
