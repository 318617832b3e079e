"""Interface of the ordered query store consumed by the pagination engine."""

from typing import Any, List, Protocol, Sequence, runtime_checkable

from ..pagination.conditions import OrderTerm, Predicate


@runtime_checkable
class OrderedQueryStore(Protocol):
    """A store that filters, orders and limits records.

    Implementations must support equality and strict inequality on every
    sort field and on the identifier, and must honor the requested order
    exactly, identifier last.
    """

    async def query(
        self,
        conditions: Sequence[Predicate],
        order: Sequence[OrderTerm],
        limit: int
    ) -> List[Any]:
        """Return at most ``limit`` records matching all ``conditions`` in ``order``."""
        ...

    async def count(self, conditions: Sequence[Predicate]) -> int:
        """Return the number of records matching all ``conditions``."""
        ...
