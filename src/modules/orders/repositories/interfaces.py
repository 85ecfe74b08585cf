"""Order repository interface.

Extends ``IRepository[Order]`` with the bulk operations the application
needs around the store itself (seeding, clearing between tests).

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Callable, Iterable, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.models import Order


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    Ids are unique across the store.  Each mutation replaces or removes
    a whole order, never part of one.  The conditional variants check the
    stored order and change it in one atomic step, so a rule that depends
    on the current status cannot be raced by another request.
    """

    @abstractmethod
    def replace_if(
        self, entity: Order, predicate: Callable[[Order], bool]
    ) -> Optional[Order]:
        """Overwrite the stored order if ``predicate(stored)`` holds.

        Returns the order that was replaced, or ``None`` when nothing is
        stored under ``entity.id`` or the predicate rejected it.
        """

    @abstractmethod
    def remove_if(self, id: str, predicate: Callable[[Order], bool]) -> Optional[Order]:
        """Remove the stored order if ``predicate(stored)`` holds.

        Returns the removed order, or ``None`` when it is absent or the
        predicate rejected it.
        """

    @abstractmethod
    def extend(self, orders: Iterable[Order]) -> int:
        """Insert several orders, returning how many were added."""

    @abstractmethod
    def clear(self) -> None:
        """Drop every stored order."""
