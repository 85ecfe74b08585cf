"""In-memory implementation of the Order repository.

Satisfies ``IOrderRepository`` with a plain list that lives as long as
the process.  Django may serve requests from several threads, so every
read and write of the list happens under one lock; each call is a single
atomic step with respect to the others.
"""

from __future__ import annotations

import threading
from typing import Callable, Iterable, List, Optional

import structlog

from modules.orders.models import Order
from modules.orders.repositories.interfaces import IOrderRepository

logger = structlog.get_logger(__name__)


class InMemoryOrderRepository(IOrderRepository):
    """Concrete Order repository backed by a process-local list."""

    def __init__(self, orders: Optional[Iterable[Order]] = None) -> None:
        self._orders: List[Order] = []
        self._lock = threading.Lock()
        if orders:
            self.extend(orders)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def find(self, id: str) -> Optional[Order]:
        with self._lock:
            index = self._index_of(id)
            return self._orders[index] if index is not None else None

    def list_all(self) -> List[Order]:
        with self._lock:
            return list(self._orders)

    def __len__(self) -> int:
        with self._lock:
            return len(self._orders)

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def insert(self, entity: Order) -> Order:
        """Append an order.  Raises ``ValueError`` if the id is taken."""
        with self._lock:
            if self._index_of(entity.id) is not None:
                raise ValueError(f"Order {entity.id} already exists.")
            self._orders.append(entity)
        logger.debug("order_store.inserted", order_id=entity.id)
        return entity

    def replace(self, entity: Order) -> bool:
        return self.replace_if(entity, _any_order) is not None

    def remove(self, id: str) -> bool:
        return self.remove_if(id, _any_order) is not None

    def replace_if(
        self, entity: Order, predicate: Callable[[Order], bool]
    ) -> Optional[Order]:
        with self._lock:
            index = self._index_of(entity.id)
            if index is None or not predicate(self._orders[index]):
                return None
            previous = self._orders[index]
            self._orders[index] = entity
        logger.debug("order_store.replaced", order_id=entity.id)
        return previous

    def remove_if(self, id: str, predicate: Callable[[Order], bool]) -> Optional[Order]:
        with self._lock:
            index = self._index_of(id)
            if index is None or not predicate(self._orders[index]):
                return None
            removed = self._orders.pop(index)
        logger.debug("order_store.removed", order_id=id)
        return removed

    def extend(self, orders: Iterable[Order]) -> int:
        added = 0
        for order in orders:
            self.insert(order)
            added += 1
        return added

    def clear(self) -> None:
        with self._lock:
            self._orders.clear()

    def _index_of(self, id: str) -> Optional[int]:
        # Callers hold the lock.
        for index, order in enumerate(self._orders):
            if order.id == id:
                return index
        return None


def _any_order(order: Order) -> bool:
    return True


# Process-wide store used by the HTTP layer (one per worker process).

order_repository = InMemoryOrderRepository()
