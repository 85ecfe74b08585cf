"""Order and Dish domain entities.

Orders live in memory only (see ``modules.orders.repositories``), so the
entities are plain frozen dataclasses rather than ORM models.  An update
never mutates an ``Order`` in place: the service builds a replacement and
hands it to the repository.

Business rules carried by the entities:
- ``id`` is assigned once, on creation, and never changes.
- ``status`` stays ``None`` until the first update sets it.
- A delivered order is terminal (``is_terminal``).
- Only pending orders can be deleted (``can_be_deleted``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from modules.orders.constants import DELETABLE_STATES, TERMINAL_STATES


@dataclass(frozen=True)
class Dish:
    """A line item of an order.  Not addressable on its own."""

    quantity: int
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = None
    image_url: Optional[str] = None


@dataclass(frozen=True)
class Order:
    """Order aggregate root."""

    id: str
    deliver_to: str
    mobile_number: str
    dishes: List[Dish] = field(default_factory=list)
    status: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    @property
    def can_be_deleted(self) -> bool:
        return self.status in DELETABLE_STATES
