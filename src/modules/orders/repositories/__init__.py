"""Order repositories package."""

from modules.orders.repositories.interfaces import IOrderRepository
from modules.orders.repositories.memory_repository import (
    InMemoryOrderRepository,
    order_repository,
)

__all__ = ["IOrderRepository", "InMemoryOrderRepository", "order_repository"]
