"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class OrderCreated(DomainEvent):
    """Raised when an order is added to the store."""


@dataclass(frozen=True)
class OrderUpdated(DomainEvent):
    """Raised when a stored order is replaced."""


@dataclass(frozen=True)
class OrderStatusChanged(DomainEvent):
    """Raised when an update moves an order to another status."""

    old_status: Optional[str] = None
    new_status: Optional[str] = None


@dataclass(frozen=True)
class OrderDeleted(DomainEvent):
    """Raised when a pending order is removed."""
