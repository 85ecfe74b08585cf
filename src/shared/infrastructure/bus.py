"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, List, Type

import structlog

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    """Synchronous in-process event bus.

    A handler subscribed to a base event class also receives every
    subclass of it.  Handler errors propagate to the publisher.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def publish(self, event: DomainEvent) -> None:
        delivered = 0
        for event_class in type(event).__mro__:
            for handler in self._handlers.get(event_class, []):
                handler.handle(event)
                delivered += 1
        logger.debug(
            "event_bus.published",
            event_name=event.event_name,
            aggregate_id=event.aggregate_id,
            handlers=delivered,
        )

    def clear(self) -> None:
        self._handlers.clear()


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
