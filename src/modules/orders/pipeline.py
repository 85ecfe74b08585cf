"""Handler chains that run before each order operation.

A request is described by an ``OrderContext``.  Each step takes the
context and either returns it, possibly enriched, to let the next step
run, or raises an ``OrderError`` which stops the chain right there.
The operation itself only runs once the whole chain went through.

Steps:
- ``order_exists``: resolves the route id to a stored order (404 if none).
- ``is_valid``: checks the request payload (400 on the first problem).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping, Optional

import structlog

from modules.orders.validators import validate_order_payload

if TYPE_CHECKING:
    from modules.orders.models import Order
    from modules.orders.services import OrderService

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class OrderContext:
    """What the steps know about the current request."""

    order_id: Optional[str] = None
    payload: Mapping[str, Any] = field(default_factory=dict)
    order: Optional[Order] = None


Step = Callable[[OrderContext], OrderContext]


def order_exists(service: OrderService) -> Step:
    """Build the lookup step.  It never changes the store."""

    def step(context: OrderContext) -> OrderContext:
        order = service.find_order(context.order_id)
        return replace(context, order=order)

    step.__name__ = "order_exists"
    return step


def is_valid(context: OrderContext) -> OrderContext:
    validate_order_payload(context.payload)
    return context


class HandlerChain:
    """An ordered sequence of steps, short-circuiting on the first error."""

    def __init__(self, *steps: Step) -> None:
        self._steps = steps

    def __len__(self) -> int:
        return len(self._steps)

    def run(self, context: OrderContext) -> OrderContext:
        for step in self._steps:
            try:
                context = step(context)
            except Exception:
                logger.info(
                    "order.chain_rejected",
                    step=getattr(step, "__name__", repr(step)),
                    order_id=context.order_id,
                )
                raise
        return context


def build_chains(service: OrderService) -> Dict[str, HandlerChain]:
    """Return the chain guarding each operation, keyed by operation name."""
    exists = order_exists(service)
    return {
        "create": HandlerChain(is_valid),
        "list": HandlerChain(),
        "read": HandlerChain(exists),
        "update": HandlerChain(exists, is_valid),
        "delete": HandlerChain(exists),
    }
