"""Order service layer (Use Cases).

Orchestrates the order lifecycle on top of an injected repository.
Every command checks its rules first and touches the store only once
all of them passed, so a rejected request never leaves a partial change.

Business rules enforced:
- Orders are created with a fresh scalar id and no status.
- An update must carry the route id (or no id) and a known status.
- A delivered order can no longer be changed.
- Only pending orders can be deleted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import structlog

from modules.orders.constants import OrderStatus
from modules.orders.events import (
    OrderCreated,
    OrderDeleted,
    OrderStatusChanged,
    OrderUpdated,
)
from modules.orders.exceptions import (
    CannotDeleteNonPending,
    IdMismatch,
    ImmutableDeliveredOrder,
    MissingOrInvalidStatus,
    OrderNotFound,
)
from modules.orders.ids import next_id
from modules.orders.models import Order

if TYPE_CHECKING:
    from modules.orders.dtos import CreateOrderDTO, UpdateOrderDTO
    from modules.orders.ids import IdGenerator
    from modules.orders.repositories.interfaces import IOrderRepository
    from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives the repository, the id generator and the event bus via
    constructor injection (DIP).
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        id_generator: IdGenerator = next_id,
        event_bus: Optional[IEventBus] = None,
    ) -> None:
        self._order_repo = order_repository
        self._next_id = id_generator
        self._event_bus = event_bus

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Store a new order built from a validated payload."""
        order = Order(
            id=self._next_id(),
            deliver_to=dto.deliver_to,
            mobile_number=dto.mobile_number,
            dishes=dto.dish_entities(),
        )
        self._order_repo.insert(order)

        logger.info("order.created", order_id=order.id, dish_count=len(order.dishes))
        self._publish(OrderCreated(aggregate_id=order.id))
        return order

    def update_order(self, order_id: str, dto: UpdateOrderDTO) -> Order:
        """Replace the stored order ``order_id`` with the payload's fields.

        Checks run in this order and the first failure wins:

        1. A payload ``id`` must match ``order_id``.
        2. ``status`` must be one of the known statuses.
        3. Neither the stored nor the requested status may be delivered.

        Raises:
            OrderNotFound: nothing is stored under ``order_id``.
            IdMismatch: payload id differs from the route id.
            MissingOrInvalidStatus: status absent or unknown.
            ImmutableDeliveredOrder: the order is or would become delivered.
        """
        current = self.find_order(order_id)
        log = logger.bind(
            order_id=order_id,
            current_status=current.status,
            new_status=dto.status,
        )

        if dto.id is not None and dto.id != order_id:
            log.warning("order.id_mismatch", payload_id=dto.id)
            raise IdMismatch(dto.id, order_id)
        if dto.status not in OrderStatus.values:
            log.warning("order.invalid_status")
            raise MissingOrInvalidStatus()
        if current.is_terminal or dto.status == OrderStatus.DELIVERED:
            log.warning("order.delivered_is_immutable")
            raise ImmutableDeliveredOrder()

        updated = Order(
            id=order_id,
            deliver_to=dto.deliver_to,
            mobile_number=dto.mobile_number,
            dishes=dto.dish_entities(),
            status=dto.status,
        )
        previous = self._order_repo.replace_if(updated, _is_mutable)
        if previous is None:
            # Changed or removed since it was read.
            if self._order_repo.find(order_id) is None:
                raise OrderNotFound(order_id)
            log.warning("order.delivered_is_immutable")
            raise ImmutableDeliveredOrder()

        log.info("order.updated")
        self._publish(OrderUpdated(aggregate_id=order_id))
        if previous.status != updated.status:
            self._publish(
                OrderStatusChanged(
                    aggregate_id=order_id,
                    old_status=previous.status,
                    new_status=updated.status,
                )
            )
        return updated

    def delete_order(self, order_id: str) -> None:
        """Remove a pending order.

        Raises:
            OrderNotFound: nothing is stored under ``order_id``.
            CannotDeleteNonPending: the order is not pending.
        """
        order = self.find_order(order_id)
        log = logger.bind(order_id=order_id, status=order.status)

        if not order.can_be_deleted or not self._order_repo.remove_if(
            order_id, _is_deletable
        ):
            log.warning("order.delete_not_allowed")
            raise CannotDeleteNonPending()

        log.info("order.deleted")
        self._publish(OrderDeleted(aggregate_id=order_id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_order(self, order_id: str) -> Order:
        """Look an order up by exact id.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.find(order_id)
        if order is None:
            logger.info("order.not_found", order_id=order_id)
            raise OrderNotFound(order_id)
        return order

    def get_order(self, order_id: str) -> Order:
        """Return the stored order verbatim."""
        return self.find_order(order_id)

    def list_orders(self) -> List[Order]:
        """Return every stored order, unfiltered."""
        return self._order_repo.list_all()

    # ------------------------------------------------------------------
    # Domain events
    # ------------------------------------------------------------------

    def _publish(self, event) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)


def _is_mutable(order: Order) -> bool:
    return not order.is_terminal


def _is_deletable(order: Order) -> bool:
    return order.can_be_deleted
