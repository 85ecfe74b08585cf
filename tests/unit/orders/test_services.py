"""Unit tests for OrderService.

Covers:
- Creation: scalar generated id, no status, stored once.
- Lookup by id and ``OrderNotFound``.
- Update rules in order: id mismatch, missing/invalid status, delivered.
- No mutation after a rejected update or delete.
- Successful update persisted under the route id.
- Deletion of pending orders only.
- Domain events published on each change.
- Status rules hold when the order changes between lookup and write.
"""

from __future__ import annotations

import itertools
from dataclasses import replace

import pytest

from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, UpdateOrderDTO
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
    OrderValidationError,
)
from modules.orders.ids import next_id
from modules.orders.models import Order
from modules.orders.repositories import InMemoryOrderRepository
from modules.orders.services import OrderService
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


class CapturingHandler:
    def __init__(self) -> None:
        self.events = []

    def handle(self, event) -> None:
        self.events.append(event)


@pytest.fixture()
def repo():
    return InMemoryOrderRepository()


@pytest.fixture()
def captured():
    return CapturingHandler()


@pytest.fixture()
def service(repo, captured):
    counter = itertools.count(1)
    bus = InMemoryEventBus()
    for event_class in (OrderCreated, OrderUpdated, OrderStatusChanged, OrderDeleted):
        bus.subscribe(event_class, captured)
    return OrderService(
        order_repository=repo,
        id_generator=lambda: f"order-{next(counter)}",
        event_bus=bus,
    )


@pytest.fixture()
def create_dto(order_payload):
    return CreateOrderDTO.from_payload(order_payload)


@pytest.fixture()
def order(service, create_dto):
    return service.create_order(create_dto)


def update_dto(payload, **changes):
    return UpdateOrderDTO.from_payload({**payload, **changes})


def set_status(service, order_id, payload, status):
    return service.update_order(order_id, update_dto(payload, status=status))


# ===========================================================================
# create_order
# ===========================================================================


class TestCreateOrder:
    def test_assigns_generated_scalar_id(self, order):
        assert order.id == "order-1"

    def test_copies_fields_and_leaves_status_unset(self, order):
        assert order.deliver_to == "120 Main St"
        assert order.mobile_number == "555-1234"
        assert order.dishes[0].quantity == 2
        assert order.status is None

    def test_stores_the_order_once(self, service, repo, order, create_dto):
        second = service.create_order(create_dto)

        ids = [o.id for o in service.list_orders()]
        assert ids == [order.id, second.id]
        assert len(set(ids)) == 2

    def test_default_id_generator_returns_hex_string(self, repo, create_dto):
        created = OrderService(order_repository=repo).create_order(create_dto)
        assert isinstance(created.id, str)
        assert len(created.id) == 32
        int(created.id, 16)

    def test_publishes_created_event(self, order, captured):
        assert [type(e) for e in captured.events] == [OrderCreated]
        assert captured.events[0].aggregate_id == order.id

    def test_next_id_is_unique(self):
        assert len({next_id() for _ in range(100)}) == 100


# ===========================================================================
# Queries
# ===========================================================================


class TestQueries:
    def test_get_order_returns_stored_record(self, service, order):
        assert service.get_order(order.id) is order

    def test_unknown_id_raises_not_found(self, service):
        with pytest.raises(OrderNotFound, match="Order does not exist: missing") as exc:
            service.find_order("missing")
        assert exc.value.status_code == 404

    def test_list_orders_empty(self, service):
        assert service.list_orders() == []


# ===========================================================================
# update_order
# ===========================================================================


class TestUpdateOrderSuccess:
    def test_replaces_stored_record(self, service, order, order_payload):
        payload = {**order_payload, "deliverTo": "9 Side Rd"}
        updated = set_status(service, order.id, payload, "preparing")

        assert updated.id == order.id
        assert updated.deliver_to == "9 Side Rd"
        assert updated.status == OrderStatus.PREPARING
        assert service.get_order(order.id) == updated

    def test_matching_id_is_accepted(self, service, order, order_payload):
        updated = service.update_order(
            order.id, update_dto(order_payload, id=order.id, status="pending")
        )
        assert updated.status == "pending"

    def test_publishes_updated_and_status_changed(
        self, service, order, order_payload, captured
    ):
        set_status(service, order.id, order_payload, "out-for-delivery")

        kinds = [type(e) for e in captured.events]
        assert kinds == [OrderCreated, OrderUpdated, OrderStatusChanged]
        changed = captured.events[-1]
        assert changed.old_status is None
        assert changed.new_status == "out-for-delivery"

    def test_same_status_does_not_publish_status_changed(
        self, service, order, order_payload, captured
    ):
        set_status(service, order.id, order_payload, "pending")
        set_status(service, order.id, order_payload, "pending")

        assert [type(e) for e in captured.events].count(OrderStatusChanged) == 1


class TestUpdateOrderRules:
    def test_unknown_order(self, service, order_payload):
        with pytest.raises(OrderNotFound):
            set_status(service, "missing", order_payload, "pending")

    def test_id_mismatch(self, service, order, order_payload):
        with pytest.raises(IdMismatch) as exc:
            service.update_order(
                order.id, update_dto(order_payload, id="other", status="pending")
            )
        assert "Order: other" in exc.value.message
        assert f"Route: {order.id}" in exc.value.message

    def test_numeric_id_does_not_match_text_route(self, service, repo, order_payload):
        repo.insert(Order(id="5", deliver_to="1 Elm St", mobile_number="555-0000", dishes=[]))
        with pytest.raises(IdMismatch):
            service.update_order("5", update_dto(order_payload, id=5, status="pending"))
        assert repo.find("5").status is None

    def test_id_mismatch_checked_before_status(self, service, order, order_payload):
        with pytest.raises(IdMismatch):
            service.update_order(order.id, update_dto(order_payload, id="other"))

    @pytest.mark.parametrize("status", [None, "", "invalid", "cancelled"])
    def test_missing_or_invalid_status(self, service, order, order_payload, status):
        with pytest.raises(MissingOrInvalidStatus) as exc:
            set_status(service, order.id, order_payload, status)
        assert exc.value.message == (
            "Order must have a status of pending, preparing, out-for-delivery, delivered"
        )

    def test_target_status_delivered(self, service, order, order_payload):
        with pytest.raises(ImmutableDeliveredOrder):
            set_status(service, order.id, order_payload, "delivered")

    def test_stored_status_delivered(self, service, repo, order, order_payload):
        repo.replace(replace(order, status=OrderStatus.DELIVERED))
        with pytest.raises(ImmutableDeliveredOrder, match="cannot be changed"):
            set_status(service, order.id, order_payload, "pending")

    def test_rejected_update_leaves_store_unchanged(self, service, order, order_payload):
        before = service.list_orders()
        rejected = [
            {"id": "other", "status": "pending"},
            {"status": "invalid"},
            {"status": "delivered"},
        ]
        for changes in rejected:
            with pytest.raises(OrderValidationError):
                service.update_order(
                    order.id, update_dto({**order_payload, "deliverTo": "X"}, **changes)
                )
        assert service.list_orders() == before


# ===========================================================================
# delete_order
# ===========================================================================


class TestDeleteOrder:
    def test_deletes_pending_order(self, service, order, order_payload, captured):
        set_status(service, order.id, order_payload, "pending")

        service.delete_order(order.id)

        assert service.list_orders() == []
        assert isinstance(captured.events[-1], OrderDeleted)

    @pytest.mark.parametrize("status", ["preparing", "out-for-delivery"])
    def test_non_pending_order_is_kept(self, service, order, order_payload, status):
        set_status(service, order.id, order_payload, status)

        with pytest.raises(CannotDeleteNonPending) as exc:
            service.delete_order(order.id)

        assert exc.value.status_code == 400
        assert service.get_order(order.id).status == status

    def test_order_without_status_is_kept(self, service, order):
        with pytest.raises(CannotDeleteNonPending):
            service.delete_order(order.id)
        assert service.get_order(order.id) is order

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFound):
            service.delete_order("missing")


# ===========================================================================
# Concurrent changes between the status check and the write
# ===========================================================================


class DeliveredBeforeReplaceRepository(InMemoryOrderRepository):
    """Marks the order delivered right before a conditional replace."""

    def replace_if(self, entity, predicate):
        stored = self.find(entity.id)
        if stored is not None:
            self.replace(replace(stored, status=OrderStatus.DELIVERED))
        return super().replace_if(entity, predicate)


class PreparingBeforeRemoveRepository(InMemoryOrderRepository):
    """Moves the order to preparing right before a conditional remove."""

    def remove_if(self, id, predicate):
        stored = self.find(id)
        if stored is not None:
            self.replace(replace(stored, status=OrderStatus.PREPARING))
        return super().remove_if(id, predicate)


class TestInterleavedChanges:
    def test_update_refused_when_delivered_meanwhile(self, order_payload):
        repo = DeliveredBeforeReplaceRepository()
        service = OrderService(order_repository=repo)
        order = service.create_order(CreateOrderDTO.from_payload(order_payload))

        with pytest.raises(ImmutableDeliveredOrder):
            set_status(service, order.id, order_payload, "preparing")

        assert repo.find(order.id).status == OrderStatus.DELIVERED

    def test_update_of_order_removed_meanwhile(self, order_payload):
        class RemovedBeforeReplaceRepository(InMemoryOrderRepository):
            def replace_if(self, entity, predicate):
                self.remove(entity.id)
                return super().replace_if(entity, predicate)

        repo = RemovedBeforeReplaceRepository()
        service = OrderService(order_repository=repo)
        order = service.create_order(CreateOrderDTO.from_payload(order_payload))

        with pytest.raises(OrderNotFound):
            set_status(service, order.id, order_payload, "preparing")
        assert repo.list_all() == []

    def test_delete_refused_when_preparing_meanwhile(self, order_payload, captured):
        repo = PreparingBeforeRemoveRepository()
        bus = InMemoryEventBus()
        bus.subscribe(OrderDeleted, captured)
        service = OrderService(order_repository=repo, event_bus=bus)
        order = service.create_order(CreateOrderDTO.from_payload(order_payload))
        set_status(service, order.id, order_payload, "pending")

        with pytest.raises(CannotDeleteNonPending):
            service.delete_order(order.id)

        assert repo.find(order.id).status == OrderStatus.PREPARING
        assert captured.events == []
