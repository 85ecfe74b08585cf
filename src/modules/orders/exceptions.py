"""Order domain exceptions.

Raised by the Service Layer and the handler-chain steps when a business
rule is violated.  Every exception carries the HTTP status the API layer
should answer with; ``modules.core.exceptions.api_exception_handler``
translates them into responses.
"""

from __future__ import annotations

from modules.core.exceptions import DomainError
from modules.orders.constants import OrderStatus


class OrderError(DomainError):
    """Base class for all order errors."""


class OrderValidationError(OrderError):
    """The request payload or the requested change breaks an order rule."""


class MissingField(OrderValidationError):
    """A required field is absent or empty."""

    def __init__(self, field: str, message: str | None = None) -> None:
        super().__init__(message or f"Order must include a {field}")
        self.field = field


class InvalidDishes(OrderValidationError):
    """``dishes`` is not a list or holds no dish at all."""

    def __init__(self) -> None:
        super().__init__("Order must include at least one dish")


class InvalidDishQuantity(OrderValidationError):
    """A dish has a missing, non-integer or non-positive quantity."""

    def __init__(self, index: int) -> None:
        super().__init__(
            f"Dish {index} must have a quantity that is an integer greater than 0"
        )
        self.index = index


class IdMismatch(OrderValidationError):
    """The ``id`` in the body differs from the id in the route."""

    def __init__(self, payload_id: object, route_id: str) -> None:
        super().__init__(
            f"Order id does not match route id. Order: {payload_id}, Route: {route_id}"
        )
        self.payload_id = payload_id
        self.route_id = route_id


class MissingOrInvalidStatus(OrderValidationError):
    """An update did not carry one of the known statuses."""

    def __init__(self) -> None:
        super().__init__(
            "Order must have a status of " + ", ".join(OrderStatus.values)
        )


class ImmutableDeliveredOrder(OrderValidationError):
    """A delivered order cannot be changed."""

    def __init__(self) -> None:
        super().__init__("A delivered order cannot be changed")


class CannotDeleteNonPending(OrderValidationError):
    """Only pending orders may be deleted."""

    def __init__(self) -> None:
        super().__init__("An order cannot be deleted unless it is pending")


class OrderNotFound(OrderError):
    """No stored order has the requested id."""

    status_code = 404

    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order does not exist: {order_id}")
        self.order_id = order_id
