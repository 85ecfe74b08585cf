"""Order payload validation.

``validate_order_payload`` inspects the raw request payload field by field
in a fixed order and raises on the first violation, so the caller always
learns about exactly one problem.  It never alters the payload.
"""

from __future__ import annotations

from typing import Any, Mapping

from modules.orders.exceptions import InvalidDishes, InvalidDishQuantity, MissingField

REQUIRED_TEXT_FIELDS = ("deliverTo", "mobileNumber")


def validate_order_payload(payload: Mapping[str, Any]) -> None:
    """Check the fields shared by the create and update payloads.

    Raises:
        MissingField: ``deliverTo``, ``mobileNumber`` or ``dishes`` is absent.
        InvalidDishes: ``dishes`` is empty or not a list.
        InvalidDishQuantity: a dish quantity is absent, not an integer,
            or not greater than zero.
    """
    for name in REQUIRED_TEXT_FIELDS:
        value = payload.get(name)
        if not value or not isinstance(value, str):
            raise MissingField(name)

    dishes = payload.get("dishes")
    if dishes is None or (not dishes and not isinstance(dishes, list)):
        raise MissingField("dishes", "Order must include a dish")
    if not isinstance(dishes, list) or not dishes:
        raise InvalidDishes()

    for index, dish in enumerate(dishes):
        quantity = dish.get("quantity") if isinstance(dish, Mapping) else None
        if not is_positive_integer(quantity):
            raise InvalidDishQuantity(index)


def is_positive_integer(value: Any) -> bool:
    """True for integers (and integral floats such as ``2.0``) above zero."""
    if isinstance(value, bool):
        return False
    if isinstance(value, float):
        return value.is_integer() and value > 0
    return isinstance(value, int) and value > 0
