"""Order DTOs for the Service Layer.

Framework-agnostic data transfer objects using Pydantic v2.  They are the
contract between the API layer and ``OrderService`` and are only built
from payloads that already passed ``validate_order_payload``.  DTOs are
immutable (``frozen=True``) and accept the camelCase field names used on
the wire.

- ``DishDTO``: a single dish line.
- ``CreateOrderDTO``: input for order creation.
- ``UpdateOrderDTO``: input for order replacement (adds ``id``/``status``).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any, List, Mapping, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    StrictStr,
    ValidationError,
    field_validator,
)

from modules.orders.exceptions import OrderValidationError
from modules.orders.models import Dish


class DishDTO(BaseModel):
    """Immutable DTO for one dish.  Unknown keys are dropped."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    quantity: int = Field(gt=0)
    id: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, max_digits=10, decimal_places=2)
    image_url: Optional[str] = None

    def to_entity(self) -> Dish:
        return Dish(**self.model_dump())


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation requests."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    deliver_to: str = Field(alias="deliverTo", min_length=1)
    mobile_number: str = Field(alias="mobileNumber", min_length=1)
    dishes: List[DishDTO] = Field(min_length=1)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]):
        """Build the DTO, reporting schema problems as a 400 order error."""
        try:
            return cls.model_validate(dict(payload))
        except ValidationError as exc:
            raise OrderValidationError(_describe(exc)) from exc

    def dish_entities(self) -> List[Dish]:
        return [dish.to_entity() for dish in self.dishes]


class UpdateOrderDTO(CreateOrderDTO):
    """Immutable DTO for order update requests.

    ``status`` is kept as raw text: ``OrderService.update_order`` decides
    whether it names a known status.  ``id`` keeps its JSON type, so a
    numeric id never equals a route id.  An empty ``id`` counts as absent.
    """

    id: Optional[Union[StrictStr, StrictInt]] = None
    status: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def status_as_text(cls, v: Any) -> Any:
        if v is None or isinstance(v, str):
            return v
        return str(v)

    @field_validator("id", "status")
    @classmethod
    def blank_as_none(cls, v):
        return None if v == "" else v


def _describe(exc: ValidationError) -> str:
    error = exc.errors()[0]
    location = ".".join(str(part) for part in error["loc"])
    return f"Invalid order field {location}: {error['msg']}"
