"""Initial order data.

The store starts empty unless ``ORDERS_SEED_FILE`` points at a JSON file
holding a list of orders (or ``{"data": [...]}``) in the API shape.
Every seeded order must carry a text ``id`` and either no status or a
known one; it passes the same checks as an incoming request before it
is stored.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Mapping, Union

import structlog

from modules.orders.constants import OrderStatus
from modules.orders.dtos import UpdateOrderDTO
from modules.orders.exceptions import MissingField, MissingOrInvalidStatus
from modules.orders.models import Order
from modules.orders.repositories.interfaces import IOrderRepository
from modules.orders.validators import validate_order_payload

logger = structlog.get_logger(__name__)


def parse_seed_orders(records: Any) -> List[Order]:
    if isinstance(records, Mapping):
        records = records.get("data", [])
    orders = []
    for record in records:
        validate_order_payload(record)
        dto = UpdateOrderDTO.from_payload(record)
        if not isinstance(dto.id, str):
            raise MissingField("id")
        if dto.status is not None and dto.status not in OrderStatus.values:
            raise MissingOrInvalidStatus()
        orders.append(
            Order(
                id=dto.id,
                deliver_to=dto.deliver_to,
                mobile_number=dto.mobile_number,
                dishes=dto.dish_entities(),
                status=dto.status,
            )
        )
    return orders


def load_seed_file(path: Union[str, Path], repository: IOrderRepository) -> int:
    """Read ``path`` and insert its orders, returning how many were added."""
    with open(path, encoding="utf-8") as fh:
        orders = parse_seed_orders(json.load(fh))
    added = repository.extend(orders)
    logger.info("order_store.seeded", path=str(path), count=added)
    return added
