"""Order domain constants.

Defines the status choices and the status sets that drive the update
and delete rules of the order lifecycle.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PREPARING = "preparing", "Preparing"
    OUT_FOR_DELIVERY = "out-for-delivery", "Out for delivery"
    DELIVERED = "delivered", "Delivered"


# A delivered order can no longer change.
TERMINAL_STATES: set[str] = {OrderStatus.DELIVERED}

# Only orders nobody has started working on may be removed.
DELETABLE_STATES: set[str] = {OrderStatus.PENDING}

ORDER_ID_BYTES = 16
