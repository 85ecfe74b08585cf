from django.apps import AppConfig
from django.conf import settings


class OrdersConfig(AppConfig):
    name = "modules.orders"
    label = "orders"

    def ready(self) -> None:
        from modules.orders.events import (
            OrderCreated,
            OrderDeleted,
            OrderStatusChanged,
            OrderUpdated,
        )
        from modules.orders.handlers import (
            order_created_handler,
            order_deleted_handler,
            order_status_changed_handler,
            order_updated_handler,
        )
        from modules.orders.repositories import order_repository
        from modules.orders.seed import load_seed_file
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(OrderCreated, order_created_handler)
        event_bus.subscribe(OrderUpdated, order_updated_handler)
        event_bus.subscribe(OrderStatusChanged, order_status_changed_handler)
        event_bus.subscribe(OrderDeleted, order_deleted_handler)

        if settings.ORDERS_SEED_FILE and not len(order_repository):
            load_seed_file(settings.ORDERS_SEED_FILE, order_repository)
