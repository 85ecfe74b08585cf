from typing import Any, Dict

import structlog
from django.http import HttpRequest, JsonResponse
from django.utils import timezone

from modules.orders.repositories import order_repository

logger = structlog.get_logger(__name__)


def health_check(request: HttpRequest) -> JsonResponse:
    services: Dict[str, Dict[str, Any]] = {
        "order_store": {"status": "up", "orders": len(order_repository)},
    }

    logger.info("health_check_completed", status="healthy")

    return JsonResponse(
        {
            "status": "healthy",
            "timestamp": timezone.now().isoformat(),
            "services": services,
        }
    )


def not_found(request: HttpRequest, exception: Exception) -> JsonResponse:
    """``handler404``: unknown routes answer in the API error shape."""
    logger.info("route_not_found")
    return JsonResponse({"error": f"Path not found: {request.path}"}, status=404)
