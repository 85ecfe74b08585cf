"""Order API views.

Exposes ``OrderService`` over HTTP with a DRF ViewSet.  Each action runs
its handler chain first (see ``pipeline.py``); domain exceptions raised by
the chain or the service propagate to
``modules.core.exceptions.api_exception_handler``, which renders them.

Request bodies are wrapped in ``{"data": {...}}`` and so are responses,
except for delete which answers 204 with no body.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.orders.dtos import CreateOrderDTO, UpdateOrderDTO
from modules.orders.pipeline import OrderContext, build_chains
from modules.orders.repositories import order_repository
from modules.orders.serializers import (
    ErrorSerializer,
    OrderEnvelopeSerializer,
    OrderListEnvelopeSerializer,
    OrderSerializer,
)
from modules.orders.services import OrderService
from shared.infrastructure.bus import event_bus


class OrderViewSet(ViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with the process-wide in-memory repository and
    event bus injected (DIP).  ``partial_update`` is not offered, so PATCH
    answers 405 like any other unsupported method.
    """

    lookup_url_kwarg = "order_id"
    lookup_value_regex = "[^/]+"

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=order_repository,
            event_bus=event_bus,
        )
        self._chains = build_chains(self._service)

    def _run_chain(
        self, name: str, request: Request, order_id: Optional[str] = None
    ) -> OrderContext:
        context = OrderContext(order_id=order_id, payload=_payload_of(request))
        return self._chains[name].run(context)

    # ------------------------------------------------------------------
    # Create / List
    # ------------------------------------------------------------------

    @extend_schema(
        request=OrderEnvelopeSerializer,
        responses={201: OrderEnvelopeSerializer, 400: ErrorSerializer},
    )
    def create(self, request: Request) -> Response:
        """POST /orders"""
        context = self._run_chain("create", request)
        order = self._service.create_order(CreateOrderDTO.from_payload(context.payload))
        return Response(
            {"data": OrderSerializer(order).data},
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(responses={200: OrderListEnvelopeSerializer})
    def list(self, request: Request) -> Response:
        """GET /orders"""
        self._run_chain("list", request)
        orders = self._service.list_orders()
        return Response({"data": OrderSerializer(orders, many=True).data})

    # ------------------------------------------------------------------
    # Read / Update / Delete
    # ------------------------------------------------------------------

    @extend_schema(responses={200: OrderEnvelopeSerializer, 404: ErrorSerializer})
    def retrieve(self, request: Request, order_id: str | None = None) -> Response:
        """GET /orders/{order_id}"""
        context = self._run_chain("read", request, order_id)
        return Response({"data": OrderSerializer(context.order).data})

    @extend_schema(
        request=OrderEnvelopeSerializer,
        responses={
            200: OrderEnvelopeSerializer,
            400: ErrorSerializer,
            404: ErrorSerializer,
        },
    )
    def update(self, request: Request, order_id: str | None = None) -> Response:
        """PUT /orders/{order_id}"""
        context = self._run_chain("update", request, order_id)
        order = self._service.update_order(
            context.order_id, UpdateOrderDTO.from_payload(context.payload)
        )
        return Response({"data": OrderSerializer(order).data})

    @extend_schema(responses={204: None, 400: ErrorSerializer, 404: ErrorSerializer})
    def destroy(self, request: Request, order_id: str | None = None) -> Response:
        """DELETE /orders/{order_id}

        Only pending orders can be deleted.
        """
        context = self._run_chain("delete", request, order_id)
        self._service.delete_order(context.order_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


def _payload_of(request: Request) -> Mapping[str, Any]:
    """Return ``body["data"]``, or an empty payload if it is not an object."""
    body = request.data
    data = body.get("data") if isinstance(body, Mapping) else None
    return data if isinstance(data, Mapping) else {}
