import copy

import pytest

from rest_framework.test import APIClient

from modules.orders.repositories import order_repository

ORDER_PAYLOAD = {
    "deliverTo": "120 Main St",
    "mobileNumber": "555-1234",
    "dishes": [
        {
            "id": "90c3d873684bf381dfab29034b5bba73",
            "name": "Falafel and tahini bagel",
            "description": "A warm bagel filled with falafel and tahini",
            "image_url": "https://images.example.com/falafel.jpg",
            "price": 6,
            "quantity": 2,
        }
    ],
}


@pytest.fixture(autouse=True)
def _reset_order_store():
    """Every test starts and ends with an empty process-wide store."""
    order_repository.clear()
    yield
    order_repository.clear()


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def order_payload():
    """A valid order payload, as sent inside ``{"data": ...}``."""
    return copy.deepcopy(ORDER_PAYLOAD)


@pytest.fixture()
def create_order(api_client):
    """POST an order through the API and return the ``data`` of the response."""

    def _create(payload):
        response = api_client.post("/orders", {"data": payload}, format="json")
        assert response.status_code == 201
        return response.json()["data"]

    return _create
