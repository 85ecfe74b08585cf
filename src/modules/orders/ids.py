"""Order identifier generation.

The service receives an ``IdGenerator`` through its constructor so tests
can supply deterministic ids.  Every generator returns a plain string.
"""

from __future__ import annotations

import secrets
from typing import Callable

from modules.orders.constants import ORDER_ID_BYTES

IdGenerator = Callable[[], str]


def next_id() -> str:
    """Return a new random order id (32 lowercase hex characters)."""
    return secrets.token_hex(ORDER_ID_BYTES)
