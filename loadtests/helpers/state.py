"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance keeps its own state; nothing is shared across
users. State tracks ids returned by creation endpoints so follow-up calls
can reference them.
"""

from dataclasses import dataclass


@dataclass
class ShopperState:
    """Tracks one shopper's journey from cart to settled payment."""

    product_id: str | None = None
    coupon_id: str | None = None
    cart_id: str | None = None
    order_id: str | None = None
    payment_id: str | None = None
    paid_amount: int | None = None
