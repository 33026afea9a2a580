"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
and match the field names of the API's Pydantic request schemas.
"""

import random
import uuid
from datetime import UTC, datetime, timedelta

from faker import Faker

fake = Faker()


def _window(days_before: int = 1, days_after: int = 30) -> tuple[str, str]:
    now = datetime.now(UTC)
    return (now - timedelta(days=days_before)).isoformat(), (now + timedelta(days=days_after)).isoformat()


def product_data(stock: int | None = None) -> dict:
    """Generate a CreateProductRequest payload for a product on sale now."""
    begin_at, end_at = _window()
    return {
        "title": f"{fake.word().capitalize()} {fake.word().capitalize()}"[:255],
        "price": random.randint(500, 50_000),
        "stock": random.randint(50, 500) if stock is None else stock,
        "begin_at": begin_at,
        "end_at": end_at,
    }


def coupon_code() -> str:
    """Generate unique codes like 'LT-A1B2C3D4'."""
    return f"LT-{uuid.uuid4().hex[:8].upper()}"


def coupon_data() -> dict:
    """Generate a CreateCouponRequest payload for a coupon valid now."""
    valid_from, valid_until = _window(days_after=7)
    if random.random() < 0.5:
        discount_type, discount_value = "Percentage", random.randint(5, 50)
    else:
        discount_type, discount_value = "Fixed", random.randint(100, 2_000)
    return {
        "code": coupon_code(),
        "discount_type": discount_type,
        "discount_value": discount_value,
        "valid_from": valid_from,
        "valid_until": valid_until,
    }


def cart_data(product_id: str, coupon_id: str | None = None) -> dict:
    """Generate a CreateCartRequest payload."""
    return {
        "product_id": product_id,
        "quantity": random.randint(1, 3),
        "coupon_id": coupon_id,
    }
