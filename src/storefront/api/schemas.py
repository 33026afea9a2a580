"""Pydantic request/response schemas for the Storefront API.

These are the external contracts. They are kept apart from the Protean
commands so the HTTP surface can evolve without touching the domain.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


class IdResponse(BaseModel):
    id: str


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class CreateProductRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    price: int = Field(ge=0)
    stock: int = Field(ge=0)
    begin_at: datetime
    end_at: datetime
    status: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Mechanical Keyboard",
                    "price": 12900,
                    "stock": 25,
                    "begin_at": "2026-01-01T00:00:00Z",
                    "end_at": "2026-12-31T23:59:59Z",
                }
            ]
        }
    }


class UpdateStockRequest(BaseModel):
    stock: int


class ProductResponse(BaseModel):
    id: str
    title: str
    price: int
    stock: int
    begin_at: datetime
    end_at: datetime
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Coupons
# ---------------------------------------------------------------------------
class CreateCouponRequest(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    discount_type: str
    discount_value: int
    valid_from: datetime
    valid_until: datetime


class CalculateDiscountRequest(BaseModel):
    original_price: int


class ChangeCouponStatusRequest(BaseModel):
    status: str


class CouponResponse(BaseModel):
    id: str
    code: str
    discount_type: str
    discount_value: int
    valid_from: datetime
    valid_until: datetime
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DiscountQuoteResponse(BaseModel):
    original_price: int
    discount_amount: int
    final_price: int
    coupon_code: str


# ---------------------------------------------------------------------------
# Carts
# ---------------------------------------------------------------------------
class CreateCartRequest(BaseModel):
    product_id: str
    quantity: int
    coupon_id: str | None = None
    expired_at: datetime | None = None
    keep_until: datetime | None = None


class UpdateCartQuantityRequest(BaseModel):
    quantity: int


class UpdateCartCouponRequest(BaseModel):
    coupon_id: str | None = None


class CartResponse(BaseModel):
    id: str
    product_id: str
    coupon_id: str | None = None
    quantity: int
    expired_at: datetime
    keep_until: datetime
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


class CheckoutResponse(BaseModel):
    order_id: str
    cart_id: str
    product_id: str
    coupon_id: str | None = None
    quantity: int
    status: str
    original_amount: int
    discount_amount: int
    paid_amount: int
    coupon_code: str | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class CreateOrderRequest(BaseModel):
    cart_id: str
    product_id: str
    coupon_id: str | None = None
    quantity: int
    paid_amount: int
    discount_amount: int = 0


class OrderResponse(BaseModel):
    id: str
    cart_id: str
    product_id: str
    coupon_id: str | None = None
    quantity: int
    paid_amount: int
    discount_amount: int
    status: str
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Payments
# ---------------------------------------------------------------------------
class CreatePaymentRequest(BaseModel):
    order_id: str
    amount: int | None = None


class PaymentResponse(BaseModel):
    id: str
    order_id: str
    amount: int
    status: str
    paid_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
