"""Storefront API package."""

from storefront.api.errors import register_error_handlers
from storefront.api.routes import cart_router, coupon_router, order_router, payment_router, product_router

__all__ = [
    "product_router",
    "coupon_router",
    "cart_router",
    "order_router",
    "payment_router",
    "register_error_handlers",
]
