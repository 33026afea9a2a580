"""Storefront bounded context — products, coupons, carts, orders and payments.

A single Protean domain backed by one embedded SQLite store. Checkout spans
Product, Coupon, Cart and Order, so all five aggregates live in the same
domain and share one unit of work.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
