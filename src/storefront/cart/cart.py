"""Cart aggregate — a pending purchase of one product, optionally with a coupon.

A cart is Active until it is checked out (converted into exactly one Order)
or its ``expired_at`` passes. Expiry is applied lazily: repositories call
``reconcile`` whenever a cart is read and persist the flip.

State Machine:
    ACTIVE → CHECKED_OUT (checkout) | EXPIRED (time)
    CHECKED_OUT, EXPIRED are terminal
"""

from datetime import datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from storefront.cart.events import CartCheckedOut, CartCouponChanged, CartCreated, CartExpired, CartQuantityChanged
from storefront.domain import storefront
from storefront.errors import DomainError
from storefront.shared.clock import as_utc, utc_now

CART_TTL_MINUTES = 30
CART_KEEP_HOURS = 24


class CartStatus(Enum):
    ACTIVE = "Active"
    EXPIRED = "Expired"
    CHECKED_OUT = "CheckedOut"


_VALID_TRANSITIONS = {
    CartStatus.ACTIVE: {CartStatus.CHECKED_OUT, CartStatus.EXPIRED},
    CartStatus.EXPIRED: set(),  # Terminal
    CartStatus.CHECKED_OUT: set(),  # Terminal
}


@storefront.aggregate
class Cart:
    product_id = Identifier(required=True)
    coupon_id = Identifier()  # Unowned reference; the coupon may expire or vanish independently
    quantity = Integer(required=True, min_value=1)
    expired_at = DateTime(required=True)
    keep_until = DateTime(required=True)
    status = String(choices=CartStatus, default=CartStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, product_id, quantity, coupon_id=None, expired_at=None, keep_until=None):
        now = utc_now()
        cart = cls(
            product_id=product_id,
            coupon_id=coupon_id,
            quantity=quantity,
            expired_at=expired_at or now + timedelta(minutes=CART_TTL_MINUTES),
            keep_until=keep_until or now + timedelta(hours=CART_KEEP_HOURS),
            status=CartStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        cart.raise_(
            CartCreated(
                cart_id=str(cart.id),
                product_id=str(product_id),
                coupon_id=str(coupon_id) if coupon_id else None,
                quantity=quantity,
                expired_at=cart.expired_at,
            )
        )
        return cart

    # -------------------------------------------------------------------
    # State transition helpers
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status, verb):
        current = CartStatus(self.status)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise DomainError(f"Cannot {verb} {current.value.lower()} cart")

    def _assert_active(self, verb):
        if CartStatus(self.status) != CartStatus.ACTIVE:
            raise DomainError(f"Cannot {verb} {self.status.lower()} cart")

    # -------------------------------------------------------------------
    # Expiry
    # -------------------------------------------------------------------
    def is_expired(self, now: datetime | None = None) -> bool:
        now = as_utc(now) if now else utc_now()
        return now > as_utc(self.expired_at)

    def mark_as_expired(self):
        """Expire an active cart. Expiring an already expired cart does nothing."""
        if CartStatus(self.status) == CartStatus.EXPIRED:
            return

        self._assert_can_transition(CartStatus.EXPIRED, "expire")
        self.status = CartStatus.EXPIRED.value
        self.updated_at = utc_now()
        self.raise_(CartExpired(cart_id=str(self.id), expired_at=self.expired_at))

    def reconcile(self, now: datetime | None = None) -> bool:
        """Expire the cart if its time is up. Returns True if the status changed."""
        if CartStatus(self.status) == CartStatus.ACTIVE and self.is_expired(now):
            self.mark_as_expired()
            return True
        return False

    # -------------------------------------------------------------------
    # Modification (Active carts only)
    # -------------------------------------------------------------------
    def change_quantity(self, quantity):
        self._assert_active("update")
        if quantity is None or quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        previous_quantity = self.quantity
        self.quantity = quantity
        self.updated_at = utc_now()
        self.raise_(
            CartQuantityChanged(
                cart_id=str(self.id),
                previous_quantity=previous_quantity,
                new_quantity=quantity,
            )
        )

    def change_coupon(self, coupon_id=None):
        """Attach a coupon, or detach it with ``None``."""
        self._assert_active("update")
        self.coupon_id = coupon_id
        self.updated_at = utc_now()
        self.raise_(
            CartCouponChanged(
                cart_id=str(self.id),
                coupon_id=str(coupon_id) if coupon_id else None,
            )
        )

    # -------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------
    def assert_can_checkout(self):
        """Pre-flight check that checkout is legal from the current status."""
        self._assert_can_transition(CartStatus.CHECKED_OUT, "checkout")

    def checkout(self, order_id):
        self.assert_can_checkout()
        self.status = CartStatus.CHECKED_OUT.value
        self.updated_at = utc_now()
        self.raise_(CartCheckedOut(cart_id=str(self.id), order_id=str(order_id)))
