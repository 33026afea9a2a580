"""Order aggregate — the record of one checked-out cart.

Orders start Pending and only move through explicit actions; nothing about
an order is derived from time.

State Machine:
    PENDING → CONFIRMED | CANCELLED
    CONFIRMED → COMPLETED
    COMPLETED, CANCELLED are terminal
"""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront
from storefront.errors import DomainError
from storefront.order.events import OrderCancelled, OrderCompleted, OrderConfirmed, OrderPlaced
from storefront.shared.clock import utc_now


class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    CANCELLED = "Cancelled"
    COMPLETED = "Completed"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.COMPLETED},
    OrderStatus.CANCELLED: set(),  # Terminal
    OrderStatus.COMPLETED: set(),  # Terminal
}


@storefront.aggregate
class Order:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    coupon_id = Identifier()
    quantity = Integer(required=True, min_value=1)
    paid_amount = Integer(required=True)
    discount_amount = Integer(default=0)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def amounts_must_not_be_negative(self):
        if self.discount_amount is not None and self.discount_amount < 0:
            raise ValidationError({"discount_amount": ["Discount amount cannot be negative"]})
        if self.paid_amount is not None and self.paid_amount < 0:
            raise ValidationError({"paid_amount": ["Paid amount cannot be negative"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, cart_id, product_id, quantity, paid_amount, discount_amount=0, coupon_id=None):
        """Create a Pending order."""
        now = utc_now()
        order = cls(
            cart_id=cart_id,
            product_id=product_id,
            coupon_id=coupon_id,
            quantity=quantity,
            paid_amount=paid_amount,
            discount_amount=discount_amount,
            status=OrderStatus.PENDING.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                cart_id=str(cart_id),
                product_id=str(product_id),
                coupon_id=str(coupon_id) if coupon_id else None,
                quantity=quantity,
                paid_amount=paid_amount,
                discount_amount=discount_amount,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State transition helper
    # -------------------------------------------------------------------
    def _transition(self, target_status, verb):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise DomainError(f"Cannot {verb} {current.value.lower()} order")

        self.status = target_status.value
        self.updated_at = utc_now()

    # -------------------------------------------------------------------
    # Order lifecycle transitions
    # -------------------------------------------------------------------
    def confirm(self):
        self._transition(OrderStatus.CONFIRMED, "confirm")
        self.raise_(OrderConfirmed(order_id=str(self.id), confirmed_at=self.updated_at))

    def cancel(self):
        self._transition(OrderStatus.CANCELLED, "cancel")
        self.raise_(OrderCancelled(order_id=str(self.id), cancelled_at=self.updated_at))

    def complete(self):
        self._transition(OrderStatus.COMPLETED, "complete")
        self.raise_(OrderCompleted(order_id=str(self.id), completed_at=self.updated_at))
