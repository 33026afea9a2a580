"""Cart checkout — command, handler and result.

Checkout turns an Active cart into a Pending order in one unit of work:

    1. Load the cart and check that it may be checked out
    2. Load the product and check that it is available right now
    3. Price the purchase: price × quantity, less any coupon discount
    4. Take the quantity out of stock
    5. Place the order and mark the cart CheckedOut

Every check runs before the first write. The unit of work wrapping the
handler discards all writes if anything raises, so stock is never
decremented without an order and an order never exists for an open cart.
"""

from dataclasses import dataclass

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.coupon.coupon import Coupon
from storefront.domain import storefront
from storefront.errors import DomainError
from storefront.order.order import Order
from storefront.product.product import Product
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CheckoutResult:
    """Outcome of a checkout: the new order and how it was priced."""

    order: Order
    original_amount: int
    discount_amount: int
    paid_amount: int
    coupon_code: str | None = None

    def to_dict(self) -> dict:
        return {
            "order_id": str(self.order.id),
            "cart_id": str(self.order.cart_id),
            "product_id": str(self.order.product_id),
            "coupon_id": str(self.order.coupon_id) if self.order.coupon_id else None,
            "quantity": self.order.quantity,
            "status": self.order.status,
            "original_amount": self.original_amount,
            "discount_amount": self.discount_amount,
            "paid_amount": self.paid_amount,
            "coupon_code": self.coupon_code,
        }


@storefront.command(part_of="Cart")
class CheckoutCart:
    cart_id = Identifier(required=True)


def _load(aggregate_cls, identifier, message):
    try:
        return current_domain.repository_for(aggregate_cls).get(identifier)
    except ObjectNotFoundError:
        raise ObjectNotFoundError({"_entity": message}) from None


@storefront.command_handler(part_of=Cart)
class CheckoutCartHandler:
    @handle(CheckoutCart)
    def checkout(self, command) -> CheckoutResult:
        # An expiry found here is rolled back with the rejected checkout; the next read outside it persists the flip
        cart = _load(Cart, command.cart_id, "Cart not found")
        cart.assert_can_checkout()

        product = _load(Product, cart.product_id, "Product not found")
        if not product.is_available():
            raise DomainError("Product is out of stock")

        if cart.quantity < 1 or product.price < 0:
            raise DomainError("Invalid order amount")
        original_amount = product.price * cart.quantity

        discount_amount = 0
        coupon_code = None
        if cart.coupon_id:
            coupon = _load(Coupon, cart.coupon_id, "Coupon not found")
            if not coupon.is_redeemable():
                raise DomainError(f"Coupon is {coupon.status.lower()}")
            discount_amount = coupon.calculate_discount(original_amount)
            coupon_code = coupon.code

        paid_amount = original_amount - discount_amount

        product.decrease_stock(cart.quantity)
        current_domain.repository_for(Product).add(product)

        order = Order.place(
            cart_id=cart.id,
            product_id=product.id,
            coupon_id=cart.coupon_id,
            quantity=cart.quantity,
            paid_amount=paid_amount,
            discount_amount=discount_amount,
        )
        current_domain.repository_for(Order).add(order)

        cart.checkout(order.id)
        current_domain.repository_for(Cart).add(cart)

        logger.info(
            "Cart checked out",
            cart_id=str(cart.id),
            order_id=str(order.id),
            paid_amount=paid_amount,
            discount_amount=discount_amount,
            coupon_code=coupon_code,
        )
        return CheckoutResult(
            order=order,
            original_amount=original_amount,
            discount_amount=discount_amount,
            paid_amount=paid_amount,
            coupon_code=coupon_code,
        )
