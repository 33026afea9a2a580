"""Command helpers shared by the application and BDD tests."""

from datetime import UTC, datetime, timedelta

from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from storefront.cart.management import CreateCart
from storefront.checkout.checkout import CheckoutCart
from storefront.coupon.creation import CreateCoupon
from storefront.errors import ConflictError, DomainError
from storefront.order.lifecycle import ConfirmOrder
from storefront.product.creation import CreateProduct


def create_product(price=100, stock=10, status=None, begin_at=None, end_at=None):
    now = datetime.now(UTC)
    command = CreateProduct(
        title="Mechanical Keyboard",
        price=price,
        stock=stock,
        begin_at=begin_at or now - timedelta(days=1),
        end_at=end_at or now + timedelta(days=30),
        status=status,
    )
    return current_domain.process(command, asynchronous=False)


def create_coupon(code="P10", discount_type="Percentage", discount_value=10, valid_from=None, valid_until=None):
    now = datetime.now(UTC)
    command = CreateCoupon(
        code=code,
        discount_type=discount_type,
        discount_value=discount_value,
        valid_from=valid_from or now - timedelta(days=1),
        valid_until=valid_until or now + timedelta(days=7),
    )
    return current_domain.process(command, asynchronous=False)


def create_cart(product_id, quantity=1, coupon_id=None, **kwargs):
    command = CreateCart(product_id=product_id, quantity=quantity, coupon_id=coupon_id, **kwargs)
    return current_domain.process(command, asynchronous=False)


def checkout(cart_id):
    return current_domain.process(CheckoutCart(cart_id=cart_id), asynchronous=False)


def confirmed_order(price=100, quantity=1):
    """Check out a fresh cart and confirm the resulting order. Returns the order id."""
    product_id = create_product(price=price)
    result = checkout(create_cart(product_id, quantity=quantity))
    order_id = str(result.order.id)
    current_domain.process(ConfirmOrder(order_id=order_id), asynchronous=False)
    return order_id


def capture(shop, action):
    """Run ``action``, keeping any expected business error for a later assertion."""
    try:
        return action()
    except (DomainError, ValidationError, ObjectNotFoundError, ConflictError) as exc:
        shop["error"] = exc
        return None


def error_message(exc) -> str:
    return getattr(exc, "message", None) or str(exc)
