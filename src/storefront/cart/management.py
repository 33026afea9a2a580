"""Cart management — commands and handler.

Carts are created for one product and quantity, optionally with a coupon.
Stock and coupon are checked up front so that an obviously doomed cart is
rejected early; checkout checks both again.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.coupon.coupon import Coupon
from storefront.domain import storefront
from storefront.product.product import Product
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Cart")
class CreateCart:
    product_id = Identifier(required=True)
    quantity = Integer(required=True)
    coupon_id = Identifier()
    expired_at = DateTime()  # Defaults to now + CART_TTL_MINUTES
    keep_until = DateTime()  # Defaults to now + CART_KEEP_HOURS


@storefront.command(part_of="Cart")
class UpdateCartQuantity:
    cart_id = Identifier(required=True)
    quantity = Integer(required=True)


@storefront.command(part_of="Cart")
class UpdateCartCoupon:
    """Attach a coupon to the cart; an empty ``coupon_id`` detaches the current one."""

    cart_id = Identifier(required=True)
    coupon_id = Identifier()


def _ensure_stock(product_id, quantity):
    product = current_domain.repository_for(Product).get(product_id)
    if product.stock < quantity:
        raise ValidationError({"quantity": [f"Insufficient stock. Available: {product.stock}"]})


def _ensure_redeemable_coupon(coupon_id):
    try:
        coupon = current_domain.repository_for(Coupon).get(coupon_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError({"_entity": "Coupon not found"}) from None

    if not coupon.is_redeemable():
        raise ValidationError({"coupon_id": [f"Coupon is {coupon.status.lower()}"]})


@storefront.command_handler(part_of=Cart)
class ManageCartHandler:
    @handle(CreateCart)
    def create_cart(self, command):
        if command.quantity is None or command.quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        _ensure_stock(command.product_id, command.quantity)
        if command.coupon_id:
            _ensure_redeemable_coupon(command.coupon_id)

        cart = Cart.create(
            product_id=command.product_id,
            quantity=command.quantity,
            coupon_id=command.coupon_id,
            expired_at=command.expired_at,
            keep_until=command.keep_until,
        )
        current_domain.repository_for(Cart).add(cart)

        logger.info(
            "Cart created",
            cart_id=str(cart.id),
            product_id=str(cart.product_id),
            quantity=cart.quantity,
            coupon_id=str(cart.coupon_id) if cart.coupon_id else None,
        )
        return str(cart.id)

    @handle(UpdateCartQuantity)
    def update_quantity(self, command):
        if command.quantity is None or command.quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        _ensure_stock(cart.product_id, command.quantity)

        cart.change_quantity(command.quantity)
        repo.add(cart)

    @handle(UpdateCartCoupon)
    def update_coupon(self, command):
        repo = current_domain.repository_for(Cart)
        cart = repo.get(command.cart_id)
        if command.coupon_id:
            _ensure_redeemable_coupon(command.coupon_id)

        cart.change_coupon(command.coupon_id)
        repo.add(cart)
