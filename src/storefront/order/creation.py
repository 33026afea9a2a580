"""Direct order creation — command and handler.

Orders normally come out of checkout. This path records an order for a cart
whose amounts were settled elsewhere; the cart may still produce only one.
"""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.domain import storefront
from storefront.errors import ConflictError
from storefront.order.order import Order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class CreateOrder:
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    coupon_id = Identifier()
    quantity = Integer(required=True)
    paid_amount = Integer(required=True)
    discount_amount = Integer(default=0)


@storefront.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        if command.quantity is None or command.quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be positive"]})

        current_domain.repository_for(Cart).get(command.cart_id)

        repo = current_domain.repository_for(Order)
        if repo.find_by_cart_id(command.cart_id) is not None:
            raise ConflictError("Order already exists for this cart")

        order = Order.place(
            cart_id=command.cart_id,
            product_id=command.product_id,
            coupon_id=command.coupon_id,
            quantity=command.quantity,
            paid_amount=command.paid_amount,
            discount_amount=command.discount_amount or 0,
        )
        repo.add(order)

        logger.info("Order created", order_id=str(order.id), cart_id=str(order.cart_id))
        return str(order.id)
