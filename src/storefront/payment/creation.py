"""Payment initiation — command and handler."""

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import ConflictError
from storefront.order.order import Order, OrderStatus
from storefront.payment.payment import Payment
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Payment")
class InitiatePayment:
    order_id = Identifier(required=True)
    amount = Integer()  # Defaults to the order's paid_amount


@storefront.command_handler(part_of=Payment)
class InitiatePaymentHandler:
    @handle(InitiatePayment)
    def initiate_payment(self, command):
        order = current_domain.repository_for(Order).get(command.order_id)
        if order.status != OrderStatus.CONFIRMED.value:
            raise ValidationError({"order_id": [f"Cannot create payment for {order.status.lower()} order"]})

        repo = current_domain.repository_for(Payment)
        if repo.find_by_order_id(order.id) is not None:
            raise ConflictError("Payment already exists for this order")

        amount = order.paid_amount if command.amount is None else command.amount
        payment = Payment.initiate(order_id=order.id, amount=amount)
        repo.add(payment)

        logger.info("Payment initiated", payment_id=str(payment.id), order_id=str(order.id), amount=amount)
        return str(payment.id)
