"""Payment lifecycle — complete, fail and refund commands and handler.

Completing a payment also completes its order. The payment is the fact that
matters, so an order that cannot be completed (already cancelled, say) is
logged and left alone rather than undoing the payment.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import DomainError
from storefront.order.order import Order
from storefront.payment.payment import Payment
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Payment")
class CompletePayment:
    payment_id = Identifier(required=True)


@storefront.command(part_of="Payment")
class FailPayment:
    payment_id = Identifier(required=True)


@storefront.command(part_of="Payment")
class RefundPayment:
    payment_id = Identifier(required=True)


@storefront.command_handler(part_of=Payment)
class PaymentLifecycleHandler:
    @handle(CompletePayment)
    def complete_payment(self, command):
        repo = current_domain.repository_for(Payment)
        payment = repo.get(command.payment_id)
        payment.complete()
        repo.add(payment)
        logger.info("Payment completed", payment_id=str(payment.id), order_id=str(payment.order_id))

        self._complete_order(payment)

    @handle(FailPayment)
    def fail_payment(self, command):
        repo = current_domain.repository_for(Payment)
        payment = repo.get(command.payment_id)
        payment.fail()
        repo.add(payment)
        logger.info("Payment failed", payment_id=str(payment.id), order_id=str(payment.order_id))

    @handle(RefundPayment)
    def refund_payment(self, command):
        repo = current_domain.repository_for(Payment)
        payment = repo.get(command.payment_id)
        payment.refund()
        repo.add(payment)
        logger.info("Payment refunded", payment_id=str(payment.id), order_id=str(payment.order_id))

    def _complete_order(self, payment):
        order_repo = current_domain.repository_for(Order)
        try:
            order = order_repo.get(payment.order_id)
            order.complete()
        except (ObjectNotFoundError, DomainError, ValidationError) as exc:
            logger.warning(
                "Order not completed after payment",
                payment_id=str(payment.id),
                order_id=str(payment.order_id),
                error=str(exc),
            )
            return

        order_repo.add(order)
        logger.info("Order completed", order_id=str(order.id), payment_id=str(payment.id))
