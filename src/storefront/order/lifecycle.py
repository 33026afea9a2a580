"""Order lifecycle — confirm, cancel and complete commands and handler."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class ConfirmOrder:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class CompleteOrder:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(ConfirmOrder)
    def confirm_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.confirm()
        repo.add(order)
        logger.info("Order confirmed", order_id=str(order.id))

    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.cancel()
        repo.add(order)
        logger.info("Order cancelled", order_id=str(order.id))

    @handle(CompleteOrder)
    def complete_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.complete()
        repo.add(order)
        logger.info("Order completed", order_id=str(order.id))
