"""Domain events for the Payment aggregate."""

from protean.fields import DateTime, Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="Payment")
class PaymentInitiated:
    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    amount = Integer(required=True)
    initiated_at = DateTime(required=True)


@storefront.event(part_of="Payment")
class PaymentCompleted:
    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    amount = Integer(required=True)
    paid_at = DateTime(required=True)


@storefront.event(part_of="Payment")
class PaymentFailed:
    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    failed_at = DateTime(required=True)


@storefront.event(part_of="Payment")
class PaymentRefunded:
    __version__ = 1

    payment_id = Identifier(required=True)
    order_id = Identifier(required=True)
    amount = Integer(required=True)
    refunded_at = DateTime(required=True)
