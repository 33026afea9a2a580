"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    __version__ = 1

    order_id = Identifier(required=True)
    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    coupon_id = Identifier()
    quantity = Integer(required=True)
    paid_amount = Integer(required=True)
    discount_amount = Integer(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderConfirmed:
    __version__ = 1

    order_id = Identifier(required=True)
    confirmed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    cancelled_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCompleted:
    __version__ = 1

    order_id = Identifier(required=True)
    completed_at = DateTime(required=True)
