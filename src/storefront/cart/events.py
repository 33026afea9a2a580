"""Domain events for the Cart aggregate."""

from protean.fields import DateTime, Identifier, Integer

from storefront.domain import storefront


@storefront.event(part_of="Cart")
class CartCreated:
    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = Identifier(required=True)
    coupon_id = Identifier()
    quantity = Integer(required=True)
    expired_at = DateTime(required=True)


@storefront.event(part_of="Cart")
class CartQuantityChanged:
    __version__ = 1

    cart_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)


@storefront.event(part_of="Cart")
class CartCouponChanged:
    """A coupon was attached to, or detached from (``coupon_id`` empty), the cart."""

    __version__ = 1

    cart_id = Identifier(required=True)
    coupon_id = Identifier()


@storefront.event(part_of="Cart")
class CartExpired:
    __version__ = 1

    cart_id = Identifier(required=True)
    expired_at = DateTime(required=True)


@storefront.event(part_of="Cart")
class CartCheckedOut:
    """The cart was converted into an order."""

    __version__ = 1

    cart_id = Identifier(required=True)
    order_id = Identifier(required=True)
