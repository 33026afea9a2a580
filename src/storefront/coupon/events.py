"""Domain events for the Coupon aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Coupon")
class CouponCreated:
    __version__ = 1

    coupon_id = Identifier(required=True)
    code = String(required=True, max_length=50)
    discount_type = String(required=True, max_length=20)
    discount_value = Integer(required=True)
    status = String(required=True, max_length=20)
    created_at = DateTime(required=True)


@storefront.event(part_of="Coupon")
class CouponStatusChanged:
    """Status moved, either by an administrator or because the validity window opened or closed."""

    __version__ = 1

    coupon_id = Identifier(required=True)
    previous_status = String(required=True, max_length=20)
    new_status = String(required=True, max_length=20)
    reason = String(required=True, max_length=20)  # admin | schedule
