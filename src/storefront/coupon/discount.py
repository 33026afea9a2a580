"""Coupon discount calculation.

``calculate_discount`` is the pure calculator: percentage discounts are
truncated toward zero, fixed discounts are capped at the price they apply to.
It trusts its caller to have checked that the coupon is redeemable.

``quote_discount`` is the read-side use case behind ``POST /coupons/{code}/calculate``.
"""

from dataclasses import dataclass
from enum import Enum

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain


class DiscountType(Enum):
    PERCENTAGE = "Percentage"
    FIXED = "Fixed"


def calculate_discount(discount_type, discount_value: int, original_price: int) -> int:
    """Discount amount for ``original_price``.

    >>> calculate_discount(DiscountType.PERCENTAGE, 15, 99)
    14
    >>> calculate_discount(DiscountType.FIXED, 150, 100)
    100
    """
    if DiscountType(discount_type) == DiscountType.PERCENTAGE:
        amount = original_price * discount_value
        # Integer division floors; mirror it for negatives so we truncate toward zero
        return amount // 100 if amount >= 0 else -(-amount // 100)

    return min(discount_value, original_price)


@dataclass(frozen=True)
class DiscountQuote:
    original_price: int
    discount_amount: int
    final_price: int
    coupon_code: str


def quote_discount(code: str, original_price: int) -> DiscountQuote:
    """Price a purchase of ``original_price`` with the coupon ``code``."""
    from storefront.coupon.coupon import Coupon

    if original_price is None or original_price < 0:
        raise ValidationError({"original_price": ["Invalid original_price"]})

    coupon = current_domain.repository_for(Coupon).find_by_code(code)
    if coupon is None:
        raise ObjectNotFoundError({"_entity": "Coupon not found"})
    if not coupon.is_redeemable():
        raise ValidationError({"coupon": [f"Coupon is {coupon.status.lower()}"]})

    discount_amount = coupon.calculate_discount(original_price)
    return DiscountQuote(
        original_price=original_price,
        discount_amount=discount_amount,
        final_price=original_price - discount_amount,
        coupon_code=coupon.code,
    )
