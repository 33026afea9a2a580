"""Coupon aggregate — a discount code redeemable inside a validity window.

Coupon status is derived from time: before ``valid_from`` it is Inactive,
after ``valid_until`` it is Expired, in between it is Active unless an
administrator disabled it. Stored status can lag the clock; repositories call
``reconcile`` on every read and persist the correction.

State Machine (administrative transitions):
    ACTIVE → INACTIVE | EXPIRED
    INACTIVE → ACTIVE | EXPIRED
    EXPIRED is terminal
"""

from datetime import datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Integer, String

from storefront.coupon.discount import DiscountType, calculate_discount
from storefront.coupon.events import CouponCreated, CouponStatusChanged
from storefront.domain import storefront
from storefront.errors import DomainError
from storefront.shared.clock import as_utc, utc_now


class CouponStatus(Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    EXPIRED = "Expired"


_VALID_TRANSITIONS = {
    CouponStatus.ACTIVE: {CouponStatus.INACTIVE, CouponStatus.EXPIRED},
    CouponStatus.INACTIVE: {CouponStatus.ACTIVE, CouponStatus.EXPIRED},
    CouponStatus.EXPIRED: set(),  # Terminal
}

_TRANSITION_VERBS = {
    CouponStatus.ACTIVE: "activate",
    CouponStatus.INACTIVE: "deactivate",
    CouponStatus.EXPIRED: "expire",
}


@storefront.aggregate
class Coupon:
    code = String(required=True, max_length=50)
    discount_type = String(required=True, choices=DiscountType)
    discount_value = Integer(required=True)
    valid_from = DateTime(required=True)
    valid_until = DateTime(required=True)
    enabled = Boolean(default=True)
    status = String(choices=CouponStatus, default=CouponStatus.ACTIVE.value)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def code_must_not_be_blank(self):
        if not self.code or not self.code.strip():
            raise ValidationError({"code": ["Coupon code is required"]})

    @invariant.post
    def discount_must_be_within_bounds(self):
        if self.discount_value is None or self.discount_value <= 0:
            raise ValidationError({"discount_value": ["Discount value must be positive"]})
        if self.discount_type == DiscountType.PERCENTAGE.value and self.discount_value > 100:
            raise ValidationError({"discount_value": ["Percentage discount cannot exceed 100"]})

    @invariant.post
    def validity_window_must_be_ordered(self):
        if self.valid_from and self.valid_until and as_utc(self.valid_from) > as_utc(self.valid_until):
            raise ValidationError({"valid_until": ["valid_until must not be earlier than valid_from"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, code, discount_type, discount_value, valid_from, valid_until):
        now = utc_now()
        coupon = cls(
            code=code,
            discount_type=discount_type,
            discount_value=discount_value,
            valid_from=valid_from,
            valid_until=valid_until,
            enabled=True,
            status=CouponStatus.ACTIVE.value,
            created_at=now,
            updated_at=now,
        )
        coupon.status = coupon.status_at(now).value
        coupon.raise_(
            CouponCreated(
                coupon_id=str(coupon.id),
                code=coupon.code,
                discount_type=coupon.discount_type,
                discount_value=coupon.discount_value,
                status=coupon.status,
                created_at=now,
            )
        )
        return coupon

    # -------------------------------------------------------------------
    # Time-derived status
    # -------------------------------------------------------------------
    def is_valid(self, now: datetime | None = None) -> bool:
        """True when ``now`` falls inside the validity window, whatever the stored status."""
        now = as_utc(now) if now else utc_now()
        return as_utc(self.valid_from) <= now <= as_utc(self.valid_until)

    def status_at(self, now: datetime | None = None) -> CouponStatus:
        """Status this coupon should have at ``now``. Pure and idempotent."""
        now = as_utc(now) if now else utc_now()
        if CouponStatus(self.status) == CouponStatus.EXPIRED:
            return CouponStatus.EXPIRED
        if now > as_utc(self.valid_until):
            return CouponStatus.EXPIRED
        if now < as_utc(self.valid_from) or not self.enabled:
            return CouponStatus.INACTIVE
        return CouponStatus.ACTIVE

    def reconcile(self, now: datetime | None = None) -> bool:
        """Bring the stored status in line with the clock. Returns True if it changed."""
        derived = self.status_at(now)
        if derived == CouponStatus(self.status):
            return False

        previous = self.status
        self.status = derived.value
        self.updated_at = utc_now()
        self.raise_(
            CouponStatusChanged(
                coupon_id=str(self.id),
                previous_status=previous,
                new_status=self.status,
                reason="schedule",
            )
        )
        return True

    def is_redeemable(self, now: datetime | None = None) -> bool:
        return self.status == CouponStatus.ACTIVE.value and self.is_valid(now)

    def calculate_discount(self, original_price: int) -> int:
        return calculate_discount(self.discount_type, self.discount_value, original_price)

    # -------------------------------------------------------------------
    # Administrative status changes
    # -------------------------------------------------------------------
    def change_status(self, target, now: datetime | None = None):
        target = CouponStatus(target)
        current = CouponStatus(self.status)
        if target not in _VALID_TRANSITIONS[current]:
            raise DomainError(f"Cannot {_TRANSITION_VERBS[target]} {current.value.lower()} coupon")

        if target == CouponStatus.ACTIVE and not self.is_valid(now):
            raise DomainError("Cannot activate coupon outside its validity window")

        with atomic_change(self):
            if target == CouponStatus.EXPIRED:
                self.status = CouponStatus.EXPIRED.value
            else:
                self.enabled = target == CouponStatus.ACTIVE
                self.status = target.value
            self.updated_at = utc_now()

        self.raise_(
            CouponStatusChanged(
                coupon_id=str(self.id),
                previous_status=current.value,
                new_status=self.status,
                reason="admin",
            )
        )
