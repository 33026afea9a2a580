"""Tests for the Coupon aggregate: invariants, time-derived status and admin changes."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from storefront.coupon.coupon import Coupon, CouponStatus
from storefront.coupon.events import CouponCreated, CouponStatusChanged
from storefront.errors import DomainError


def _make_coupon(discount_type="Percentage", discount_value=10, valid_from=None, valid_until=None, code="P10"):
    now = datetime.now(UTC)
    return Coupon.create(
        code=code,
        discount_type=discount_type,
        discount_value=discount_value,
        valid_from=valid_from or now - timedelta(days=1),
        valid_until=valid_until or now + timedelta(days=7),
    )


class TestCouponCreation:
    def test_coupon_valid_now_is_active(self):
        coupon = _make_coupon()
        assert coupon.status == CouponStatus.ACTIVE.value
        assert coupon.enabled is True

    def test_coupon_not_yet_valid_is_inactive(self):
        now = datetime.now(UTC)
        coupon = _make_coupon(valid_from=now + timedelta(days=1), valid_until=now + timedelta(days=2))
        assert coupon.status == CouponStatus.INACTIVE.value

    def test_coupon_past_its_window_is_expired(self):
        now = datetime.now(UTC)
        coupon = _make_coupon(valid_from=now - timedelta(days=2), valid_until=now - timedelta(days=1))
        assert coupon.status == CouponStatus.EXPIRED.value

    def test_create_raises_event(self):
        coupon = _make_coupon()
        assert isinstance(coupon._events[0], CouponCreated)
        assert coupon._events[0].code == "P10"

    def test_percentage_above_100_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            _make_coupon(discount_value=101)
        assert "Percentage discount cannot exceed 100" in str(exc.value)

    def test_zero_discount_is_rejected(self):
        with pytest.raises(ValidationError):
            _make_coupon(discount_type="Fixed", discount_value=0)

    def test_large_fixed_discount_is_allowed(self):
        coupon = _make_coupon(discount_type="Fixed", discount_value=5000)
        assert coupon.discount_value == 5000

    def test_unknown_discount_type_is_rejected(self):
        with pytest.raises(ValidationError):
            _make_coupon(discount_type="BuyOneGetOne")

    def test_window_must_be_ordered(self):
        now = datetime.now(UTC)
        with pytest.raises(ValidationError):
            _make_coupon(valid_from=now + timedelta(days=2), valid_until=now + timedelta(days=1))

    def test_blank_code_is_rejected(self):
        with pytest.raises(ValidationError):
            _make_coupon(code=" ")


class TestTimeDerivedStatus:
    def test_is_valid_ignores_stored_status(self):
        coupon = _make_coupon()
        coupon.change_status(CouponStatus.INACTIVE.value)
        assert coupon.is_valid() is True
        assert coupon.is_redeemable() is False

    def test_status_at_is_pure(self):
        coupon = _make_coupon()
        later = datetime.now(UTC) + timedelta(days=30)
        assert coupon.status_at(later) == CouponStatus.EXPIRED
        assert coupon.status == CouponStatus.ACTIVE.value

    def test_reconcile_expires_coupon(self):
        coupon = _make_coupon()
        coupon._events.clear()

        changed = coupon.reconcile(datetime.now(UTC) + timedelta(days=30))
        assert changed is True
        assert coupon.status == CouponStatus.EXPIRED.value
        event = coupon._events[0]
        assert isinstance(event, CouponStatusChanged)
        assert event.reason == "schedule"

    def test_reconcile_is_idempotent(self):
        coupon = _make_coupon()
        later = datetime.now(UTC) + timedelta(days=30)
        coupon.reconcile(later)
        assert coupon.reconcile(later) is False

    def test_reconcile_activates_coupon_once_window_opens(self):
        now = datetime.now(UTC)
        coupon = _make_coupon(valid_from=now + timedelta(days=1), valid_until=now + timedelta(days=3))
        assert coupon.reconcile(now + timedelta(days=2)) is True
        assert coupon.status == CouponStatus.ACTIVE.value

    def test_expired_is_sticky(self):
        coupon = _make_coupon()
        coupon.change_status(CouponStatus.EXPIRED.value)
        assert coupon.reconcile() is False
        assert coupon.status == CouponStatus.EXPIRED.value

    def test_disabled_coupon_stays_inactive_inside_window(self):
        coupon = _make_coupon()
        coupon.change_status(CouponStatus.INACTIVE.value)
        assert coupon.reconcile() is False
        assert coupon.status == CouponStatus.INACTIVE.value


class TestAdministrativeChanges:
    def test_deactivate_and_reactivate(self):
        coupon = _make_coupon()
        coupon.change_status(CouponStatus.INACTIVE.value)
        coupon.change_status(CouponStatus.ACTIVE.value)
        assert coupon.status == CouponStatus.ACTIVE.value
        assert coupon.enabled is True

    def test_admin_change_raises_event(self):
        coupon = _make_coupon()
        coupon._events.clear()

        coupon.change_status(CouponStatus.INACTIVE.value)
        event = coupon._events[0]
        assert isinstance(event, CouponStatusChanged)
        assert event.previous_status == "Active"
        assert event.new_status == "Inactive"
        assert event.reason == "admin"

    def test_cannot_reactivate_expired_coupon(self):
        coupon = _make_coupon()
        coupon.change_status(CouponStatus.EXPIRED.value)
        with pytest.raises(DomainError) as exc:
            coupon.change_status(CouponStatus.ACTIVE.value)
        assert exc.value.message == "Cannot activate expired coupon"

    def test_cannot_activate_outside_window(self):
        now = datetime.now(UTC)
        coupon = _make_coupon(valid_from=now + timedelta(days=1), valid_until=now + timedelta(days=2))
        with pytest.raises(DomainError):
            coupon.change_status(CouponStatus.ACTIVE.value)

    def test_calculate_discount_uses_coupon_terms(self):
        coupon = _make_coupon(discount_type="Fixed", discount_value=150)
        assert coupon.calculate_discount(100) == 100
