"""Tests for the Cart aggregate: defaults, expiry, modification and checkout."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from storefront.cart.cart import CART_KEEP_HOURS, CART_TTL_MINUTES, Cart, CartStatus
from storefront.cart.events import CartCheckedOut, CartCreated, CartExpired
from storefront.errors import DomainError


def _make_cart(**overrides):
    values = {"product_id": "prod-001", "quantity": 2}
    values.update(overrides)
    return Cart.create(**values)


class TestCartCreation:
    def test_new_cart_is_active(self):
        cart = _make_cart()
        assert cart.status == CartStatus.ACTIVE.value
        assert cart.coupon_id is None

    def test_default_lifetimes(self):
        before = datetime.now(UTC)
        cart = _make_cart()
        after = datetime.now(UTC)

        assert before + timedelta(minutes=CART_TTL_MINUTES) <= cart.expired_at
        assert cart.expired_at <= after + timedelta(minutes=CART_TTL_MINUTES)
        assert before + timedelta(hours=CART_KEEP_HOURS) <= cart.keep_until
        assert cart.keep_until <= after + timedelta(hours=CART_KEEP_HOURS)

    def test_create_raises_event(self):
        cart = _make_cart(coupon_id="coupon-001")
        event = cart._events[0]
        assert isinstance(event, CartCreated)
        assert event.coupon_id == "coupon-001"
        assert event.quantity == 2

    def test_zero_quantity_is_rejected(self):
        with pytest.raises(ValidationError):
            _make_cart(quantity=0)

    def test_expiry_beyond_default_keep_window_is_accepted(self):
        expired_at = datetime.now(UTC) + timedelta(days=2)
        cart = _make_cart(expired_at=expired_at)
        assert cart.expired_at == expired_at
        assert cart.keep_until < cart.expired_at


class TestCartExpiry:
    def test_is_expired_after_expired_at(self):
        now = datetime.now(UTC)
        cart = _make_cart(expired_at=now + timedelta(minutes=5))
        assert cart.is_expired(now) is False
        assert cart.is_expired(now + timedelta(minutes=6)) is True

    def test_reconcile_expires_active_cart(self):
        cart = _make_cart(expired_at=datetime.now(UTC) - timedelta(minutes=1))
        cart._events.clear()

        assert cart.reconcile() is True
        assert cart.status == CartStatus.EXPIRED.value
        assert isinstance(cart._events[0], CartExpired)

    def test_reconcile_leaves_live_cart_alone(self):
        cart = _make_cart()
        assert cart.reconcile() is False
        assert cart.status == CartStatus.ACTIVE.value

    def test_mark_as_expired_is_idempotent(self):
        cart = _make_cart()
        cart.mark_as_expired()
        cart._events.clear()

        cart.mark_as_expired()
        assert cart.status == CartStatus.EXPIRED.value
        assert cart._events == []

    def test_checked_out_cart_cannot_expire(self):
        cart = _make_cart()
        cart.checkout("order-001")
        with pytest.raises(DomainError) as exc:
            cart.mark_as_expired()
        assert exc.value.message == "Cannot expire checkedout cart"

    def test_reconcile_ignores_checked_out_cart(self):
        cart = _make_cart(expired_at=datetime.now(UTC) + timedelta(minutes=1))
        cart.checkout("order-001")
        assert cart.reconcile(datetime.now(UTC) + timedelta(hours=1)) is False
        assert cart.status == CartStatus.CHECKED_OUT.value


class TestCartModification:
    def test_change_quantity(self):
        cart = _make_cart()
        cart.change_quantity(5)
        assert cart.quantity == 5

    def test_change_quantity_must_be_positive(self):
        cart = _make_cart()
        with pytest.raises(ValidationError):
            cart.change_quantity(0)

    def test_attach_and_detach_coupon(self):
        cart = _make_cart()
        cart.change_coupon("coupon-001")
        assert cart.coupon_id == "coupon-001"

        cart.change_coupon(None)
        assert cart.coupon_id is None

    def test_expired_cart_cannot_be_modified(self):
        cart = _make_cart()
        cart.mark_as_expired()
        with pytest.raises(DomainError) as exc:
            cart.change_quantity(3)
        assert exc.value.message == "Cannot update expired cart"


class TestCartCheckout:
    def test_checkout_active_cart(self):
        cart = _make_cart()
        cart._events.clear()

        cart.checkout("order-001")
        assert cart.status == CartStatus.CHECKED_OUT.value
        event = cart._events[0]
        assert isinstance(event, CartCheckedOut)
        assert event.order_id == "order-001"

    def test_cannot_checkout_twice(self):
        cart = _make_cart()
        cart.checkout("order-001")
        with pytest.raises(DomainError) as exc:
            cart.checkout("order-002")
        assert exc.value.message == "Cannot checkout checkedout cart"

    def test_cannot_checkout_expired_cart(self):
        cart = _make_cart()
        cart.mark_as_expired()
        with pytest.raises(DomainError):
            cart.assert_can_checkout()
