"""Tests for the Product aggregate: creation, stock and lifecycle."""

from datetime import UTC, datetime, timedelta

import pytest
from protean.exceptions import ValidationError
from storefront.errors import DomainError
from storefront.product.events import ProductActivated, ProductCreated, ProductStockChanged
from storefront.product.product import Product, ProductStatus


def _make_product(stock=10, price=100, status=None, begin_at=None, end_at=None):
    now = datetime.now(UTC)
    return Product.create(
        title="Mechanical Keyboard",
        price=price,
        stock=stock,
        begin_at=begin_at or now - timedelta(days=1),
        end_at=end_at or now + timedelta(days=30),
        status=status,
    )


class TestProductCreation:
    def test_create_defaults_to_active(self):
        product = _make_product()
        assert product.status == ProductStatus.ACTIVE.value
        assert product.stock == 10
        assert product.created_at is not None

    def test_create_without_stock_is_out_of_stock(self):
        product = _make_product(stock=0)
        assert product.status == ProductStatus.OUT_OF_STOCK.value

    def test_create_inactive(self):
        product = _make_product(status=ProductStatus.INACTIVE.value)
        assert product.status == ProductStatus.INACTIVE.value

    def test_create_raises_event(self):
        product = _make_product()
        assert len(product._events) == 1
        event = product._events[0]
        assert isinstance(event, ProductCreated)
        assert event.product_id == str(product.id)
        assert event.stock == 10

    def test_blank_title_is_rejected(self):
        now = datetime.now(UTC)
        with pytest.raises(ValidationError) as exc:
            Product.create(title="   ", price=100, stock=1, begin_at=now, end_at=now)
        assert "Title is required" in str(exc.value)

    def test_negative_price_is_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(price=-1)

    def test_negative_stock_is_rejected(self):
        with pytest.raises(ValidationError):
            _make_product(stock=-1)


class TestAvailability:
    def test_active_product_in_window_is_available(self):
        assert _make_product().is_available() is True

    def test_out_of_stock_product_is_unavailable(self):
        assert _make_product(stock=0).is_available() is False

    def test_inactive_product_is_unavailable(self):
        assert _make_product(status=ProductStatus.INACTIVE.value).is_available() is False

    def test_product_before_sales_window_is_unavailable(self):
        now = datetime.now(UTC)
        product = _make_product(begin_at=now + timedelta(days=1), end_at=now + timedelta(days=2))
        assert product.is_available() is False

    def test_product_after_sales_window_is_unavailable(self):
        now = datetime.now(UTC)
        product = _make_product(begin_at=now - timedelta(days=2), end_at=now - timedelta(days=1))
        assert product.is_available() is False

    def test_availability_at_a_given_instant(self):
        now = datetime.now(UTC)
        product = _make_product(begin_at=now + timedelta(days=1), end_at=now + timedelta(days=2))
        assert product.is_available(now + timedelta(days=1, hours=1)) is True


class TestDecreaseStock:
    def test_decrease_stock(self):
        product = _make_product(stock=10)
        product.decrease_stock(3)
        assert product.stock == 7
        assert product.status == ProductStatus.ACTIVE.value

    def test_decrease_entire_stock_marks_out_of_stock(self):
        product = _make_product(stock=5)
        product.decrease_stock(5)
        assert product.stock == 0
        assert product.status == ProductStatus.OUT_OF_STOCK.value

    def test_decrease_beyond_stock_fails(self):
        product = _make_product(stock=5)
        with pytest.raises(ValidationError) as exc:
            product.decrease_stock(6)
        assert "Insufficient stock. Available: 5" in str(exc.value)
        assert product.stock == 5

    def test_decrease_by_zero_fails(self):
        product = _make_product(stock=5)
        with pytest.raises(ValidationError):
            product.decrease_stock(0)

    def test_decrease_raises_stock_changed_event(self):
        product = _make_product(stock=5)
        product._events.clear()

        product.decrease_stock(2)
        assert len(product._events) == 1
        event = product._events[0]
        assert isinstance(event, ProductStockChanged)
        assert event.previous_stock == 5
        assert event.new_stock == 3


class TestUpdateStock:
    def test_restock_out_of_stock_product_reactivates_it(self):
        product = _make_product(stock=0)
        product.update_stock(4)
        assert product.stock == 4
        assert product.status == ProductStatus.ACTIVE.value

    def test_zero_stock_marks_out_of_stock(self):
        product = _make_product(stock=4)
        product.update_stock(0)
        assert product.status == ProductStatus.OUT_OF_STOCK.value

    def test_restock_keeps_inactive_status(self):
        product = _make_product(status=ProductStatus.INACTIVE.value)
        product.update_stock(50)
        assert product.status == ProductStatus.INACTIVE.value

    def test_negative_stock_is_rejected(self):
        product = _make_product()
        with pytest.raises(ValidationError):
            product.update_stock(-1)


class TestLifecycle:
    def test_deactivate_active_product(self):
        product = _make_product()
        product.deactivate()
        assert product.status == ProductStatus.INACTIVE.value

    def test_activate_inactive_product(self):
        product = _make_product(status=ProductStatus.INACTIVE.value)
        product._events.clear()

        product.activate()
        assert product.status == ProductStatus.ACTIVE.value
        assert isinstance(product._events[0], ProductActivated)

    def test_cannot_activate_active_product(self):
        product = _make_product()
        with pytest.raises(DomainError) as exc:
            product.activate()
        assert exc.value.message == "Cannot activate active product"

    def test_cannot_deactivate_out_of_stock_product(self):
        product = _make_product(stock=0)
        with pytest.raises(DomainError) as exc:
            product.deactivate()
        assert exc.value.message == "Cannot deactivate outofstock product"
