"""Shared BDD fixtures and step definitions for the Storefront domain."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then, when
from storefront.cart.cart import Cart
from storefront.order.lifecycle import ConfirmOrder
from storefront.order.order import Order
from storefront.product.product import Product

from tests.storefront.helpers import checkout, create_cart, create_coupon, create_product, error_message


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def shop():
    """Ids, results and the last captured error of a scenario."""
    return {"coupons": {}, "error": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse("a product priced {price:d} with {stock:d} in stock"))
def product_in_stock(shop, price, stock):
    shop["product_id"] = create_product(price=price, stock=stock)


@given(parsers.cfparse('an active coupon "{code}" worth {value:d} percent'))
def percentage_coupon(shop, code, value):
    shop["coupons"][code] = create_coupon(code=code, discount_type="Percentage", discount_value=value)


@given(parsers.cfparse('an active coupon "{code}" worth {value:d} off'))
def fixed_coupon(shop, code, value):
    shop["coupons"][code] = create_coupon(code=code, discount_type="Fixed", discount_value=value)


@given(parsers.cfparse("a cart for {quantity:d} unit"))
@given(parsers.cfparse("a cart for {quantity:d} units"))
def cart_without_coupon(shop, quantity):
    shop["cart_id"] = create_cart(shop["product_id"], quantity=quantity)


@given(parsers.cfparse('a cart for {quantity:d} unit using coupon "{code}"'))
def cart_with_coupon(shop, quantity, code):
    shop["cart_id"] = create_cart(shop["product_id"], quantity=quantity, coupon_id=shop["coupons"][code])


@given("the cart has been checked out")
def cart_checked_out(shop):
    result = checkout(shop["cart_id"])
    shop["result"] = result
    shop["order_id"] = str(result.order.id)


@given("the order is confirmed")
@when("the order is confirmed")
def order_confirmed(shop):
    current_domain.process(ConfirmOrder(order_id=shop["order_id"]), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps (shared)
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order status is "{status}"'))
def order_status_is(shop, status):
    assert current_domain.repository_for(Order).get(shop["order_id"]).status == status


@then(parsers.cfparse("the product stock is {stock:d}"))
def product_stock_is(shop, stock):
    assert current_domain.repository_for(Product).get(shop["product_id"]).stock == stock


@then(parsers.cfparse('the cart status is "{status}"'))
def cart_status_is(shop, status):
    assert current_domain.repository_for(Cart).get(shop["cart_id"]).status == status


@then(parsers.cfparse('the action is rejected with "{message}"'))
def action_rejected(shop, message):
    assert shop["error"] is not None, "Expected an error but none was raised"
    assert message in error_message(shop["error"])

