"""BDD tests for the order and payment lifecycle."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when
from storefront.errors import ConflictError, DomainError
from storefront.order.lifecycle import CancelOrder, CompleteOrder
from storefront.payment.creation import InitiatePayment
from storefront.payment.lifecycle import CompletePayment, RefundPayment
from storefront.payment.payment import Payment

from tests.storefront.helpers import capture

scenarios("features/order_payment.feature")


def _process(command):
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a payment is initiated for the order")
def payment_initiated(shop):
    shop["payment_id"] = _process(InitiatePayment(order_id=shop["order_id"]))


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the order is completed")
def complete_order(shop):
    _process(CompleteOrder(order_id=shop["order_id"]))


@when("the payment is completed")
def complete_payment(shop):
    capture(shop, lambda: _process(CompletePayment(payment_id=shop["payment_id"])))


@when("the payment is refunded")
def refund_payment(shop):
    capture(shop, lambda: _process(RefundPayment(payment_id=shop["payment_id"])))


@when("another payment is initiated for the order")
def initiate_again(shop):
    capture(shop, lambda: _process(InitiatePayment(order_id=shop["order_id"])))


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then("cancelling the order is rejected")
def cancelling_rejected(shop):
    with pytest.raises(DomainError):
        _process(CancelOrder(order_id=shop["order_id"]))


@then(parsers.cfparse('the payment status is "{status}"'))
def payment_status_is(shop, status):
    assert current_domain.repository_for(Payment).get(shop["payment_id"]).status == status


@then("the payment is rejected as a conflict")
def payment_conflict(shop):
    assert isinstance(shop["error"], ConflictError)
