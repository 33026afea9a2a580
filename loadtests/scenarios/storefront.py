"""Storefront load test scenarios.

Two stateful journeys: a shopper going from cart to a settled payment, and
a burst of checkouts against one scarce product to exercise the stock
decrement under contention.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import cart_data, coupon_data, product_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState


class ShopperJourney(SequentialTaskSet):
    """Create Product -> Create Coupon -> Create Cart -> Checkout ->
    Confirm Order -> Initiate Payment -> Complete Payment.

    Generates events: ProductCreated, CouponCreated, CartCreated,
    ProductStockChanged, OrderPlaced, CartCheckedOut, OrderConfirmed,
    PaymentInitiated, PaymentCompleted, OrderCompleted.
    """

    def on_start(self):
        self.state = ShopperState()

    @task
    def create_product(self):
        with self.client.post(
            "/products",
            json=product_data(),
            catch_response=True,
            name="POST /products",
        ) as resp:
            if resp.status_code == 201:
                self.state.product_id = resp.json()["id"]
            else:
                resp.failure(f"Create product failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_coupon(self):
        # Roughly half the shoppers use a coupon
        if random.random() < 0.5:
            return
        with self.client.post(
            "/coupons",
            json=coupon_data(),
            catch_response=True,
            name="POST /coupons",
        ) as resp:
            if resp.status_code == 201:
                self.state.coupon_id = resp.json()["id"]
            else:
                resp.failure(f"Create coupon failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def create_cart(self):
        with self.client.post(
            "/carts",
            json=cart_data(self.state.product_id, self.state.coupon_id),
            catch_response=True,
            name="POST /carts",
        ) as resp:
            if resp.status_code == 201:
                self.state.cart_id = resp.json()["id"]
            else:
                resp.failure(f"Create cart failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def checkout(self):
        with self.client.post(
            f"/carts/{self.state.cart_id}/checkout",
            catch_response=True,
            name="POST /carts/{id}/checkout",
        ) as resp:
            if resp.status_code == 201:
                body = resp.json()
                self.state.order_id = body["order_id"]
                self.state.paid_amount = body["paid_amount"]
            else:
                resp.failure(f"Checkout failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def confirm_order(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/confirm",
            catch_response=True,
            name="POST /orders/{id}/confirm",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Confirm order failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def initiate_payment(self):
        with self.client.post(
            "/payments",
            json={"order_id": self.state.order_id},
            catch_response=True,
            name="POST /payments",
        ) as resp:
            if resp.status_code == 201:
                self.state.payment_id = resp.json()["id"]
            else:
                resp.failure(f"Initiate payment failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def complete_payment(self):
        with self.client.post(
            f"/payments/{self.state.payment_id}/complete",
            catch_response=True,
            name="POST /payments/{id}/complete",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Complete payment failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class ScarceProductRush(SequentialTaskSet):
    """Create a product with little stock, then race carts to check it out.

    Once stock runs out, checkouts are expected to be rejected with
    "Product is out of stock" or an insufficient stock error; those count
    as successes. Anything else is a failure.
    """

    def on_start(self):
        self.state = ShopperState()

    @task
    def create_scarce_product(self):
        with self.client.post(
            "/products",
            json=product_data(stock=random.randint(1, 5)),
            catch_response=True,
            name="POST /products (scarce)",
        ) as resp:
            if resp.status_code == 201:
                self.state.product_id = resp.json()["id"]
            else:
                resp.failure(f"Create product failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def rush(self):
        for _ in range(8):
            with self.client.post(
                "/carts",
                json={"product_id": self.state.product_id, "quantity": 1},
                catch_response=True,
                name="POST /carts (rush)",
            ) as resp:
                if resp.status_code == 400:
                    # Stock is gone before the cart could be created
                    resp.success()
                    break
                if resp.status_code != 201:
                    resp.failure(f"Rush cart failed: {resp.status_code} — {extract_error_detail(resp)}")
                    break
                cart_id = resp.json()["id"]

            with self.client.post(
                f"/carts/{cart_id}/checkout",
                catch_response=True,
                name="POST /carts/{id}/checkout (rush)",
            ) as resp:
                if resp.status_code == 201:
                    continue
                if resp.status_code == 400:
                    resp.success()
                    break
                resp.failure(f"Rush checkout failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class ShopperUser(HttpUser):
    """Locust user simulating shoppers.

    Weighted distribution:
    - 80% full shopper journey
    - 20% scarce product rush
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        ShopperJourney: 4,
        ScarceProductRush: 1,
    }


class CheckoutContentionUser(HttpUser):
    """Locust user that only races checkouts on scarce products."""

    wait_time = between(0.1, 0.5)
    tasks = [ScarceProductRush]
