"""Storefront load test scenarios.

Two stateful SequentialTaskSet journeys: a shopper who funds the wallet,
fills a cart, checks out and cancels one order, and an escrow journey that
drives orders through delivery and a refunded return.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    cart_line_data,
    deposit_amount,
    product_data,
    return_reason,
    shop_data,
    user_data,
)
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState


class _ShopperJourney(SequentialTaskSet):
    def on_start(self):
        self.state = ShopperState()

    @property
    def headers(self):
        return {"X-User-Id": self.state.user_id}

    def _expect(self, resp, status, label):
        if resp.status_code != status:
            resp.failure(f"{label} failed: {resp.status_code} — {extract_error_detail(resp)}")
            self.interrupt()
            return False
        return True

    @task
    def register(self):
        with self.client.post("/users", json=user_data(), catch_response=True, name="POST /users") as resp:
            if self._expect(resp, 201, "Register user"):
                self.state.user_id = resp.json()["user_id"]

    @task
    def stock_catalogue(self):
        with self.client.post("/shops", json=shop_data(), catch_response=True, name="POST /shops") as resp:
            if not self._expect(resp, 201, "Register shop"):
                return
            self.state.shop_id = resp.json()["shop_id"]

        for _ in range(3):
            with self.client.post(
                "/products",
                json=product_data(),
                catch_response=True,
                name="POST /products",
            ) as resp:
                if self._expect(resp, 201, "Add product"):
                    self.state.product_ids.append(resp.json()["product_id"])

    @task
    def fund_wallet(self):
        with self.client.post(
            "/wallet/deposit",
            json=deposit_amount(),
            headers=self.headers,
            catch_response=True,
            name="POST /wallet/deposit",
        ) as resp:
            if self._expect(resp, 200, "Deposit"):
                self.state.expected_balance = resp.json()["balance"]

    @task
    def fill_cart(self):
        for product_id in self.state.product_ids:
            with self.client.post(
                "/cart/items",
                json=cart_line_data(product_id, self.state.shop_id),
                headers=self.headers,
                catch_response=True,
                name="POST /cart/items",
            ) as resp:
                if self._expect(resp, 201, "Add to cart"):
                    self.state.line_ids.append(resp.json()["line_id"])

    @task
    def view_cart(self):
        self.client.get("/cart", headers=self.headers, name="GET /cart")

    @task
    def checkout(self):
        with self.client.post(
            "/orders/checkout",
            headers=self.headers,
            catch_response=True,
            name="POST /orders/checkout",
        ) as resp:
            if self._expect(resp, 201, "Checkout"):
                self.state.order_ids = [order["id"] for order in resp.json()]


class CheckoutJourney(_ShopperJourney):
    """Register -> Catalogue -> Deposit -> Cart -> Checkout -> Cancel one -> Withdraw."""

    @task
    def cancel_one(self):
        order_id = random.choice(self.state.order_ids)
        with self.client.post(
            f"/orders/{order_id}/cancel",
            headers=self.headers,
            catch_response=True,
            name="POST /orders/{id}/cancel",
        ) as resp:
            self._expect(resp, 200, "Cancel order")

    @task
    def withdraw(self):
        self.client.post(
            "/wallet/withdraw",
            json={"amount": 1.0},
            headers=self.headers,
            name="POST /wallet/withdraw",
        )

    @task
    def history(self):
        self.client.get("/wallet/transactions", headers=self.headers, name="GET /wallet/transactions")
        self.interrupt(reschedule=False)


class EscrowJourney(_ShopperJourney):
    """Checkout -> deliver every order -> return one -> approve the return."""

    @task
    def deliver(self):
        for order_id in self.state.order_ids:
            with self.client.patch(
                f"/orders/{order_id}/status",
                json={"status": "delivered"},
                catch_response=True,
                name="PATCH /orders/{id}/status",
            ) as resp:
                self._expect(resp, 200, "Deliver order")

    @task
    def request_return(self):
        with self.client.post(
            "/returns",
            json={"order_id": self.state.order_ids[0], "reason": return_reason()},
            headers=self.headers,
            catch_response=True,
            name="POST /returns",
        ) as resp:
            if self._expect(resp, 201, "Request return"):
                self.state.return_ids.append(resp.json()["id"])

    @task
    def approve_return(self):
        with self.client.post(
            f"/returns/{self.state.return_ids[0]}/resolve",
            json={"approve": True},
            catch_response=True,
            name="POST /returns/{id}/resolve",
        ) as resp:
            self._expect(resp, 200, "Approve return")
        self.interrupt(reschedule=False)


class ShopperUser(HttpUser):
    wait_time = between(0.5, 2)
    tasks = {CheckoutJourney: 3, EscrowJourney: 1}
