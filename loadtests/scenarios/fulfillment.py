"""Order fulfillment load test scenarios.

Stateful SequentialTaskSet journeys covering the warehouse happy path
(intake → scan → pack → ship), mis-scans that must be rejected, and
out-of-stock orders that end up on the shortage review list.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import (
    BOXES,
    CARRIERS,
    OPERATORS,
    OUT_OF_STOCK_SKUS,
    order_data,
    tracking_number,
)
from loadtests.helpers.response import error_code, extract_error_detail
from loadtests.helpers.state import OrderState


class _OrderJourney(SequentialTaskSet):
    skus: list[str] | None = None

    def on_start(self):
        self.state = OrderState()
        self.operator_id = random.choice(OPERATORS)

    def receive_order(self):
        payload = order_data(self.skus)
        with self.client.post(
            "/orders",
            json=payload,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["order_id"]
                self.state.item_ids = [item["id"] for item in payload["items"]]
                self.state.skus = [item["sku"] for item in payload["items"]]
                self.state.fragile_item_ids = {item["id"] for item in payload["items"] if item["is_fragile"]}
            else:
                resp.failure(f"Receive order failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()


class WarehouseHappyPathJourney(_OrderJourney):
    """Receive -> Scan every SKU -> Pack every item -> Ship every item -> History."""

    @task
    def intake(self):
        self.receive_order()

    @task
    def scan_items(self):
        for sku in self.state.skus:
            with self.client.post(
                f"/orders/{self.state.order_id}/scan",
                json={"operator_id": self.operator_id, "sku": sku},
                catch_response=True,
                name="POST /orders/{id}/scan",
            ) as resp:
                if resp.status_code == 200:
                    self.state.current_status = resp.json()["status"]
                else:
                    resp.failure(f"Scan failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def pack_items(self):
        for item_id in self.state.item_ids:
            material = "BUBBLE-001" if item_id in self.state.fragile_item_ids else random.choice(BOXES)
            with self.client.post(
                f"/orders/{self.state.order_id}/items/{item_id}/pack",
                json={"operator_id": self.operator_id, "material_id": material},
                catch_response=True,
                name="POST /orders/{id}/items/{item_id}/pack",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Pack failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def ship_items(self):
        self.state.tracking_number = tracking_number()
        carrier = random.choice(CARRIERS)
        for item_id in self.state.item_ids:
            with self.client.post(
                f"/orders/{self.state.order_id}/items/{item_id}/ship",
                json={
                    "operator_id": self.operator_id,
                    "carrier": carrier,
                    "tracking_number": self.state.tracking_number,
                },
                catch_response=True,
                name="POST /orders/{id}/items/{item_id}/ship",
            ) as resp:
                if resp.status_code == 200:
                    self.state.current_status = resp.json()["status"]
                else:
                    resp.failure(f"Ship failed: {resp.status_code} — {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def read_history(self):
        expected = len(self.state.item_ids) * 3
        with self.client.get(
            f"/orders/{self.state.order_id}/history",
            params={"limit": 100},
            catch_response=True,
            name="GET /orders/{id}/history",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"History failed: {resp.status_code} — {extract_error_detail(resp)}")
            elif len(resp.json()) != expected:
                resp.failure(f"History has {len(resp.json())} entries, expected {expected}")

    @task
    def done(self):
        self.interrupt()


class MisScanJourney(_OrderJourney):
    """Receive -> Scan a foreign SKU (rejected) -> Scan the right SKU -> Rescan (rejected)."""

    skus = ["SF-002"]

    @task
    def intake(self):
        self.receive_order()

    @task
    def scan_wrong_product(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/scan",
            json={"operator_id": self.operator_id, "sku": "WH-001"},
            catch_response=True,
            name="POST /orders/{id}/scan [wrong product]",
        ) as resp:
            if error_code(resp) == "WRONG_PRODUCT":
                resp.success()
            else:
                resp.failure(f"Expected WRONG_PRODUCT, got {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def scan_right_product(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/scan",
            json={"operator_id": self.operator_id, "sku": "SF-002"},
            catch_response=True,
            name="POST /orders/{id}/scan",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Scan failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def rescan(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/scan",
            json={"operator_id": self.operator_id, "sku": "SF-002"},
            catch_response=True,
            name="POST /orders/{id}/scan [rescan]",
        ) as resp:
            if error_code(resp) == "ILLEGAL_TRANSITION":
                resp.success()
            else:
                resp.failure(f"Expected ILLEGAL_TRANSITION, got {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class ShortageJourney(_OrderJourney):
    """Receive an out-of-stock order -> Pick all (nothing to pick) -> Review shortages."""

    skus = OUT_OF_STOCK_SKUS

    @task
    def intake(self):
        self.receive_order()

    @task
    def pick_all(self):
        with self.client.post(
            f"/orders/{self.state.order_id}/pick-all",
            json={"operator_id": self.operator_id},
            catch_response=True,
            name="POST /orders/{id}/pick-all [shortage]",
        ) as resp:
            if error_code(resp) == "NOTHING_TO_PICK":
                resp.success()
            else:
                resp.failure(f"Expected NOTHING_TO_PICK, got {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def review_shortages(self):
        with self.client.get(
            f"/orders/{self.state.order_id}/shortages",
            catch_response=True,
            name="GET /orders/{id}/shortages",
        ) as resp:
            if resp.status_code != 200 or not resp.json():
                resp.failure(f"Expected an open shortage: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class WorkQueueJourney(SequentialTaskSet):
    """Supervisors polling the picking, packing and shipping queues."""

    @task
    def poll_queues(self):
        for queue in ("picking", "packing", "shipping"):
            with self.client.get(
                f"/queues/{queue}",
                catch_response=True,
                name="GET /queues/{queue}",
            ) as resp:
                if resp.status_code != 200:
                    resp.failure(f"Queue read failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class FulfillmentUser(HttpUser):
    """Locust user simulating warehouse operators.

    Weighted distribution:
    - 60% Happy path (intake → shipped)
    - 15% Mis-scan journey
    - 15% Stock shortage journey
    - 10% Work queue polling
    """

    wait_time = between(0.5, 2.0)
    tasks = {
        WarehouseHappyPathJourney: 6,
        MisScanJourney: 3,
        ShortageJourney: 3,
        WorkQueueJourney: 2,
    }
