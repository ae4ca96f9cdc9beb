"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the engine's validation rules
and match the exact field names expected by the API's Pydantic request
schemas. SKUs come from the fake stock oracle's seeded catalogue so scans
can actually succeed.
"""

import random
import uuid

from faker import Faker

fake = Faker()

# SKU -> on-hand units seeded in FakeStockOracle
IN_STOCK_SKUS = ["WH-001", "SF-002"]
OUT_OF_STOCK_SKUS = ["UC-003"]
OPERATORS = ["OP001", "OP002", "OP003"]
CARRIERS = ["DHL", "UPS", "FedEx", "CTT"]
BOXES = ["BOX-001", "BOX-002", "BOX-003"]


def unique_order_id() -> str:
    """Generate unique order IDs like 'ORD-LT-a1b2c3d4'."""
    return f"ORD-LT-{uuid.uuid4().hex[:8]}"


def order_item(order_id: str, index: int, sku: str) -> dict:
    return {
        "id": f"{order_id}-ITEM-{index:03d}",
        "sku": sku,
        "product_name": fake.catch_phrase()[:60],
        "requested_quantity": random.randint(1, 3),
        "unit_price": round(random.uniform(5.0, 150.0), 2),
        "is_fragile": random.random() < 0.2,
    }


def order_data(skus: list[str] | None = None) -> dict:
    """A complete intake payload for POST /orders."""
    order_id = unique_order_id()
    skus = skus or random.sample(IN_STOCK_SKUS, k=random.randint(1, len(IN_STOCK_SKUS)))
    items = [order_item(order_id, index, sku) for index, sku in enumerate(skus, start=1)]
    return {
        "order_id": order_id,
        "customer_ref": f"CUST-{uuid.uuid4().hex[:6].upper()}",
        "customer_name": fake.name(),
        "customer_email": fake.email(),
        "shipping_address": fake.address().replace("\n", ", "),
        "supplier_ref": f"SUP-{random.randint(1, 20):03d}",
        "special_instructions": fake.sentence() if random.random() < 0.3 else None,
        "total_amount": round(sum(i["unit_price"] * i["requested_quantity"] for i in items), 2),
        "items": items,
    }


def tracking_number() -> str:
    return f"TRK{uuid.uuid4().hex[:12].upper()}"
