import json

import pytest
from fulfillment.order.intake import ReceiveOrder
from fulfillment.orchestrator import FulfillmentOrchestrator
from fulfillment.stock import get_stock_oracle
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def fulfillment_bed():
    from fulfillment.domain import fulfillment

    bed = DomainFixture(fulfillment)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(fulfillment_bed):
    with fulfillment_bed.domain_context():
        yield


@pytest.fixture()
def stock_oracle():
    return get_stock_oracle()


@pytest.fixture()
def orchestrator(stock_oracle):
    return FulfillmentOrchestrator(stock_oracle=stock_oracle, lock_timeout=1.0, oracle_timeout=1.0)


def headphones(order_id="O1", quantity=2):
    return {
        "id": f"{order_id}-ITEM-001",
        "sku": "WH-001",
        "product_name": "Wireless Headphones",
        "requested_quantity": quantity,
        "unit_price": 59.9,
    }


@pytest.fixture()
def receive_order():
    """Hand an order over from intake and return its id."""

    def _receive(order_id="O1", items=None, **overrides):
        fields = {
            "order_id": order_id,
            "customer_ref": "CUST-001",
            "customer_name": "Maria Santos",
            "shipping_address": "Rua Augusta 100, Lisboa",
            "supplier_ref": "SUP-001",
            "items": json.dumps(items or [headphones(order_id)]),
        }
        fields.update(overrides)
        return current_domain.process(ReceiveOrder(**fields), asynchronous=False)

    return _receive
