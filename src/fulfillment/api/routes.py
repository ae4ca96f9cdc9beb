"""FastAPI routes for the fulfillment engine.

Operator actions block on order locks and stock lookups, so they run in the
threadpool, each inside its own fulfillment domain context.
"""

import json
import os

from fastapi import APIRouter, HTTPException, Query
from fastapi.concurrency import run_in_threadpool
from protean.utils.globals import current_domain

from fulfillment.api.schemas import (
    AuditEntryResponse,
    ConfigureStockOracleRequest,
    OrderIdResponse,
    OrderSnapshot,
    OrderSummary,
    PackingMaterialResponse,
    PackRequest,
    PickAllRequest,
    ReceiveOrderRequest,
    ResolveShortageRequest,
    ScanRequest,
    ShipRequest,
    ShortageFlagResponse,
    StockOracleConfigResponse,
)
from fulfillment.domain import fulfillment
from fulfillment.materials import list_materials
from fulfillment.order.intake import ReceiveOrder
from fulfillment.orchestrator import get_orchestrator
from fulfillment.stock import get_stock_oracle
from fulfillment.stock.fake_adapter import FakeStockOracle


async def _in_domain(fn, *args, **kwargs):
    def call():
        with fulfillment.domain_context():
            return fn(*args, **kwargs)

    return await run_in_threadpool(call)


# ---------------------------------------------------------------------------
# Orders Router
# ---------------------------------------------------------------------------
orders_router = APIRouter(prefix="/orders", tags=["orders"])


@orders_router.post("", status_code=201, response_model=OrderIdResponse)
async def receive_order(body: ReceiveOrderRequest) -> OrderIdResponse:
    """Accept an order handed over from intake."""
    items_json = json.dumps([item.model_dump(exclude_none=True) for item in body.items])

    def receive():
        command = ReceiveOrder(
            order_id=body.order_id,
            customer_ref=body.customer_ref,
            customer_name=body.customer_name,
            customer_email=body.customer_email,
            shipping_address=body.shipping_address,
            supplier_ref=body.supplier_ref,
            special_instructions=body.special_instructions,
            total_amount=body.total_amount,
            items=items_json,
        )
        return current_domain.process(command, asynchronous=False)

    result = await _in_domain(receive)
    return OrderIdResponse(order_id=result)


@orders_router.get("/{order_id}", response_model=OrderSnapshot)
async def get_order(order_id: str) -> OrderSnapshot:
    order = await _in_domain(get_orchestrator().get_order, order_id)
    return OrderSnapshot.from_order(order)


@orders_router.post("/{order_id}/scan", response_model=OrderSnapshot)
async def scan_item(order_id: str, body: ScanRequest) -> OrderSnapshot:
    """Pick the pending item matching a scanned barcode."""
    order = await _in_domain(get_orchestrator().pick_by_scan, order_id, body.operator_id, body.sku)
    return OrderSnapshot.from_order(order)


@orders_router.post("/{order_id}/pick-all", response_model=OrderSnapshot)
async def pick_all(order_id: str, body: PickAllRequest) -> OrderSnapshot:
    """Pick every pending item that has enough stock."""
    order = await _in_domain(get_orchestrator().pick_all_available, order_id, body.operator_id)
    return OrderSnapshot.from_order(order)


@orders_router.post("/{order_id}/items/{item_id}/pack", response_model=OrderSnapshot)
async def pack_item(order_id: str, item_id: str, body: PackRequest) -> OrderSnapshot:
    order = await _in_domain(
        get_orchestrator().mark_packed,
        order_id,
        item_id,
        body.operator_id,
        body.material_id,
    )
    return OrderSnapshot.from_order(order)


@orders_router.post("/{order_id}/items/{item_id}/ship", response_model=OrderSnapshot)
async def ship_item(order_id: str, item_id: str, body: ShipRequest) -> OrderSnapshot:
    order = await _in_domain(
        get_orchestrator().mark_shipped,
        order_id,
        item_id,
        body.operator_id,
        body.carrier,
        body.tracking_number,
    )
    return OrderSnapshot.from_order(order)


@orders_router.get("/{order_id}/history", response_model=list[AuditEntryResponse])
async def order_history(order_id: str, limit: int | None = Query(default=None, ge=1)) -> list[AuditEntryResponse]:
    """Audit entries for an order, newest first."""
    entries = await _in_domain(get_orchestrator().history, order_id, limit)
    return [AuditEntryResponse.from_entry(entry) for entry in entries]


@orders_router.get("/{order_id}/shortages", response_model=list[ShortageFlagResponse])
async def order_shortages(order_id: str) -> list[ShortageFlagResponse]:
    flags = await _in_domain(get_orchestrator().open_shortages, order_id)
    return [ShortageFlagResponse.from_flag(flag) for flag in flags]


@orders_router.post("/{order_id}/shortages/{flag_id}/resolve", response_model=ShortageFlagResponse)
async def resolve_shortage(order_id: str, flag_id: str, body: ResolveShortageRequest) -> ShortageFlagResponse:
    """Close a reviewed shortage flag."""
    flag = await _in_domain(get_orchestrator().resolve_shortage, order_id, flag_id, body.operator_id)
    return ShortageFlagResponse.from_flag(flag)


# ---------------------------------------------------------------------------
# Work Queues Router
# ---------------------------------------------------------------------------
queues_router = APIRouter(prefix="/queues", tags=["queues"])


@queues_router.get("/{queue_name}", response_model=list[OrderSummary])
async def work_queue(queue_name: str) -> list[OrderSummary]:
    orders = await _in_domain(get_orchestrator().queue, queue_name)
    return [OrderSummary.from_order(order) for order in orders]


# ---------------------------------------------------------------------------
# Packing Materials Router
# ---------------------------------------------------------------------------
materials_router = APIRouter(prefix="/packing-materials", tags=["packing-materials"])


@materials_router.get("", response_model=list[PackingMaterialResponse])
async def packing_materials() -> list[PackingMaterialResponse]:
    return [
        PackingMaterialResponse(
            id=material.id,
            name=material.name,
            type=material.type.value,
            size=material.size,
            available=material.available,
            protective=material.protective,
        )
        for material in list_materials()
    ]


# ---------------------------------------------------------------------------
# Stock Oracle Router
# ---------------------------------------------------------------------------
stock_oracle_router = APIRouter(prefix="/stock-oracle", tags=["stock-oracle"])


@stock_oracle_router.post("/configure", response_model=StockOracleConfigResponse)
async def configure_stock_oracle(body: ConfigureStockOracleRequest) -> StockOracleConfigResponse:
    """Configure the FakeStockOracle behavior (non-production only)."""
    if os.environ.get("PROTEAN_ENV") == "production":
        raise HTTPException(status_code=403, detail="Stock oracle configuration not available in production")

    oracle = get_stock_oracle()
    if not isinstance(oracle, FakeStockOracle):
        raise HTTPException(status_code=400, detail="Stock oracle configuration only available for FakeStockOracle")

    oracle.configure(
        should_succeed=body.should_succeed,
        failure_reason=body.failure_reason,
        latency=body.latency,
    )
    for sku, quantity in body.stock.items():
        oracle.set_stock(sku, quantity)
    return StockOracleConfigResponse(
        oracle=type(oracle).__name__,
        should_succeed=oracle.should_succeed,
        failure_reason=oracle.failure_reason,
        latency=oracle.latency,
    )
