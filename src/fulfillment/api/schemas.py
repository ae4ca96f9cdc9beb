"""Pydantic API schemas for the fulfillment engine.

These are the external API contracts — separate from domain commands.
The API layer translates between these schemas and orchestrator calls.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------
class OrderItemRequest(BaseModel):
    id: str | None = None
    sku: str
    product_name: str | None = None
    requested_quantity: int = Field(ge=1)
    unit_price: float = 0.0
    is_fragile: bool = False


class ReceiveOrderRequest(BaseModel):
    order_id: str
    customer_ref: str
    customer_name: str | None = None
    customer_email: str | None = None
    shipping_address: str
    supplier_ref: str | None = None
    special_instructions: str | None = None
    total_amount: float | None = None
    items: list[OrderItemRequest]


class ScanRequest(BaseModel):
    operator_id: str
    sku: str

    @field_validator("sku")
    @classmethod
    def strip_sku(cls, value: str) -> str:
        return value.strip()


class PickAllRequest(BaseModel):
    operator_id: str


class ResolveShortageRequest(BaseModel):
    operator_id: str


class PackRequest(BaseModel):
    operator_id: str
    material_id: str


class ShipRequest(BaseModel):
    operator_id: str
    carrier: str
    tracking_number: str

    @field_validator("carrier", "tracking_number")
    @classmethod
    def strip_text(cls, value: str) -> str:
        return value.strip()


class ConfigureStockOracleRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Stock oracle unavailable"
    latency: float = Field(default=0.0, ge=0.0)
    stock: dict[str, int] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: str


class OrderItemResponse(BaseModel):
    id: str
    sku: str
    product_name: str | None = None
    requested_quantity: int
    unit_price: float | None = None
    is_fragile: bool = False
    status: str
    picked_quantity: int | None = None
    packed_quantity: int | None = None
    shipped_quantity: int | None = None
    packing_material: str | None = None
    carrier: str | None = None
    tracking_number: str | None = None


class OrderSnapshot(BaseModel):
    id: str
    customer_ref: str
    customer_name: str | None = None
    customer_email: str | None = None
    shipping_address: str
    supplier_ref: str | None = None
    special_instructions: str | None = None
    total_amount: float | None = None
    status: str
    ready_to_ship: bool
    revision: int
    carrier: str | None = None
    tracking_number: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    items: list[OrderItemResponse]

    @classmethod
    def from_order(cls, order) -> "OrderSnapshot":
        return cls(
            id=str(order.id),
            customer_ref=order.customer_ref,
            customer_name=order.customer_name,
            customer_email=order.customer_email,
            shipping_address=order.shipping_address,
            supplier_ref=order.supplier_ref,
            special_instructions=order.special_instructions,
            total_amount=order.total_amount,
            status=order.status,
            ready_to_ship=order.is_ready_to_ship(),
            revision=order.revision,
            carrier=order.carrier,
            tracking_number=order.tracking_number,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=[
                OrderItemResponse(
                    id=str(item.id),
                    sku=item.sku,
                    product_name=item.product_name,
                    requested_quantity=item.requested_quantity,
                    unit_price=item.unit_price,
                    is_fragile=bool(item.is_fragile),
                    status=item.status,
                    picked_quantity=item.picked_quantity,
                    packed_quantity=item.packed_quantity,
                    shipped_quantity=item.shipped_quantity,
                    packing_material=item.packing_material,
                    carrier=item.carrier,
                    tracking_number=item.tracking_number,
                )
                for item in order.items
            ],
        )


class OrderSummary(BaseModel):
    id: str
    customer_ref: str
    customer_name: str | None = None
    status: str
    item_count: int
    pending_items: int
    ready_to_ship: bool
    created_at: datetime | None = None

    @classmethod
    def from_order(cls, order) -> "OrderSummary":
        return cls(
            id=str(order.id),
            customer_ref=order.customer_ref,
            customer_name=order.customer_name,
            status=order.status,
            item_count=len(order.items),
            pending_items=sum(1 for item in order.items if item.status == "Pending"),
            ready_to_ship=order.is_ready_to_ship(),
            created_at=order.created_at,
        )


class AuditEntryResponse(BaseModel):
    sequence: int
    order_id: str
    item_id: str | None = None
    action: str
    operator_id: str
    operator_name: str | None = None
    recorded_at: datetime

    @classmethod
    def from_entry(cls, entry) -> "AuditEntryResponse":
        return cls(
            sequence=entry.sequence,
            order_id=str(entry.order_id),
            item_id=str(entry.item_id) if entry.item_id else None,
            action=entry.action,
            operator_id=str(entry.operator_id),
            operator_name=entry.operator_name,
            recorded_at=entry.recorded_at,
        )


class ShortageFlagResponse(BaseModel):
    id: str
    order_id: str
    item_id: str
    sku: str
    requested_quantity: int
    on_hand: int
    operator_id: str
    status: str
    flagged_at: datetime
    resolved_by: str | None = None
    resolved_at: datetime | None = None

    @classmethod
    def from_flag(cls, flag) -> "ShortageFlagResponse":
        return cls(
            id=str(flag.id),
            order_id=str(flag.order_id),
            item_id=str(flag.item_id),
            sku=flag.sku,
            requested_quantity=flag.requested_quantity,
            on_hand=flag.on_hand,
            operator_id=str(flag.operator_id),
            status=flag.status,
            flagged_at=flag.flagged_at,
            resolved_by=str(flag.resolved_by) if flag.resolved_by else None,
            resolved_at=flag.resolved_at,
        )


class PackingMaterialResponse(BaseModel):
    id: str
    name: str
    type: str
    size: str | None = None
    available: bool
    protective: bool


class StockOracleConfigResponse(BaseModel):
    oracle: str
    should_succeed: bool
    failure_reason: str
    latency: float
