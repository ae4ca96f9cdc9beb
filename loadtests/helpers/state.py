"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
State tracks the order handed over at intake so follow-up scans, packs and
shipments can reference it.
"""

from dataclasses import dataclass, field


@dataclass
class OrderState:
    """Tracks state for a single simulated order moving through the warehouse."""

    order_id: str | None = None
    item_ids: list[str] = field(default_factory=list)
    skus: list[str] = field(default_factory=list)
    fragile_item_ids: set[str] = field(default_factory=set)
    current_status: str = "Pending"
    tracking_number: str | None = None
