"""Fulfillment bounded context — Picking, Packing and Shipping of Orders.

Drives each order's line items from the warehouse shelf to carrier handoff,
verifies scanned barcodes against live stock, and keeps an append-only audit
trail of every operator action. Uses CQRS: orders are stored as current state
and every committed change is mirrored by an audit entry in the same unit of
work.
"""

import structlog
from protean.domain import Domain

from fulfillment.utils.logging import configure_logging

configure_logging()

fulfillment = Domain(name="fulfillment")

logger = structlog.get_logger(__name__)
