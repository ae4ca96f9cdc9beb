"""Tests for the error taxonomy's wire shape."""

import pytest
from fulfillment import errors
from fulfillment.errors import FulfillmentError, NotFound, StockShortage


class TestToDict:
    def test_carries_code_message_and_details(self):
        exc = StockShortage("Only 0 of UC-003 on hand", sku="UC-003", on_hand=0)
        assert exc.to_dict() == {
            "code": "STOCK_SHORTAGE",
            "message": "Only 0 of UC-003 on hand",
            "details": {"sku": "UC-003", "on_hand": 0},
        }

    def test_omits_empty_details(self):
        assert NotFound("Order O404 not found").to_dict() == {
            "code": "NOT_FOUND",
            "message": "Order O404 not found",
        }


@pytest.mark.parametrize(
    "name,code,status",
    [
        ("NotFound", "NOT_FOUND", 404),
        ("IllegalTransition", "ILLEGAL_TRANSITION", 409),
        ("WrongProduct", "WRONG_PRODUCT", 422),
        ("StockShortage", "STOCK_SHORTAGE", 409),
        ("QuantityExceeded", "QUANTITY_EXCEEDED", 422),
        ("PartialQuantity", "PARTIAL_QUANTITY", 422),
        ("OracleUnavailable", "ORACLE_UNAVAILABLE", 503),
        ("OrderBusy", "ORDER_BUSY", 409),
        ("OperationCancelled", "OPERATION_CANCELLED", 409),
        ("MaterialUnavailable", "MATERIAL_UNAVAILABLE", 409),
        ("UnsuitableMaterial", "UNSUITABLE_MATERIAL", 422),
        ("NothingToPick", "NOTHING_TO_PICK", 409),
        ("DuplicateOrder", "DUPLICATE_ORDER", 409),
        ("InvalidOrder", "INVALID_ORDER", 422),
        ("AuditSequenceError", "AUDIT_SEQUENCE", 500),
    ],
)
def test_stable_codes_and_statuses(name, code, status):
    error_cls = getattr(errors, name)
    assert issubclass(error_cls, FulfillmentError)
    assert (error_cls.code, error_cls.status_code) == (code, status)
