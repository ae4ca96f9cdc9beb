"""Fulfillment error taxonomy.

Every failure surfaced to callers carries a stable ``code`` and the HTTP
status the API answers with. Handlers and services raise these; nothing in
the engine catches and discards them.
"""


class FulfillmentError(Exception):
    """Base class for all fulfillment failures."""

    code: str = "FULFILLMENT_ERROR"
    status_code: int = 500

    def __init__(self, message: str, **details) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class NotFound(FulfillmentError):
    code = "NOT_FOUND"
    status_code = 404


class IllegalTransition(FulfillmentError):
    code = "ILLEGAL_TRANSITION"
    status_code = 409


class WrongProduct(FulfillmentError):
    code = "WRONG_PRODUCT"
    status_code = 422


class StockShortage(FulfillmentError):
    code = "STOCK_SHORTAGE"
    status_code = 409


class QuantityExceeded(FulfillmentError):
    code = "QUANTITY_EXCEEDED"
    status_code = 422


class PartialQuantity(FulfillmentError):
    code = "PARTIAL_QUANTITY"
    status_code = 422


class OracleUnavailable(FulfillmentError):
    code = "ORACLE_UNAVAILABLE"
    status_code = 503


class OrderBusy(FulfillmentError):
    code = "ORDER_BUSY"
    status_code = 409


class OperationCancelled(FulfillmentError):
    code = "OPERATION_CANCELLED"
    status_code = 409


class MaterialUnavailable(FulfillmentError):
    code = "MATERIAL_UNAVAILABLE"
    status_code = 409


class UnsuitableMaterial(FulfillmentError):
    code = "UNSUITABLE_MATERIAL"
    status_code = 422


class NothingToPick(FulfillmentError):
    code = "NOTHING_TO_PICK"
    status_code = 409


class DuplicateOrder(FulfillmentError):
    code = "DUPLICATE_ORDER"
    status_code = 409


class InvalidOrder(FulfillmentError):
    code = "INVALID_ORDER"
    status_code = 422


class AuditSequenceError(FulfillmentError):
    code = "AUDIT_SEQUENCE"
    status_code = 500
