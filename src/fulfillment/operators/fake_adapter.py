"""In-memory operator directory for testing and development."""

from fulfillment.errors import NotFound
from fulfillment.operators.port import Operator, OperatorDirectoryPort

_SAMPLE_OPERATORS = [
    Operator(id="OP001", name="João Silva", role="Warehouse Operator"),
    Operator(id="OP002", name="Ana Costa", role="Warehouse Operator"),
    Operator(id="OP003", name="Carlos Lima", role="Shift Supervisor"),
]


class FakeOperatorDirectory(OperatorDirectoryPort):
    def __init__(self, operators: list[Operator] | None = None):
        self._operators = {op.id: op for op in (_SAMPLE_OPERATORS if operators is None else operators)}

    def register(self, operator: Operator) -> None:
        self._operators[operator.id] = operator

    def get(self, operator_id: str) -> Operator:
        operator = self._operators.get(operator_id)
        if operator is None:
            raise NotFound(f"Operator {operator_id} not found", operator_id=operator_id)
        return operator
