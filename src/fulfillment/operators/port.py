"""Operator directory port — identity of the people acting on orders.

Authentication and permissions live elsewhere; the engine only needs a name
to denormalize into audit entries.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Operator:
    id: str
    name: str
    role: str


class OperatorDirectoryPort(ABC):
    """Abstract interface for operator identity lookups."""

    @abstractmethod
    def get(self, operator_id: str) -> Operator:
        """Return the operator, or raise ``NotFound`` for unknown ids."""
        ...
