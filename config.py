"""Capacity growth configuration."""

from __future__ import annotations
from dataclasses import dataclass
import math
import sys


# Upper bound on the size in bytes of a grid buffer; numpy cannot index past it.
MAX_BUFFER_BYTES = sys.maxsize


def max_elements(itemsize: int) -> int:
    """Largest number of cells a buffer of `itemsize`-byte elements may hold."""
    return MAX_BUFFER_BYTES // max(itemsize, 1)


@dataclass(frozen=True)
class GrowthPolicy:
    """How a grid's capacity grows when a dimension runs out of room.

    A dimension that must grow gets `max(required, ceil(current * factor), minimum)`
    cells. A factor of 1 or less disables geometric growth, so capacity grows
    to exactly what is required.
    """

    factor: float = 2.0
    minimum: int = 4

    def grow(self, current: int, required: int) -> int:
        """Return the new capacity of one dimension."""
        if required <= current:
            return current
        if self.factor <= 1:
            return required
        return max(required, math.ceil(current * self.factor), self.minimum)


DEFAULT_GROWTH_POLICY = GrowthPolicy()
EXACT_GROWTH_POLICY = GrowthPolicy(factor=1.0, minimum=0)
