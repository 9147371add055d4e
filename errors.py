"""Errors raised by grid operations.

Each error also derives from the closest builtin exception, so callers that
catch `IndexError` or `ValueError` keep working.
"""


class GridError(Exception):
    """Base class for all grid errors."""


class OutOfBounds(GridError, IndexError):
    """A coordinate or row/column index lies outside the grid's logical size."""


class LengthMismatch(GridError, ValueError):
    """A row or column has the wrong number of elements."""


class CapacityOverflow(GridError, OverflowError):
    """A requested size or capacity exceeds the representable element count."""


class StaleView(GridError, RuntimeError):
    """A view or iterator was used after its grid was structurally mutated."""
