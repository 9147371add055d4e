"""Core value types: coordinates, sizes, offsets and regions."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Coordinate:
    """A cell address. `x` is the column, `y` is the row."""

    x: int
    y: int

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError(f"Coordinate components must be non-negative, got ({self.x}, {self.y})")

    @staticmethod
    def zero() -> Coordinate:
        return Coordinate(0, 0)

    def offset(self, offset: Offset) -> Coordinate | None:
        """Return the coordinate displaced by `offset`, or None if it would be negative."""
        x = self.x + offset.x
        y = self.y + offset.y
        if x < 0 or y < 0:
            return None
        return Coordinate(x, y)


@dataclass(frozen=True)
class Size:
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Size components must be non-negative, got {self.width}x{self.height}")

    @staticmethod
    def zero() -> Size:
        return Size(0, 0)

    @property
    def area(self) -> int:
        """Number of cells; zero whenever either dimension is zero."""
        return self.width * self.height

    def is_empty(self) -> bool:
        return self.width == 0 or self.height == 0

    def contains(self, coordinate: Coordinate) -> bool:
        return coordinate.x < self.width and coordinate.y < self.height

    def fits_within(self, other: Size) -> bool:
        return self.width <= other.width and self.height <= other.height

    def transposed(self) -> Size:
        return Size(self.height, self.width)


@dataclass(frozen=True)
class Offset:
    """A signed displacement between two coordinates."""

    x: int
    y: int

    @staticmethod
    def zero() -> Offset:
        return Offset(0, 0)


@dataclass(frozen=True)
class Region:
    """A set of coordinates."""

    cells: frozenset[Coordinate]

    def __len__(self) -> int:
        return len(self.cells)

    def __iter__(self) -> Iterator[Coordinate]:
        return iter(self.cells)

    def contains(self, coordinate: Coordinate) -> bool:
        """Check if coordinate is inside the region."""
        return coordinate in self.cells

    def get_edge_cells(self) -> list[Coordinate]:
        """Return perimeter cells (cells with at least one neighbor outside the region)."""
        edge_cells = []
        for cell in self.cells:
            # Cells on the zero border always have a neighbor outside the region
            if cell.x == 0 or cell.y == 0:
                edge_cells.append(cell)
                continue
            neighbors = [
                Coordinate(cell.x + 1, cell.y),
                Coordinate(cell.x - 1, cell.y),
                Coordinate(cell.x, cell.y + 1),
                Coordinate(cell.x, cell.y - 1),
            ]
            if any(neighbor not in self.cells for neighbor in neighbors):
                edge_cells.append(cell)
        return edge_cells
