"""Lazy iterators over grid cells, rows and columns."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

from core import Coordinate, Size
from errors import StaleView

if TYPE_CHECKING:
    from grid import Grid
    from views import ColumnView, RowView


T = TypeVar("T")


class GridIterator(ABC, Generic[T]):
    """An iterator that knows the coordinate of the next value it will yield."""

    def __init__(self, grid: Grid[T], generation: int, length: int) -> None:
        self._grid = grid
        self._generation = generation
        self._length = length
        self._position = 0

    @property
    @abstractmethod
    def coordinate(self) -> Coordinate:
        """Coordinate of the next value."""
        ...

    def __iter__(self) -> GridIterator[T]:
        return self

    def __next__(self) -> T:
        if self._grid.generation != self._generation:
            raise StaleView("grid was structurally changed during iteration")
        if self._position >= self._length:
            raise StopIteration
        value = self._grid.get(self.coordinate)
        self._position += 1
        return value

    def __length_hint__(self) -> int:
        return max(self._length - self._position, 0)

    def enumerate_coordinate(self) -> EnumerateCoordinate[T]:
        """Pair every remaining value with its coordinate."""
        return EnumerateCoordinate(self)


class CellIterator(GridIterator[T]):
    """Row-major iteration over a rectangle of the grid (the whole grid by default)."""

    def __init__(
        self,
        grid: Grid[T],
        origin: Coordinate | None = None,
        size: Size | None = None,
    ) -> None:
        self._origin = origin if origin is not None else Coordinate.zero()
        self._size = size if size is not None else grid.size
        super().__init__(grid, grid.generation, self._size.area)

    @property
    def coordinate(self) -> Coordinate:
        if self._size.width == 0:
            return self._origin
        row, column = divmod(self._position, self._size.width)
        return Coordinate(self._origin.x + column, self._origin.y + row)


class RowIterator(GridIterator[T]):
    def __init__(self, row: RowView[T]) -> None:
        self._row_index = row.index
        super().__init__(row.grid, row.generation, len(row))

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self._position, self._row_index)


class ColumnIterator(GridIterator[T]):
    def __init__(self, column: ColumnView[T]) -> None:
        self._column_index = column.index
        super().__init__(column.grid, column.generation, len(column))

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self._column_index, self._position)


class EnumerateCoordinate(Generic[T]):
    """Yields `(coordinate, value)` pairs in the order of the wrapped iterator."""

    def __init__(self, iterator: GridIterator[T]) -> None:
        self._iterator = iterator

    def __iter__(self) -> EnumerateCoordinate[T]:
        return self

    def __next__(self) -> tuple[Coordinate, T]:
        coordinate = self._iterator.coordinate
        value = next(self._iterator)
        return coordinate, value
