"""Row and column views: non-owning windows into one line of a grid."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, Iterator, TypeVar
import numpy as np

from core import Coordinate
from errors import OutOfBounds, StaleView
from iterators import ColumnIterator, RowIterator

if TYPE_CHECKING:
    from grid import Grid


T = TypeVar("T")


class LineView(ABC, Generic[T]):
    """Base class for a view over one row or one column.

    A view remembers the grid generation it was created at and refuses to be
    used once the grid has been structurally mutated.
    """

    def __init__(self, grid: Grid[T], index: int) -> None:
        self._grid = grid
        self._index = index
        self._generation = grid.generation

    @property
    def grid(self) -> Grid[T]:
        return self._grid

    @property
    def index(self) -> int:
        return self._index

    @property
    def generation(self) -> int:
        return self._generation

    @property
    @abstractmethod
    def kind(self) -> str:
        """Name of the line type, for messages."""
        ...

    @abstractmethod
    def _length(self) -> int: ...

    @abstractmethod
    def _line(self) -> np.ndarray:
        """A numpy view over the cells of this line inside the grid's buffer."""
        ...

    @abstractmethod
    def coordinate(self, position: int) -> Coordinate:
        """Grid coordinate of the cell at `position` along this line."""
        ...

    def _check(self) -> None:
        if self._grid.generation != self._generation:
            raise StaleView(
                f"{self.kind} {self._index} was invalidated by a structural change to its grid"
            )

    def _position(self, position: int) -> int:
        length = self._length()
        if not 0 <= position < length:
            raise OutOfBounds(f"index {position} is outside {self.kind} of length {length}")
        return position

    def __len__(self) -> int:
        self._check()
        return self._length()

    def __getitem__(self, position: int) -> T:
        self._check()
        return self._line()[self._position(position)]

    def __setitem__(self, position: int, value: T) -> None:
        self._check()
        self._line()[self._position(position)] = value

    @abstractmethod
    def __iter__(self) -> Iterator[T]: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(index={self._index})"

    def values(self) -> list[T]:
        self._check()
        return self._line().tolist()

    def first(self) -> T:
        return self[0]

    def last(self) -> T:
        self._check()
        return self[self._length() - 1]

    def to_numpy(self) -> np.ndarray:
        self._check()
        return self._line().copy()

    def reverse(self) -> None:
        self._check()
        line = self._line()
        line[:] = line[::-1].copy()

    def rotate(self, count: int) -> None:
        """Rotate values towards the start of the line; negative counts rotate towards the end."""
        self._check()
        line = self._line()
        if len(line):
            line[:] = np.roll(line, -count)

    def swap(self, a: int, b: int) -> None:
        self._check()
        line = self._line()
        i, j = self._position(a), self._position(b)
        line[i], line[j] = line[j], line[i]


class RowView(LineView[T]):
    """One row of a grid. Its cells are contiguous in the grid's buffer."""

    @property
    def kind(self) -> str:
        return "row"

    def _length(self) -> int:
        return self._grid.size.width

    def _line(self) -> np.ndarray:
        return self._grid.row_buffer(self._index)

    def coordinate(self, position: int) -> Coordinate:
        return Coordinate(position, self._index)

    def __iter__(self) -> RowIterator[T]:
        self._check()
        return RowIterator(self)

    def above(self) -> RowView[T] | None:
        self._check()
        if self._index == 0:
            return None
        return self._grid.row(self._index - 1)

    def below(self) -> RowView[T] | None:
        self._check()
        if self._index == self._grid.size.height - 1:
            return None
        return self._grid.row(self._index + 1)


class ColumnView(LineView[T]):
    """One column of a grid. Its cells are strided by the grid width."""

    @property
    def kind(self) -> str:
        return "column"

    def _length(self) -> int:
        return self._grid.size.height

    def _line(self) -> np.ndarray:
        return self._grid.column_buffer(self._index)

    def coordinate(self, position: int) -> Coordinate:
        return Coordinate(self._index, position)

    def __iter__(self) -> ColumnIterator[T]:
        self._check()
        return ColumnIterator(self)

    def left(self) -> ColumnView[T] | None:
        self._check()
        if self._index == 0:
            return None
        return self._grid.column(self._index - 1)

    def right(self) -> ColumnView[T] | None:
        self._check()
        if self._index == self._grid.size.width - 1:
            return None
        return self._grid.column(self._index + 1)
