"""Dynamic two-dimensional grid backed by a single flat buffer.

Cells are stored row-major in one numpy array, packed with a stride equal to
the current logical width: cell (x, y) lives at `y * width + x`. The buffer is
provisioned for `capacity.width * capacity.height` cells, which may be more
than the logical size, so most growth happens without reallocating. Changing
the width moves every row to its new start offset.

Structural mutations (resize, row/column insertion and removal, rotation,
clear) bump the grid's generation, which invalidates outstanding views and
iterators.
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Generic, Iterable, Sequence, TypeVar, Union
import numpy as np

from algorithms import Connectivity, connected_region, flood_fill, neighbors
from config import DEFAULT_GROWTH_POLICY, GrowthPolicy, max_elements
from core import Coordinate, Region, Size
from errors import CapacityOverflow, LengthMismatch, OutOfBounds
from iterators import CellIterator
from views import ColumnView, RowView


logger = logging.getLogger(__name__)

T = TypeVar("T")

CoordinateLike = Union[Coordinate, tuple[int, int]]


def _to_buffer(values: Sequence[Any], dtype: np.dtype) -> np.ndarray:
    """Copy `values` into a new 1-D array.

    Elements are assigned one at a time so that sequence-valued elements
    (tuples, lists) are stored as objects rather than broadcast by numpy.
    """
    out = np.empty(len(values), dtype=dtype)
    for i, value in enumerate(values):
        out[i] = value
    return out


def _check_area(size: Size, dtype: np.dtype) -> None:
    limit = max_elements(dtype.itemsize)
    if size.area > limit:
        raise CapacityOverflow(
            f"{size.width}x{size.height} exceeds {limit} elements of {dtype}"
        )


class Grid(Generic[T]):
    """A dynamic two-dimensional array addressed by `Coordinate`.

    The top-left cell is (0, 0); x grows to the right and y grows downwards.
    """

    def __init__(
        self,
        *,
        dtype: Any = object,
        growth: GrowthPolicy = DEFAULT_GROWTH_POLICY,
    ) -> None:
        self._dtype = np.dtype(dtype)
        self._growth = growth
        self._size = Size.zero()
        self._capacity = Size.zero()
        self._buffer = np.empty(0, dtype=self._dtype)
        self._generation = 0

    # ===== Construction =====

    @classmethod
    def with_capacity(
        cls,
        capacity: Size,
        *,
        dtype: Any = object,
        growth: GrowthPolicy = DEFAULT_GROWTH_POLICY,
    ) -> Grid[T]:
        """Create an empty grid with room for `capacity` cells."""
        grid: Grid[T] = cls(dtype=dtype, growth=growth)
        _check_area(capacity, grid._dtype)
        grid._buffer = np.empty(capacity.area, dtype=grid._dtype)
        grid._capacity = capacity
        return grid

    @classmethod
    def with_size(
        cls,
        size: Size,
        fill: T,
        *,
        dtype: Any = object,
        growth: GrowthPolicy = DEFAULT_GROWTH_POLICY,
    ) -> Grid[T]:
        """Create a grid of `size` with every cell set to `fill`."""
        grid: Grid[T] = cls.with_capacity(size, dtype=dtype, growth=growth)
        grid._buffer[: size.area].fill(fill)
        grid._size = size
        return grid

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[Iterable[T]],
        *,
        dtype: Any = object,
        growth: GrowthPolicy = DEFAULT_GROWTH_POLICY,
    ) -> Grid[T]:
        materialized = [list(row) for row in rows]
        width = len(materialized[0]) if materialized else 0
        for index, row in enumerate(materialized):
            if len(row) != width:
                raise LengthMismatch(f"row {index} has {len(row)} elements, expected {width}")

        size = Size(width, len(materialized)) if width else Size.zero()
        grid: Grid[T] = cls.with_capacity(size, dtype=dtype, growth=growth)
        grid._buffer[: size.area] = _to_buffer(
            [value for row in materialized for value in row], grid._dtype
        )
        grid._size = size
        return grid

    @classmethod
    def from_columns(
        cls,
        columns: Iterable[Iterable[T]],
        *,
        dtype: Any = object,
        growth: GrowthPolicy = DEFAULT_GROWTH_POLICY,
    ) -> Grid[T]:
        materialized = [list(column) for column in columns]
        height = len(materialized[0]) if materialized else 0
        for index, column in enumerate(materialized):
            if len(column) != height:
                raise LengthMismatch(f"column {index} has {len(column)} elements, expected {height}")

        rows = [[column[y] for column in materialized] for y in range(height)]
        return cls.from_rows(rows, dtype=dtype, growth=growth)

    @classmethod
    def from_numpy(
        cls,
        array: np.ndarray,
        *,
        dtype: Any = None,
        growth: GrowthPolicy = DEFAULT_GROWTH_POLICY,
    ) -> Grid[Any]:
        """Create a grid from a 2-D array of shape (height, width)."""
        array = np.asarray(array)
        if array.ndim != 2:
            raise ValueError(f"Grid arrays must be 2-D, got {array.ndim}D shape={array.shape}")

        height, width = array.shape
        size = Size(width, height)
        grid: Grid[Any] = cls.with_capacity(
            size, dtype=array.dtype if dtype is None else dtype, growth=growth
        )
        grid._buffer[: size.area] = array.reshape(-1)
        grid._size = size
        return grid

    # ===== Queries =====

    @property
    def size(self) -> Size:
        return self._size

    @property
    def capacity(self) -> Size:
        return self._capacity

    @property
    def generation(self) -> int:
        """Counter bumped by every structural mutation."""
        return self._generation

    @property
    def dtype(self) -> np.dtype:
        return self._dtype

    @property
    def growth(self) -> GrowthPolicy:
        return self._growth

    def __len__(self) -> int:
        return self._size.area

    def __iter__(self) -> CellIterator[T]:
        return CellIterator(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        if self._size.is_empty() and other._size.is_empty():
            # Every zero-area grid is the same empty grid, whatever its leftover extent
            return True
        return self._size == other._size and self.values() == other.values()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"Grid(size={self._size.width}x{self._size.height}, "
            f"capacity={self._capacity.width}x{self._capacity.height}, dtype={self._dtype})"
        )

    def _coordinate(self, coordinate: CoordinateLike) -> Coordinate:
        if isinstance(coordinate, Coordinate):
            return coordinate
        x, y = coordinate
        if x < 0 or y < 0:
            raise OutOfBounds(f"({x}, {y}) is outside {self._size.width}x{self._size.height} grid")
        return Coordinate(x, y)

    def _locate(self, coordinate: CoordinateLike) -> int:
        """Return the buffer index of an in-bounds coordinate."""
        c = self._coordinate(coordinate)
        if not self._size.contains(c):
            raise OutOfBounds(f"({c.x}, {c.y}) is outside {self._size.width}x{self._size.height} grid")
        return c.y * self._size.width + c.x

    def get(self, coordinate: CoordinateLike) -> T:
        return self._buffer[self._locate(coordinate)]

    def set(self, coordinate: CoordinateLike, value: T) -> None:
        self._buffer[self._locate(coordinate)] = value

    __getitem__ = get
    __setitem__ = set

    def swap(self, a: CoordinateLike, b: CoordinateLike) -> None:
        """Exchange the values of two cells."""
        i, j = self._locate(a), self._locate(b)
        self._buffer[i], self._buffer[j] = self._buffer[j], self._buffer[i]

    def fill(self, value: T) -> None:
        """Overwrite every cell with `value`."""
        self._buffer[: self._size.area].fill(value)

    def values(self) -> list[T]:
        """All values in row-major order."""
        return self._buffer[: self._size.area].tolist()

    def to_rows(self) -> list[list[T]]:
        width = self._size.width
        return [
            self._buffer[y * width : (y + 1) * width].tolist()
            for y in range(self._size.height)
        ]

    def to_columns(self) -> list[list[T]]:
        width, area = self._size.width, self._size.area
        return [self._buffer[x:area:width].tolist() for x in range(width)]

    def to_numpy(self) -> np.ndarray:
        """Copy the logical cells into an array of shape (height, width)."""
        return self._cells().copy()

    def copy(self) -> Grid[T]:
        grid: Grid[T] = Grid.with_capacity(self._capacity, dtype=self._dtype, growth=self._growth)
        area = self._size.area
        grid._buffer[:area] = self._buffer[:area]
        grid._size = self._size
        return grid

    def _cells(self) -> np.ndarray:
        """A (height, width) view of the logical cells."""
        return self._buffer[: self._size.area].reshape(self._size.height, self._size.width)

    def row_buffer(self, y: int) -> np.ndarray:
        """A live numpy view over row `y` of the buffer; writes go straight into the grid.

        Row views read and write through this. It is only valid until the next
        structural change, and `y` is not bounds-checked.
        """
        width = self._size.width
        return self._buffer[y * width : (y + 1) * width]

    def column_buffer(self, x: int) -> np.ndarray:
        """A live strided view over column `x` of the buffer, the column counterpart of `row_buffer`."""
        return self._buffer[x : self._size.area : self._size.width]

    # ===== Views and iteration =====

    def row(self, index: int) -> RowView[T]:
        if not 0 <= index < self._size.height:
            raise OutOfBounds(f"row {index} is outside grid of height {self._size.height}")
        return RowView(self, index)

    def column(self, index: int) -> ColumnView[T]:
        if not 0 <= index < self._size.width:
            raise OutOfBounds(f"column {index} is outside grid of width {self._size.width}")
        return ColumnView(self, index)

    def rows(self) -> list[RowView[T]]:
        return [self.row(y) for y in range(self._size.height)]

    def columns(self) -> list[ColumnView[T]]:
        return [self.column(x) for x in range(self._size.width)]

    def iter_region(self, origin: CoordinateLike, size: Size) -> CellIterator[T]:
        """Iterate row-major over the rectangle of `size` whose top-left is `origin`."""
        origin = self._coordinate(origin)
        if origin.x + size.width > self._size.width or origin.y + size.height > self._size.height:
            raise OutOfBounds(
                f"{size.width}x{size.height} region at ({origin.x}, {origin.y}) "
                f"leaves {self._size.width}x{self._size.height} grid"
            )
        return CellIterator(self, origin, size)

    # ===== Capacity management =====

    def _reallocate(self, capacity: Size) -> None:
        """Move the logical cells into a fresh buffer provisioned for `capacity`."""
        _check_area(capacity, self._dtype)
        buffer = np.empty(capacity.area, dtype=self._dtype)
        area = self._size.area
        buffer[:area] = self._buffer[:area]
        logger.debug(
            f"Reallocated grid buffer from {self._capacity.width}x{self._capacity.height} "
            f"to {capacity.width}x{capacity.height}"
        )
        self._buffer = buffer
        self._capacity = capacity

    def _grown_capacity(self, required: Size) -> Size:
        """Capacity to allocate so that `required` fits, following the growth policy."""
        grown = Size(
            self._growth.grow(self._capacity.width, required.width),
            self._growth.grow(self._capacity.height, required.height),
        )
        if grown.area > max_elements(self._dtype.itemsize):
            # Geometric growth overshot; settle for exactly what is needed
            grown = Size(
                max(self._capacity.width, required.width),
                max(self._capacity.height, required.height),
            )
        _check_area(grown, self._dtype)
        return grown

    def _ensure_capacity(self, required: Size) -> None:
        if not required.fits_within(self._capacity):
            self._reallocate(self._grown_capacity(required))

    def _release(self, start: int, stop: int) -> None:
        """Drop references held by cells that are no longer part of the grid."""
        if self._dtype == object and stop > start:
            self._buffer[start:stop] = None

    def reserve(self, additional: Size) -> None:
        """Make room for at least `additional` more columns and rows without reallocating."""
        required = Size(self._size.width + additional.width, self._size.height + additional.height)
        if required.fits_within(self._capacity):
            return
        self._reallocate(
            Size(
                max(self._capacity.width, required.width),
                max(self._capacity.height, required.height),
            )
        )

    def shrink_to_fit(self) -> None:
        """Release unused capacity so that capacity equals size."""
        if self._capacity != self._size:
            self._reallocate(self._size)

    # ===== Structural mutation =====

    def _relocate_rows(self, old_width: int, new_width: int, rows: int) -> None:
        """Move the first `rows` rows from stride `old_width` to stride `new_width` in place.

        Only min(old_width, new_width) leading cells of each row are carried over.
        """
        kept = min(old_width, new_width)
        if new_width > old_width:
            # Rows move towards the end; start from the last so none is overwritten early
            for y in reversed(range(rows)):
                self._buffer[y * new_width : y * new_width + kept] = (
                    self._buffer[y * old_width : y * old_width + kept]
                )
        elif new_width < old_width:
            for y in range(rows):
                self._buffer[y * new_width : y * new_width + kept] = (
                    self._buffer[y * old_width : y * old_width + kept]
                )

    def resize(self, size: Size, fill: T) -> None:
        """Change the logical size, keeping the overlapping cells and filling the rest.

        Capacity is kept when the grid shrinks.
        """
        _check_area(size, self._dtype)
        _to_buffer([fill], self._dtype)  # reject fill values the dtype cannot hold before moving anything
        old = self._size
        kept = Size(min(old.width, size.width), min(old.height, size.height))

        if size.fits_within(self._capacity):
            self._relocate_rows(old.width, size.width, kept.height)
            self._release(size.area, old.area)
        else:
            capacity = self._grown_capacity(size)
            buffer = np.empty(capacity.area, dtype=self._dtype)
            source = self._cells()
            target = buffer[: size.area].reshape(size.height, size.width)
            target[: kept.height, : kept.width] = source[: kept.height, : kept.width]
            logger.debug(
                f"Reallocated grid buffer from {self._capacity.width}x{self._capacity.height} "
                f"to {capacity.width}x{capacity.height} while resizing to {size.width}x{size.height}"
            )
            self._buffer = buffer
            self._capacity = capacity

        self._size = size
        cells = self._cells()
        cells[: kept.height, kept.width :].fill(fill)
        cells[kept.height :, :].fill(fill)
        self._generation += 1

    def insert_row(self, index: int, row: Iterable[T]) -> None:
        """Insert `row` before row `index`, shifting the following rows down.

        A grid without rows accepts a first row of any length, which sets its width.
        """
        values = list(row)
        width, height = self._size.width, self._size.height
        if not 0 <= index <= height:
            raise OutOfBounds(f"cannot insert row at {index} in grid of height {height}")
        if height == 0:
            width = len(values)
        if len(values) != width:
            raise LengthMismatch(f"row has {len(values)} elements, grid width is {width}")

        new_row = _to_buffer(values, self._dtype)
        self._ensure_capacity(Size(width, height + 1))

        start, end = index * width, height * width
        self._buffer[start + width : end + width] = self._buffer[start:end]
        self._buffer[start : start + width] = new_row
        self._size = Size(width, height + 1)
        self._generation += 1

    def insert_column(self, index: int, column: Iterable[T]) -> None:
        """Insert `column` before column `index`, shifting the following columns right.

        A grid without columns accepts a first column of any length, which sets its height.
        """
        values = list(column)
        width, height = self._size.width, self._size.height
        if not 0 <= index <= width:
            raise OutOfBounds(f"cannot insert column at {index} in grid of width {width}")
        if width == 0:
            height = len(values)
        if len(values) != height:
            raise LengthMismatch(f"column has {len(values)} elements, grid height is {height}")

        new_column = _to_buffer(values, self._dtype)
        self._ensure_capacity(Size(width + 1, height))

        new_width = width + 1
        for y in reversed(range(height)):
            source, target = y * width, y * new_width
            self._buffer[target + index + 1 : target + new_width] = (
                self._buffer[source + index : source + width]
            )
            self._buffer[target : target + index] = self._buffer[source : source + index]
            self._buffer[target + index] = new_column[y]
        self._size = Size(new_width, height)
        self._generation += 1

    def push_row(self, row: Iterable[T]) -> None:
        self.insert_row(self._size.height, row)

    def push_column(self, column: Iterable[T]) -> None:
        self.insert_column(self._size.width, column)

    def remove_row(self, index: int) -> list[T]:
        """Remove row `index` and return its values. Capacity is kept."""
        width, height = self._size.width, self._size.height
        if not 0 <= index < height:
            raise OutOfBounds(f"row {index} is outside grid of height {height}")

        start, end = index * width, height * width
        removed = self._buffer[start : start + width].tolist()
        self._buffer[start : end - width] = self._buffer[start + width : end]
        self._release(end - width, end)
        self._size = Size(width, height - 1)
        self._generation += 1
        return removed

    def remove_column(self, index: int) -> list[T]:
        """Remove column `index` and return its values. Capacity is kept."""
        width, height = self._size.width, self._size.height
        if not 0 <= index < width:
            raise OutOfBounds(f"column {index} is outside grid of width {width}")

        removed = self.column_buffer(index).tolist()
        new_width = width - 1
        for y in range(height):
            source, target = y * width, y * new_width
            self._buffer[target : target + index] = self._buffer[source : source + index]
            self._buffer[target + index : target + new_width] = (
                self._buffer[source + index + 1 : source + width]
            )
        self._release(new_width * height, width * height)
        self._size = Size(new_width, height)
        self._generation += 1
        return removed

    def clear(self) -> None:
        """Remove every cell. Capacity is kept."""
        self._release(0, self._size.area)
        self._size = Size.zero()
        self._generation += 1

    def swap_rows(self, a: int, b: int) -> None:
        for index in (a, b):
            if not 0 <= index < self._size.height:
                raise OutOfBounds(f"row {index} is outside grid of height {self._size.height}")
        row_a = self.row_buffer(a)
        row_b = self.row_buffer(b)
        row_a[:], row_b[:] = row_b.copy(), row_a.copy()

    def swap_columns(self, a: int, b: int) -> None:
        for index in (a, b):
            if not 0 <= index < self._size.width:
                raise OutOfBounds(f"column {index} is outside grid of width {self._size.width}")
        column_a = self.column_buffer(a)
        column_b = self.column_buffer(b)
        column_a[:], column_b[:] = column_b.copy(), column_a.copy()

    def flip_horizontally(self) -> None:
        """Mirror the grid left to right."""
        cells = self._cells()
        cells[:] = cells[:, ::-1].copy()

    def flip_vertically(self) -> None:
        """Mirror the grid top to bottom."""
        cells = self._cells()
        cells[:] = cells[::-1, :].copy()

    def _rotate(self, k: int) -> None:
        rotated = np.rot90(self._cells(), k).copy()
        # Same cell count, so the transposed capacity still holds it
        self._size = self._size.transposed()
        self._capacity = self._capacity.transposed()
        self._buffer[: self._size.area] = rotated.reshape(-1)
        self._generation += 1

    def rotate_left(self) -> None:
        """Rotate a quarter turn counter-clockwise; the top-right cell becomes the top-left."""
        self._rotate(1)

    def rotate_right(self) -> None:
        """Rotate a quarter turn clockwise; the bottom-left cell becomes the top-left."""
        self._rotate(-1)

    # ===== Algorithms =====

    def neighbors(
        self,
        coordinate: CoordinateLike,
        connectivity: Connectivity = Connectivity.FOUR,
    ) -> list[Coordinate]:
        return neighbors(self, self._coordinate(coordinate), connectivity)

    def connected_region(
        self,
        start: CoordinateLike,
        predicate: Callable[[T], bool] | None = None,
        connectivity: Connectivity = Connectivity.FOUR,
    ) -> Region:
        return connected_region(self, self._coordinate(start), predicate, connectivity)

    def flood_fill(
        self,
        start: CoordinateLike,
        predicate: Callable[[T], bool] | None,
        replacement: T,
        connectivity: Connectivity = Connectivity.FOUR,
    ) -> Region:
        """Replace every cell connected to `start` through cells matching `predicate`.

        With no predicate, cells equal to the start cell's value match.
        """
        return flood_fill(self, self._coordinate(start), predicate, replacement, connectivity)
