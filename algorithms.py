"""Traversal algorithms: neighbor enumeration and flood fill."""

from __future__ import annotations
from collections import deque
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable
import logging

from core import Coordinate, Offset, Region
from errors import OutOfBounds

if TYPE_CHECKING:
    from grid import Grid


logger = logging.getLogger(__name__)


class Connectivity(Enum):
    FOUR = 4
    EIGHT = 8


# Up, down, left, right
ORTHOGONAL_OFFSETS = (Offset(0, -1), Offset(0, 1), Offset(-1, 0), Offset(1, 0))
# Clockwise from the top-left
DIAGONAL_OFFSETS = (Offset(-1, -1), Offset(1, -1), Offset(1, 1), Offset(-1, 1))


def neighbor_offsets(connectivity: Connectivity) -> tuple[Offset, ...]:
    if connectivity == Connectivity.EIGHT:
        return ORTHOGONAL_OFFSETS + DIAGONAL_OFFSETS
    return ORTHOGONAL_OFFSETS


def neighbors(
    grid: Grid[Any],
    coordinate: Coordinate,
    connectivity: Connectivity = Connectivity.FOUR,
) -> list[Coordinate]:
    """Return the in-bounds neighbors of `coordinate`."""
    size = grid.size
    if not size.contains(coordinate):
        raise OutOfBounds(f"({coordinate.x}, {coordinate.y}) is outside {size.width}x{size.height} grid")

    result = []
    for offset in neighbor_offsets(connectivity):
        neighbor = coordinate.offset(offset)
        if neighbor is not None and size.contains(neighbor):
            result.append(neighbor)
    return result


def connected_region(
    grid: Grid[Any],
    start: Coordinate,
    predicate: Callable[[Any], bool] | None = None,
    connectivity: Connectivity = Connectivity.FOUR,
) -> Region:
    """Find every coordinate reachable from `start` through cells matching `predicate`.

    Without a predicate, cells equal to the start cell's value match. The
    region is empty if the start cell itself does not match.
    """
    start_value = grid.get(start)
    if predicate is None:
        matches: Callable[[Any], bool] = lambda value: bool(value == start_value)
    else:
        matches = predicate

    if not matches(start_value):
        return Region(frozenset())

    visited = {start}
    frontier = deque([start])
    while frontier:
        current = frontier.popleft()
        for neighbor in neighbors(grid, current, connectivity):
            if neighbor not in visited and matches(grid.get(neighbor)):
                visited.add(neighbor)
                frontier.append(neighbor)

    return Region(frozenset(visited))


def flood_fill(
    grid: Grid[Any],
    start: Coordinate,
    predicate: Callable[[Any], bool] | None,
    replacement: Any,
    connectivity: Connectivity = Connectivity.FOUR,
) -> Region:
    """Replace each cell of the connected region around `start` once; return the region."""
    region = connected_region(grid, start, predicate, connectivity)
    for coordinate in region:
        grid.set(coordinate, replacement)
    logger.debug(f"Flood fill from ({start.x}, {start.y}) replaced {len(region)} cells")
    return region
