"""Tests for neighbor enumeration and flood fill."""

from collections import Counter

import pytest

from algorithms import Connectivity
from core import Coordinate, Size
from errors import OutOfBounds
from grid import Grid
from test_utils import make_filled_grid


class TestNeighbors:
    def test_interior_cell_has_four_orthogonal_neighbors(self) -> None:
        grid = make_filled_grid(3, 3)
        assert set(grid.neighbors(Coordinate(1, 1))) == {
            Coordinate(1, 0),
            Coordinate(1, 2),
            Coordinate(0, 1),
            Coordinate(2, 1),
        }

    def test_corner_cell_has_two_orthogonal_neighbors(self) -> None:
        grid = make_filled_grid(3, 3)
        assert set(grid.neighbors(Coordinate(0, 0))) == {Coordinate(1, 0), Coordinate(0, 1)}
        assert len(grid.neighbors(Coordinate(2, 2))) == 2

    def test_edge_cell_has_three_orthogonal_neighbors(self) -> None:
        grid = make_filled_grid(3, 3)
        assert len(grid.neighbors(Coordinate(1, 0))) == 3

    def test_eight_connectivity_adds_diagonals(self) -> None:
        grid = make_filled_grid(3, 3)
        assert len(grid.neighbors(Coordinate(1, 1), Connectivity.EIGHT)) == 8
        assert set(grid.neighbors((0, 0), Connectivity.EIGHT)) == {
            Coordinate(1, 0),
            Coordinate(0, 1),
            Coordinate(1, 1),
        }

    def test_single_cell_grid_has_no_neighbors(self) -> None:
        grid = make_filled_grid(1, 1)
        assert grid.neighbors(Coordinate(0, 0), Connectivity.EIGHT) == []

    def test_rejects_coordinate_outside_grid(self) -> None:
        grid = make_filled_grid(2, 2)
        with pytest.raises(OutOfBounds):
            grid.neighbors(Coordinate(2, 0))


class CountingPredicate:
    """Matches cells equal to `target` and counts how often each value is checked."""

    def __init__(self, target: object) -> None:
        self.target = target
        self.calls = 0

    def __call__(self, value: object) -> bool:
        self.calls += 1
        return value == self.target


class TestFloodFill:
    def test_uniform_grid_replaces_every_cell_once(self) -> None:
        grid = make_filled_grid(4, 3, fill=0)
        writes: Counter[Coordinate] = Counter()
        original_set = grid.set

        def counting_set(coordinate: Coordinate, value: object) -> None:
            writes[coordinate] += 1
            original_set(coordinate, value)

        grid.set = counting_set  # type: ignore[method-assign]
        region = grid.flood_fill(Coordinate(2, 1), None, 1)

        assert len(region) == 12
        assert set(writes.values()) == {1}
        assert len(writes) == 12
        assert grid.values() == [1] * 12

    def test_stops_at_cells_that_do_not_match(self) -> None:
        grid = Grid.from_rows([
            [0, 0, 1, 0],
            [0, 1, 0, 0],
            [1, 0, 0, 0],
        ])
        region = grid.flood_fill((0, 0), None, 7)
        assert set(region) == {Coordinate(0, 0), Coordinate(1, 0), Coordinate(0, 1)}
        assert grid.to_rows() == [
            [7, 7, 1, 0],
            [7, 1, 0, 0],
            [1, 0, 0, 0],
        ]

    def test_eight_connectivity_crosses_diagonals(self) -> None:
        grid = Grid.from_rows([
            [1, 0, 0],
            [0, 1, 0],
            [0, 0, 1],
        ])
        region = grid.flood_fill(Coordinate(0, 0), None, 5, Connectivity.EIGHT)
        assert len(region) == 3
        assert grid.to_rows() == [[5, 0, 0], [0, 5, 0], [0, 0, 5]]

    def test_predicate_selects_cells(self) -> None:
        grid = Grid.from_rows([[1, 2, 9], [3, 9, 4]])
        region = grid.flood_fill(Coordinate(0, 0), lambda value: value < 5, 0)
        assert len(region) == 3
        assert grid.to_rows() == [[0, 0, 9], [0, 9, 4]]

    def test_predicate_checks_each_candidate_a_bounded_number_of_times(self) -> None:
        grid = make_filled_grid(5, 5, fill="a")
        predicate = CountingPredicate("a")
        grid.flood_fill(Coordinate(0, 0), predicate, "a")
        # Start cell plus at most one check per (cell, neighbor) pair
        assert predicate.calls <= 1 + 4 * 25

    def test_replacement_equal_to_target_terminates(self) -> None:
        grid = make_filled_grid(3, 3, fill="x")
        region = grid.flood_fill(Coordinate(1, 1), None, "x")
        assert len(region) == 9

    def test_start_that_does_not_match_changes_nothing(self) -> None:
        grid = Grid.from_rows([[1, 2], [3, 4]])
        region = grid.flood_fill(Coordinate(0, 0), lambda value: value > 10, 0)
        assert len(region) == 0
        assert grid.to_rows() == [[1, 2], [3, 4]]

    def test_rejects_start_outside_grid(self) -> None:
        grid = make_filled_grid(2, 2)
        with pytest.raises(OutOfBounds):
            grid.flood_fill(Coordinate(0, 2), None, "y")


class TestConnectedRegion:
    def test_does_not_modify_grid(self) -> None:
        grid = Grid.from_rows([["a", "a"], ["b", "a"]])
        region = grid.connected_region(Coordinate(0, 0))
        assert set(region) == {Coordinate(0, 0), Coordinate(1, 0), Coordinate(1, 1)}
        assert grid.to_rows() == [["a", "a"], ["b", "a"]]

    def test_edge_cells_of_region(self) -> None:
        grid = make_filled_grid(3, 3, fill=0)
        region = grid.connected_region(Coordinate(1, 1))
        assert Coordinate(1, 1) not in region.get_edge_cells()

    def test_works_on_numeric_grids(self) -> None:
        grid = Grid.with_size(Size(3, 2), 4, dtype=int)
        grid[1, 0] = 8
        region = grid.connected_region(Coordinate(0, 0))
        assert len(region) == 5
