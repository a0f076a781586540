"""Tests for the road connection search."""

from pentos_bot.geometry import Cell, on_perimeter
from pentos_bot.roads import find_shortest_road, has_road_connection, is_road

EMPTY_7 = ["......."] * 7


def test_perimeter_counts_as_connected(board):
    land = board(EMPTY_7)
    assert has_road_connection({Cell(0, 3)}, land, set())
    assert find_shortest_road(frozenset({Cell(6, 6)}), land, set()) == frozenset()


def test_touching_road_needs_no_new_road(board):
    rows = list(EMPTY_7)
    rows[2] = "...#..."
    land = board(rows)
    fp = frozenset({Cell(3, 3)})
    assert has_road_connection(fp, land, set())
    assert find_shortest_road(fp, land, set()) == frozenset()


def test_registry_counts_as_road(board):
    land = board(EMPTY_7)
    fp = frozenset({Cell(3, 3)})
    assert is_road(Cell(2, 3), land, {Cell(2, 3)})
    assert find_shortest_road(fp, land, {Cell(2, 3)}) == frozenset()


def test_shortest_path_to_edge(board):
    land = board(EMPTY_7)
    fp = frozenset({Cell(3, 3)})
    road = find_shortest_road(fp, land, set())
    assert road == frozenset({Cell(2, 3), Cell(1, 3), Cell(0, 3)})
    assert has_road_connection(fp, land, set(), road)


def test_shortest_path_to_existing_road(board):
    rows = list(EMPTY_7)
    rows[1] = "...#..."
    land = board(rows)
    road = find_shortest_road(frozenset({Cell(3, 3)}), land, set())
    assert road == frozenset({Cell(2, 3)})


def test_path_avoids_occupied_cells(board):
    land = board([
        ".......",
        ".......",
        "..fff..",
        "..f.f..",
        "..f....",
        ".......",
        ".......",
    ])
    fp = frozenset({Cell(3, 3)})
    road = find_shortest_road(fp, land, set())
    assert road is not None
    assert all(land.unoccupied(c) for c in road)
    assert not road & fp
    assert any(on_perimeter(c, land.side) for c in road)
    assert len(road) == 3


def test_enclosed_footprint_is_infeasible(board):
    land = board([
        ".....",
        ".fff.",
        ".f.f.",
        ".fff.",
        ".....",
    ])
    assert find_shortest_road(frozenset({Cell(2, 2)}), land, set()) is None
