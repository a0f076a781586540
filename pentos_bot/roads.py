"""Road connection search.

A building is road-connected when one of its cells touches a road or lies on
the outer ring of the board; the ring counts as road access. New road is laid
through empty cells along a shortest path found by breadth-first search.
"""
from __future__ import annotations

from collections import deque
from typing import AbstractSet, Deque, Dict, FrozenSet, Iterable, Optional

from pentos_bot.geometry import Cell, on_perimeter, trace_path
from pentos_bot.land import CellType


def is_road(cell: Cell, land, registry: AbstractSet[Cell]) -> bool:
    return cell in registry or land.get_cell_type(cell) == CellType.ROAD


def _touches_road(cell: Cell, land, registry: AbstractSet[Cell], road: AbstractSet[Cell] = frozenset()) -> bool:
    for n in cell.neighbors():
        if n in road or is_road(n, land, registry):
            return True
    return False


def has_road_connection(
    footprint: Iterable[Cell],
    land,
    registry: AbstractSet[Cell],
    road: AbstractSet[Cell] = frozenset(),
) -> bool:
    """True if the footprint touches existing or proposed road, or sits on the perimeter."""
    for c in footprint:
        if on_perimeter(c, land.side):
            return True
        if _touches_road(c, land, registry, road):
            return True
    return False


def find_shortest_road(
    footprint: FrozenSet[Cell],
    land,
    registry: AbstractSet[Cell],
) -> Optional[FrozenSet[Cell]]:
    """Fewest new road cells linking `footprint` to the road network or the board edge.

    Returns an empty set when no road is needed and None when no path exists.
    Among equally short paths the first reached in N/E/S/W search order wins.
    """
    if has_road_connection(footprint, land, registry):
        return frozenset()

    came: Dict[Cell, Cell] = {}
    visited = set(footprint)
    q: Deque[Cell] = deque()
    for c in sorted(footprint):
        for n in c.neighbors():
            if n in visited or not land.unoccupied(n):
                continue
            visited.add(n)
            q.append(n)

    while q:
        cur = q.popleft()
        if on_perimeter(cur, land.side) or _touches_road(cur, land, registry):
            return frozenset(trace_path(cur, came))
        for n in cur.neighbors():
            if n in visited or not land.unoccupied(n):
                continue
            visited.add(n)
            came[n] = cur
            q.append(n)

    return None
