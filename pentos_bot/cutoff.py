"""Detect empty cells a move would wall off from the road network."""
from __future__ import annotations

from typing import AbstractSet, Callable, Iterable, List, Optional, Set

from pentos_bot.geometry import Cell, neighbor_set, on_perimeter
from pentos_bot.move import Move
from pentos_bot.roads import is_road


def connected_empty_cells(
    start: Cell,
    land,
    consumed: AbstractSet[Cell],
    stop: Optional[Callable[[Cell], bool]] = None,
) -> Set[Cell]:
    """Empty cells reachable from `start` without crossing consumed or occupied cells.

    With `stop`, the walk ends at the first visited cell it accepts and the
    cells found so far are returned.
    """
    group: Set[Cell] = {start}
    stack: List[Cell] = [start]
    while stack:
        cur = stack.pop()
        if stop is not None and stop(cur):
            return group
        for n in cur.neighbors():
            if n in group or n in consumed or not land.unoccupied(n):
                continue
            group.add(n)
            stack.append(n)
    return group


def is_connected_to_road(
    group: Iterable[Cell],
    land,
    road: AbstractSet[Cell],
    registry: AbstractSet[Cell] = frozenset(),
) -> bool:
    """A group keeps road access if it reaches the perimeter or borders existing or new road."""
    group = list(group)
    for c in group:
        if on_perimeter(c, land.side):
            return True
    for n in neighbor_set(group):
        if n in road or is_road(n, land, registry):
            return True
    return False


def cut_off_groups(move: Move, land, registry: AbstractSet[Cell] = frozenset()) -> List[Set[Cell]]:
    """Empty components next to the move's construction that lose road access."""
    consumed = move.construction()
    starts = sorted(n for n in neighbor_set(consumed) if n not in consumed and land.unoccupied(n))

    reachable: Set[Cell] = set()
    isolated: Set[Cell] = set()

    # A component is settled as soon as one of its cells has access.
    def settled(c: Cell) -> bool:
        return c in reachable or is_connected_to_road((c,), land, move.road, registry)

    out: List[Set[Cell]] = []
    for start in starts:
        if start in reachable or start in isolated:
            continue
        group = connected_empty_cells(start, land, consumed, stop=settled)
        if group & reachable or is_connected_to_road(group, land, move.road, registry):
            reachable |= group
        else:
            isolated |= group
            out.append(group)
    return out


def count_cells_cut_off(move: Move, land, registry: AbstractSet[Cell] = frozenset()) -> int:
    """Number of empty cells left with no road access if `move` were built."""
    return sum(len(g) for g in cut_off_groups(move, land, registry))
