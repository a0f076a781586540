"""Park and pond planning for residences.

For each amenity a residence is missing, the planner first tries to reach an
existing pond (field) through a short path of empty cells, and otherwise lays
a new straight segment next to the building. Parks are planned before ponds,
and cells taken by one are off limits to the other.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import AbstractSet, Callable, Dict, FrozenSet, Iterable, List, Optional, Set

from pentos_bot.config import DEFAULT_CONFIG, EngineConfig
from pentos_bot.geometry import DIRECTIONS, Cell, neighbor_set, trace_path
from pentos_bot.land import CellType
from pentos_bot.move import EMPTY, Move

logger = logging.getLogger(__name__)


def _adjacent(footprint: Iterable[Cell], test: Callable[[Cell], bool], planned: AbstractSet[Cell]) -> bool:
    for n in neighbor_set(footprint):
        if n in planned or test(n):
            return True
    return False


def adjacent_pond(footprint: Iterable[Cell], land, water: AbstractSet[Cell] = EMPTY) -> bool:
    """Footprint borders an existing pond or a planned water cell."""
    return _adjacent(footprint, land.is_pond, water)


def adjacent_field(footprint: Iterable[Cell], land, park: AbstractSet[Cell] = EMPTY) -> bool:
    """Footprint borders an existing field or a planned park cell."""
    return _adjacent(footprint, land.is_field, park)


def _target_test(land, kind: CellType) -> Callable[[Cell], bool]:
    if kind == CellType.WATER:
        return land.is_pond
    if kind == CellType.PARK:
        return land.is_field
    raise ValueError(f"kind must be WATER or PARK, got {kind!r}")


def connect_to(
    footprint: FrozenSet[Cell],
    land,
    marked: AbstractSet[Cell],
    kind: CellType,
    max_depth: int,
) -> FrozenSet[Cell]:
    """Shortest path of empty cells (at most `max_depth` long) from the footprint to a pond or field.

    The search grows one level at a time from the footprint's free neighbors;
    cells in `marked` or in the footprint are never used. The first cell found
    next to the target ends the search. Returns an empty set on failure.
    """
    is_target = _target_test(land, kind)

    def free(c: Cell) -> bool:
        return c not in visited and c not in footprint and c not in marked and land.unoccupied(c)

    came: Dict[Cell, Cell] = {}
    visited: Set[Cell] = set()
    frontier: List[Cell] = []
    for c in sorted(footprint):
        for n in c.neighbors():
            if free(n):
                visited.add(n)
                frontier.append(n)

    for _ in range(max_depth):
        nxt: List[Cell] = []
        for cur in frontier:
            if any(is_target(n) for n in cur.neighbors()):
                return frozenset(trace_path(cur, came))
            for n in cur.neighbors():
                if free(n):
                    visited.add(n)
                    came[n] = cur
                    nxt.append(n)
        if not nxt:
            break
        frontier = nxt

    return EMPTY


def straight_segments(
    footprint: FrozenSet[Cell],
    land,
    marked: AbstractSet[Cell],
    length: int,
) -> List[FrozenSet[Cell]]:
    """Straight runs of exactly `length` free cells starting next to the footprint.

    Runs that would leave the board or hit an occupied or marked cell are
    dropped. Order is deterministic: start cells sorted, then N/E/S/W.
    """
    starts = sorted(n for n in neighbor_set(footprint) if land.unoccupied(n) and n not in marked)
    out: List[FrozenSet[Cell]] = []
    seen: Set[FrozenSet[Cell]] = set()
    for start in starts:
        for di, dj in DIRECTIONS:
            run: List[Cell] = []
            cur = start
            while len(run) < length:
                if not land.unoccupied(cur) or cur in marked:
                    break
                run.append(cur)
                cur = cur.shifted(di, dj)
            if len(run) < length:
                continue
            seg = frozenset(run)
            if seg not in seen:
                seen.add(seg)
                out.append(seg)
    return out


def score_segment(
    segment: FrozenSet[Cell],
    land,
    road: AbstractSet[Cell],
    marked: AbstractSet[Cell],
    config: EngineConfig = DEFAULT_CONFIG,
) -> int:
    empty: Set[Cell] = set()
    road_cells: Set[Cell] = set()
    for n in neighbor_set(segment):
        if n in segment:
            continue
        if n in road or land.get_cell_type(n) == CellType.ROAD:
            road_cells.add(n)
        elif land.unoccupied(n) and n not in marked:
            empty.add(n)
    return len(empty) * config.PARKPOND_PACKING_BONUS - len(road_cells) * config.ROAD_ADJ_POND_PENALTY


def _plan_amenity(
    footprint: FrozenSet[Cell],
    land,
    road: FrozenSet[Cell],
    other: FrozenSet[Cell],
    kind: CellType,
    config: EngineConfig,
) -> FrozenSet[Cell]:
    path = connect_to(footprint, land, road | other, kind, config.AMENITY_SEARCH_DEPTH)
    if path:
        return path

    segments = straight_segments(footprint, land, road | footprint | other, config.AMENITY_SEGMENT_LENGTH)
    best: Optional[FrozenSet[Cell]] = None
    best_score = 0
    for seg in segments:
        s = score_segment(seg, land, road, footprint | other, config)
        if best is None or s > best_score:
            best = seg
            best_score = s
    return best if best is not None else EMPTY


def build_parks_ponds(move: Move, land, config: EngineConfig = DEFAULT_CONFIG) -> Move:
    """Variant of `move` with a park and a pond added where the building lacks them."""
    footprint = move.footprint()
    road = move.road

    park = EMPTY
    if not adjacent_field(footprint, land):
        park = _plan_amenity(footprint, land, road, EMPTY, CellType.PARK, config)

    water = EMPTY
    if not adjacent_pond(footprint, land):
        water = _plan_amenity(footprint, land, road, park, CellType.WATER, config)

    if not park and not water:
        logger.debug("no park or pond planned at %s rotation %d", move.location, move.rotation)
    return replace(move, park=park, water=water)
