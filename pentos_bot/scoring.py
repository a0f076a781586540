"""Heuristic score of a hypothetical move.

Higher is better. The score rewards building cells and tight packing, gives
residences a bonus for ponds and fields, pushes factories towards each other
and away from amenities, and charges for construction, road frontage, use of
the outer ring, roads through green space and, above all, for cutting empty
cells off from the road network.
"""
from __future__ import annotations

from typing import AbstractSet, Dict

from pentos_bot.amenities import adjacent_field, adjacent_pond
from pentos_bot.buildings import BuildingType
from pentos_bot.config import DEFAULT_CONFIG, EngineConfig
from pentos_bot.cutoff import count_cells_cut_off
from pentos_bot.geometry import Cell, in_bounds, neighbor_set, on_perimeter
from pentos_bot.land import CellType
from pentos_bot.move import Move
from pentos_bot.roads import is_road


def packing_count(move: Move, land) -> int:
    """Open cells around the building.

    Planned water and park count as filled. Residences treat road as open.
    Factories also count open cells around their new road, which itself
    counts as filled.
    """
    footprint = move.footprint()
    residence = move.request.type == BuildingType.RESIDENCE
    filled = footprint | move.water | move.park
    around = neighbor_set(footprint)
    if not residence:
        filled = filled | move.road
        around |= neighbor_set(move.road)

    count = 0
    for n in around:
        if n in filled:
            continue
        if land.unoccupied(n) or (residence and land.get_cell_type(n) == CellType.ROAD):
            count += 1
    return count


def adjacent_type_count(move: Move, land, cell_type: CellType) -> int:
    """Board cells of `cell_type` next to the building; planned construction is ignored."""
    return sum(1 for n in neighbor_set(move.footprint()) if land.get_cell_type(n) == cell_type)


def adjacent_road_count(move: Move, land, registry: AbstractSet[Cell]) -> int:
    """Road cells next to the building. Cells past the board edge count as road."""
    count = 0
    for n in neighbor_set(move.footprint()):
        if not in_bounds(n, land.side) or n in move.road or is_road(n, land, registry):
            count += 1
    return count


def perimeter_count(move: Move, land) -> int:
    return sum(1 for c in move.construction() if on_perimeter(c, land.side))


def road_next_to_amenity_count(move: Move, land) -> int:
    """Water and park cells, existing or planned, bordering the new road."""
    count = 0
    for n in neighbor_set(move.road):
        if n in move.water or n in move.park:
            count += 1
        elif land.get_cell_type(n) in (CellType.WATER, CellType.PARK):
            count += 1
    return count


def cutoff_penalty(cut_off: int, config: EngineConfig = DEFAULT_CONFIG) -> int:
    return 2 ** min(cut_off, config.MAX_CUTOFF_EXPONENT)


def score_breakdown(
    move: Move,
    land,
    registry: AbstractSet[Cell] = frozenset(),
    config: EngineConfig = DEFAULT_CONFIG,
) -> Dict[str, int]:
    """Signed contribution of each scoring term; score_move is their sum."""
    building = move.building
    residence = building.type == BuildingType.RESIDENCE
    footprint = move.footprint()

    terms: Dict[str, int] = {}
    terms["base"] = building.size() * config.BASE_BUILDING_SCORE
    terms["packing"] = -packing_count(move, land) * config.PACKING_FACTOR_MULTIPLE

    if residence:
        amenity = 0
        if adjacent_pond(footprint, land, move.water):
            amenity += config.POND_BONUS_SCORE
        if adjacent_field(footprint, land, move.park):
            amenity += config.FIELD_BONUS_SCORE
        amenity -= (len(move.water) + len(move.park)) * config.BUILD_PARK_PENALTY
        terms["amenity"] = amenity
    else:
        terms["industrial"] = (
            -adjacent_type_count(move, land, CellType.WATER) * config.POND_PENALTY
            - adjacent_type_count(move, land, CellType.PARK) * config.FIELD_PENALTY
            + adjacent_type_count(move, land, CellType.FACTORY) * config.FACTORY_BONUS
        )

    terms["construction"] = (
        -len(move.road) * config.BUILD_ROAD_PENALTY
        - adjacent_road_count(move, land, registry) * config.ROAD_ADJ_PENALTY
    )
    terms["perimeter"] = -perimeter_count(move, land) * config.PERIMETER_PENALTY
    terms["road_conflict"] = -road_next_to_amenity_count(move, land) * config.ROAD_ADJ_POND_PENALTY
    terms["cutoff"] = -cutoff_penalty(count_cells_cut_off(move, land, registry), config)
    return terms


def score_move(
    move: Move,
    land,
    registry: AbstractSet[Cell] = frozenset(),
    config: EngineConfig = DEFAULT_CONFIG,
) -> int:
    return sum(score_breakdown(move, land, registry, config).values())
