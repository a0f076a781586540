"""In-memory Pentos board.

The grid is a numpy array of `CellType` codes. Besides the queries the
engine needs (cell type, occupancy, buildability, pond and field
membership) it can apply an accepted move, which is what the host does
between turns.
"""
from __future__ import annotations

from collections import deque
from enum import IntEnum
from typing import Dict, FrozenSet, Iterable, List, Sequence, Set

import numpy as np

from pentos_bot.buildings import Building, BuildingType
from pentos_bot.errors import InvalidMoveError
from pentos_bot.geometry import Cell, in_bounds
from pentos_bot.move import Move


class CellType(IntEnum):
    EMPTY = 0
    ROAD = 1
    WATER = 2
    PARK = 3
    RESIDENCE = 4
    FACTORY = 5
    # Reported for coordinates outside the board
    BLOCKED = 6


# A water (park) cell counts as a pond (field) once its group has this many cells.
MIN_AMENITY_SIZE = 4

DEFAULT_SIDE = 50

SYMBOLS: Dict[str, CellType] = {
    ".": CellType.EMPTY,
    "#": CellType.ROAD,
    "w": CellType.WATER,
    "p": CellType.PARK,
    "r": CellType.RESIDENCE,
    "f": CellType.FACTORY,
}
_CHARS = {v: k for k, v in SYMBOLS.items()}


class Land:
    def __init__(self, side: int = DEFAULT_SIDE) -> None:
        if side <= 0:
            raise ValueError("side must be positive")
        self.side = side
        self.grid = np.zeros((side, side), dtype=np.int8)
        self._amenity_cache: Dict[CellType, FrozenSet[Cell]] = {}

    @staticmethod
    def from_rows(rows: Sequence[str]) -> Land:
        """Build a board from square ASCII rows (see SYMBOLS)."""
        side = len(rows)
        land = Land(side)
        for i, row in enumerate(rows):
            if len(row) != side:
                raise ValueError(f"row {i} has length {len(row)}, expected {side}")
            for j, ch in enumerate(row):
                if ch not in SYMBOLS:
                    raise ValueError(f"unknown cell symbol {ch!r} at ({i}, {j})")
                land.grid[i, j] = SYMBOLS[ch]
        return land

    def to_rows(self) -> List[str]:
        return ["".join(_CHARS[CellType(v)] for v in row) for row in self.grid]

    def __str__(self) -> str:
        return "\n".join(self.to_rows())

    def get_cell_type(self, cell: Cell) -> CellType:
        if not in_bounds(cell, self.side):
            return CellType.BLOCKED
        return CellType(int(self.grid[cell.i, cell.j]))

    def unoccupied(self, cell: Cell) -> bool:
        return in_bounds(cell, self.side) and bool(self.grid[cell.i, cell.j] == CellType.EMPTY)

    def buildable(self, building: Building, anchor: Cell) -> bool:
        return all(self.unoccupied(c) for c in building.footprint(anchor))

    def is_pond(self, cell: Cell) -> bool:
        return cell in self._amenity_cells(CellType.WATER)

    def is_field(self, cell: Cell) -> bool:
        return cell in self._amenity_cells(CellType.PARK)

    def count(self, cell_type: CellType) -> int:
        return int(np.count_nonzero(self.grid == cell_type))

    def cells_of(self, cell_type: CellType) -> List[Cell]:
        return [Cell(int(i), int(j)) for i, j in np.argwhere(self.grid == cell_type)]

    def fill(self, cells: Iterable[Cell], cell_type: CellType) -> None:
        for c in cells:
            if not in_bounds(c, self.side):
                raise InvalidMoveError(f"{c} is outside the board")
            self.grid[c.i, c.j] = cell_type
        self._amenity_cache.clear()

    def apply(self, move: Move) -> None:
        """Commit an accepted move. Rejections leave the board untouched."""
        if not move.accept:
            return
        footprint = move.footprint()
        groups = [footprint, move.road, move.water, move.park]
        seen: Set[Cell] = set()
        for group in groups:
            if seen & group:
                raise InvalidMoveError("construction sets of a move overlap")
            seen |= group
        for c in seen:
            if not self.unoccupied(c):
                raise InvalidMoveError(f"{c} is not free for construction")

        btype = CellType.RESIDENCE if move.request.type == BuildingType.RESIDENCE else CellType.FACTORY
        self.fill(footprint, btype)
        self.fill(move.road, CellType.ROAD)
        self.fill(move.water, CellType.WATER)
        self.fill(move.park, CellType.PARK)

    def _amenity_cells(self, cell_type: CellType) -> FrozenSet[Cell]:
        cached = self._amenity_cache.get(cell_type)
        if cached is not None:
            return cached

        out: Set[Cell] = set()
        visited: Set[Cell] = set()
        for start in self.cells_of(cell_type):
            if start in visited:
                continue
            group = [start]
            visited.add(start)
            q = deque([start])
            while q:
                cur = q.popleft()
                for n in cur.neighbors():
                    if n in visited or self.get_cell_type(n) != cell_type:
                        continue
                    visited.add(n)
                    group.append(n)
                    q.append(n)
            if len(group) >= MIN_AMENITY_SIZE:
                out.update(group)

        result = frozenset(out)
        self._amenity_cache[cell_type] = result
        return result
