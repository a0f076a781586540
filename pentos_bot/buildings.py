"""Building shapes, rotation variants and the request catalog.

A building is a set of cells relative to its anchor plus a type tag. The
engine places rotation variants, indexed the way the host indexes them; when
a building is created in Python the variants are derived by quarter turns,
normalized to the origin, with duplicates removed.
"""
from __future__ import annotations

import random
from dataclasses import dataclass, field
from functools import cached_property
from enum import Enum
from typing import FrozenSet, Iterable, Iterator, List, Optional, Sequence, Tuple

from pentos_bot.geometry import Cell


class BuildingType(Enum):
    RESIDENCE = "RESIDENCE"
    FACTORY = "FACTORY"


def _normalize(cells: Iterable[Cell]) -> FrozenSet[Cell]:
    cells = list(cells)
    min_i = min(c.i for c in cells)
    min_j = min(c.j for c in cells)
    return frozenset(Cell(c.i - min_i, c.j - min_j) for c in cells)


def _quarter_turn(cells: Iterable[Cell]) -> FrozenSet[Cell]:
    return _normalize(Cell(c.j, -c.i) for c in cells)


def _mirror(cells: Iterable[Cell]) -> FrozenSet[Cell]:
    return _normalize(Cell(c.i, -c.j) for c in cells)


@dataclass(frozen=True)
class Building:
    cells: FrozenSet[Cell]
    type: BuildingType
    # Host-supplied rotation order; derived when not given.
    variants: Optional[Tuple[Building, ...]] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.cells:
            raise ValueError("a building needs at least one cell")
        object.__setattr__(self, "cells", frozenset(self.cells))

    @staticmethod
    def from_picture(rows: Sequence[str], btype: BuildingType) -> Building:
        """Build a shape from rows where any character other than '.' or ' ' is a cell."""
        cells = [Cell(i, j) for i, row in enumerate(rows) for j, ch in enumerate(row) if ch not in " ."]
        return Building(_normalize(cells), btype)

    def __iter__(self) -> Iterator[Cell]:
        return iter(sorted(self.cells))

    def __len__(self) -> int:
        return len(self.cells)

    def size(self) -> int:
        return len(self.cells)

    def rotations(self) -> Tuple[Building, ...]:
        return self._rotations

    @cached_property
    def _rotations(self) -> Tuple[Building, ...]:
        if self.variants is not None:
            return self.variants
        out: List[Building] = []
        seen = set()
        cur = _normalize(self.cells)
        for _ in range(4):
            if cur not in seen:
                seen.add(cur)
                out.append(Building(cur, self.type))
            cur = _quarter_turn(cur)
        return tuple(out)

    def footprint(self, anchor: Cell) -> FrozenSet[Cell]:
        """Absolute cells when the building is anchored at `anchor`."""
        return frozenset(Cell(c.i + anchor.i, c.j + anchor.j) for c in self.cells)


_PENTOMINOES = {
    "F": (".XX", "XX.", ".X."),
    "I": ("XXXXX",),
    "L": ("X...", "XXXX"),
    "N": ("XX..", ".XXX"),
    "P": ("XX", "XX", "X."),
    "T": ("XXX", ".X.", ".X."),
    "U": ("X.X", "XXX"),
    "V": ("X..", "X..", "XXX"),
    "W": ("X..", "XX.", ".XX"),
    "X": (".X.", "XXX", ".X."),
    "Y": ("..X.", "XXXX"),
    "Z": ("XX.", ".X.", ".XX"),
}

FACTORY_MIN_SIDE = 1
FACTORY_MAX_SIDE = 5


def _canonical(cells: FrozenSet[Cell]) -> Tuple[Cell, ...]:
    forms = []
    cur = cells
    for _ in range(4):
        forms.append(tuple(sorted(cur)))
        cur = _quarter_turn(cur)
    return min(forms)


def residence_catalog() -> List[Building]:
    """All one-sided pentominoes: the 12 free shapes plus mirror images of the chiral ones."""
    out: List[Building] = []
    seen = set()
    for name in sorted(_PENTOMINOES):
        base = Building.from_picture(_PENTOMINOES[name], BuildingType.RESIDENCE)
        for cells in (base.cells, _mirror(base.cells)):
            key = _canonical(cells)
            if key in seen:
                continue
            seen.add(key)
            out.append(Building(cells, BuildingType.RESIDENCE))
    return out


def factory(height: int, width: int) -> Building:
    if not (FACTORY_MIN_SIDE <= height <= FACTORY_MAX_SIDE and FACTORY_MIN_SIDE <= width <= FACTORY_MAX_SIDE):
        raise ValueError(f"factory sides must be within [{FACTORY_MIN_SIDE}, {FACTORY_MAX_SIDE}]")
    cells = frozenset(Cell(i, j) for i in range(height) for j in range(width))
    return Building(cells, BuildingType.FACTORY)


class RandomSequencer:
    """Seeded stream of building requests for local games."""

    def __init__(self, seed: Optional[int] = None, residence_ratio: float = 0.5) -> None:
        if not 0.0 <= residence_ratio <= 1.0:
            raise ValueError("residence_ratio must be within [0, 1]")
        self.rng = random.Random(seed)
        self.residence_ratio = residence_ratio
        self._residences = residence_catalog()

    def next(self) -> Building:
        if self.rng.random() < self.residence_ratio:
            return self.rng.choice(self._residences)
        h = self.rng.randint(FACTORY_MIN_SIDE, FACTORY_MAX_SIDE)
        w = self.rng.randint(FACTORY_MIN_SIDE, FACTORY_MAX_SIDE)
        return factory(h, w)
