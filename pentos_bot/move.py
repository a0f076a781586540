from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from typing import FrozenSet, Optional

from pentos_bot.buildings import Building, BuildingType
from pentos_bot.geometry import Cell


EMPTY: FrozenSet[Cell] = frozenset()


@dataclass(frozen=True)
class Move:
    """A placement decision: building, anchor, rotation and new construction.

    `road`, `water` and `park` hold the cells to be built in addition to the
    building itself. A move with `accept=False` rejects the request and must
    not change the board.
    """

    accept: bool
    request: Optional[Building]
    location: Optional[Cell] = None
    rotation: int = 0
    road: FrozenSet[Cell] = EMPTY
    water: FrozenSet[Cell] = EMPTY
    park: FrozenSet[Cell] = EMPTY

    @staticmethod
    def reject(request: Optional[Building] = None) -> Move:
        return Move(accept=False, request=request)

    @property
    def building(self) -> Building:
        return self.request.rotations()[self.rotation]

    @property
    def is_residence(self) -> bool:
        return self.request is not None and self.request.type == BuildingType.RESIDENCE

    def footprint(self) -> FrozenSet[Cell]:
        return self._footprint

    @cached_property
    def _footprint(self) -> FrozenSet[Cell]:
        if not self.accept or self.location is None:
            return EMPTY
        return self.building.footprint(self.location)

    def construction(self) -> FrozenSet[Cell]:
        """Every cell this move occupies."""
        return self.footprint() | self.road | self.water | self.park
