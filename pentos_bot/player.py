"""\
Greedy Pentos player.
=====================

Each turn the player sweeps the board for legal placements of the requested
building, scores every candidate and commits the best one.

Sweep:
- Residences fill the board from the top. Rows are scanned top-down, left to
  right, and the scan stops after a row once it has passed the construction
  frontier and holds at least MIN_POTENTIAL_MOVES candidates.
- Factories fill the board from the bottom. Rows are scanned bottom-up, right
  to left, and the scan stops after a row once MIN_POTENTIAL_MOVES candidates
  were found.

For every free anchor and rotation the player lays the shortest road to the
network (or the board edge) and scores the result. Residences also get a
second candidate with a park and a pond planned next to them.

State:
- The road registry collects every road cell this player has committed. It
  complements the board's own ROAD cells for hosts that are slow to report
  them.
- The frontier is the lowest row reached by a committed residence.
Both are reset by init() and only change when play() returns a move.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Set

from pentos_bot.amenities import build_parks_ponds
from pentos_bot.buildings import Building, BuildingType
from pentos_bot.config import DEFAULT_CONFIG, EngineConfig
from pentos_bot.errors import NoCandidateError
from pentos_bot.geometry import Cell
from pentos_bot.move import Move
from pentos_bot.roads import find_shortest_road, has_road_connection
from pentos_bot.scoring import score_breakdown, score_move

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoredMove:
    move: Move
    score: int


class Player:
    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config if config is not None else DEFAULT_CONFIG
        self._road_cells: Set[Cell] = set()
        self._frontier = 0
        self.turn = 0

    @property
    def road_cells(self) -> FrozenSet[Cell]:
        return frozenset(self._road_cells)

    @property
    def frontier(self) -> int:
        return self._frontier

    def init(self) -> None:
        """Forget everything from a previous board."""
        self._road_cells = set()
        self._frontier = 0
        self.turn = 0

    # -------------------------
    # Candidate generation
    # -------------------------

    @staticmethod
    def _order(request: Building, side: int) -> range:
        if request.type == BuildingType.RESIDENCE:
            return range(side)
        return range(side - 1, -1, -1)

    def _row_done(self, request: Building, row: int, found: int) -> bool:
        if found < self.config.MIN_POTENTIAL_MOVES:
            return False
        if request.type == BuildingType.RESIDENCE:
            return row >= self._frontier
        return True

    def _evaluate_moves_at(self, i: int, j: int, request: Building, land, potential: List[ScoredMove]) -> None:
        """Append every legal candidate anchored at (i, j) to `potential`."""
        anchor = Cell(i, j)
        registry = self._road_cells
        for r, variant in enumerate(request.rotations()):
            if not land.buildable(variant, anchor):
                continue
            footprint = variant.footprint(anchor)
            road = find_shortest_road(footprint, land, registry)
            if road is None:
                continue
            if not has_road_connection(footprint, land, registry, road):
                continue

            move = Move(accept=True, request=request, location=anchor, rotation=r, road=road)
            potential.append(ScoredMove(move, score_move(move, land, registry, self.config)))

            if request.type == BuildingType.RESIDENCE:
                variant_move = build_parks_ponds(move, land, self.config)
                potential.append(ScoredMove(variant_move, score_move(variant_move, land, registry, self.config)))

    def _sweep(self, request: Building, land) -> List[ScoredMove]:
        side = land.side
        potential: List[ScoredMove] = []
        rows = 0
        for i in self._order(request, side):
            rows += 1
            for j in self._order(request, side):
                self._evaluate_moves_at(i, j, request, land, potential)
            if self._row_done(request, i, len(potential)):
                break
        logger.debug("turn %d: %d candidates for %s in %d rows", self.turn, len(potential), request.type.name, rows)
        return potential

    # -------------------------
    # Selection
    # -------------------------

    @staticmethod
    def _select(potential: List[ScoredMove]) -> ScoredMove:
        # Strict '>' keeps the first candidate in scan order on ties.
        best = potential[0]
        for cand in potential[1:]:
            if cand.score > best.score:
                best = cand
        return best

    def _commit(self, move: Move, land) -> None:
        self._road_cells.update(move.road)
        if move.is_residence:
            self._frontier = min(max(self._frontier, move.location.i), land.side - 1)

    def play(self, request: Building, land) -> Move:
        """Choose where to build `request` on `land`.

        Raises NoCandidateError when the building fits nowhere with a road
        connection. Nothing is committed in that case.
        """
        self.turn += 1
        potential = self._sweep(request, land)
        if not potential:
            logger.warning("turn %d: no legal placement for %s of size %d", self.turn, request.type.name, request.size())
            raise NoCandidateError(f"no legal placement for {request.type.name.lower()} of size {request.size()}")

        best = self._select(potential)
        move = best.move
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("turn %d: breakdown %s", self.turn, score_breakdown(move, land, self._road_cells, self.config))

        self._commit(move, land)
        logger.info(
            "turn %d: %s at %s rotation %d score %d road=%d water=%d park=%d",
            self.turn,
            request.type.name,
            move.location,
            move.rotation,
            best.score,
            len(move.road),
            len(move.water),
            len(move.park),
        )
        return move
