"""Run the engine inside the Java Pentos simulator through JPype.

The simulator hands a player `pentos.sim.Building` requests and a
`pentos.sim.Land` board and expects a `pentos.sim.Move` back. This module
wraps those objects so the engine sees its own board surface, converts
buildings and moves in both directions and exposes the engine as a Java
`pentos.sim.Player`.

Typical use:

    start_jvm("pentos.jar")
    player = PentosPlayer()          # pass it to the simulator as a Player

Java classes are looked up lazily so the adapters can be used (and tested)
with plain Python stand-ins before a JVM is running.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional

import jpype
from jpype import JImplements, JOverride

from pentos_bot.buildings import Building, BuildingType
from pentos_bot.config import EngineConfig
from pentos_bot.errors import NoCandidateError
from pentos_bot.geometry import Cell, in_bounds
from pentos_bot.land import CellType
from pentos_bot.move import Move
from pentos_bot.player import Player

logger = logging.getLogger(__name__)


def start_jvm(jar_path: str) -> None:
    """
    Starts the JVM with the Pentos simulator JAR on the classpath.

    Args:
        jar_path: Path to the simulator JAR file
    """
    if not jpype.isJVMStarted():
        jvm_args = [
            jpype.getDefaultJVMPath(),
            "-Xms256m", "-Xmx1g",
        ]
        jpype.startJVM(*jvm_args, classpath=[jar_path])
        logger.info("JVM started with %s", jar_path)


def _java_class(name: str) -> Callable[..., Any]:
    return jpype.JClass(name)


class JavaLand:
    """Board surface over a `pentos.sim.Land`.

    Cell types and occupancy are read from the Java board. Placement checks
    run on the Python side because the engine's rotation variants are Python
    buildings; pond and field membership is left to the simulator.
    """

    def __init__(self, jland: Any, cell_cls: Optional[Callable[[int, int], Any]] = None) -> None:
        self.jland = jland
        self.side = int(jland.side)
        self._cell_cls = cell_cls

    def _jcell(self, cell: Cell) -> Any:
        if self._cell_cls is None:
            self._cell_cls = _java_class("pentos.sim.Cell")
        return self._cell_cls(cell.i, cell.j)

    def get_cell_type(self, cell: Cell) -> CellType:
        if not in_bounds(cell, self.side):
            return CellType.BLOCKED
        return CellType[str(self.jland.getCellType(cell.i, cell.j))]

    def unoccupied(self, cell: Cell) -> bool:
        return in_bounds(cell, self.side) and bool(self.jland.unoccupied(cell.i, cell.j))

    def buildable(self, building: Building, anchor: Cell) -> bool:
        return all(self.unoccupied(c) for c in building.footprint(anchor))

    def is_pond(self, cell: Cell) -> bool:
        return in_bounds(cell, self.side) and bool(self.jland.isPond(self._jcell(cell)))

    def is_field(self, cell: Cell) -> bool:
        return in_bounds(cell, self.side) and bool(self.jland.isField(self._jcell(cell)))


def _cells_of(jbuilding: Any) -> frozenset:
    return frozenset(Cell(int(c.i), int(c.j)) for c in jbuilding)


def from_java_building(jbuilding: Any) -> Building:
    """Python copy of a `pentos.sim.Building`, keeping the simulator's rotation order."""
    btype = BuildingType[str(jbuilding.type)]
    variants = tuple(Building(_cells_of(v), btype) for v in jbuilding.rotations())
    return Building(_cells_of(jbuilding), btype, variants=variants)


def _java_cell_set(cells: Iterable[Cell], cell_cls: Callable[[int, int], Any], set_cls: Callable[[], Any]) -> Any:
    out = set_cls()
    for c in sorted(cells):
        out.add(cell_cls(c.i, c.j))
    return out


def to_java_move(
    move: Move,
    jrequest: Any,
    move_cls: Optional[Callable[..., Any]] = None,
    cell_cls: Optional[Callable[[int, int], Any]] = None,
    set_cls: Optional[Callable[[], Any]] = None,
) -> Any:
    """Build the `pentos.sim.Move` for an engine move.

    `jrequest` is the Java building the move answers; the simulator checks
    the move against its own request object.
    """
    move_cls = move_cls or _java_class("pentos.sim.Move")
    cell_cls = cell_cls or _java_class("pentos.sim.Cell")
    set_cls = set_cls or _java_class("java.util.HashSet")

    if not move.accept:
        return move_cls(False, jrequest, None, 0, set_cls(), set_cls(), set_cls())

    return move_cls(
        True,
        jrequest,
        cell_cls(move.location.i, move.location.j),
        move.rotation,
        _java_cell_set(move.road, cell_cls, set_cls),
        _java_cell_set(move.water, cell_cls, set_cls),
        _java_cell_set(move.park, cell_cls, set_cls),
    )


@JImplements("pentos.sim.Player", deferred=True)
class PentosPlayer:
    """`pentos.sim.Player` implementation backed by the Python engine.

    Must be instantiated after start_jvm().
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.engine = Player(config)

    @JOverride
    def init(self):
        self.engine.init()

    @JOverride
    def play(self, request, land):
        building = from_java_building(request)
        try:
            move = self.engine.play(building, JavaLand(land))
        except NoCandidateError as e:
            logger.warning("rejecting request: %s", e)
            move = Move.reject(building)
        return to_java_move(move, request)
