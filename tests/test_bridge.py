"""Tests for the Java simulator bridge.

The adapters are exercised with plain Python stand-ins for the simulator's
classes. Tests that need a JVM run only with --pentos-jar.
"""

from collections import namedtuple
from types import SimpleNamespace

import pytest

from pentos_bot import bridge
from pentos_bot.buildings import BuildingType, factory
from pentos_bot.geometry import Cell
from pentos_bot.land import CellType
from pentos_bot.move import Move
from pentos_bot.player import Player

FakeJCell = namedtuple("FakeJCell", "i j")


class FakeJMove:
    def __init__(self, accept, request, location, rotation, road, water, park):
        self.accept = accept
        self.request = request
        self.location = location
        self.rotation = rotation
        self.road = road
        self.water = water
        self.park = park


class FakeJBuilding:
    def __init__(self, cells, btype, variants=None):
        self.cells = [FakeJCell(i, j) for i, j in cells]
        self.type = btype
        self._variants = variants

    def __iter__(self):
        return iter(self.cells)

    def rotations(self):
        return self._variants if self._variants is not None else [self]


class FakeJLand:
    """Java-style view over an in-memory board."""

    def __init__(self, land):
        self.land = land
        self.side = land.side

    def getCellType(self, i, j):
        return self.land.get_cell_type(Cell(i, j)).name

    def unoccupied(self, i, j):
        return self.land.unoccupied(Cell(i, j))

    def isPond(self, c):
        return self.land.is_pond(Cell(c.i, c.j))

    def isField(self, c):
        return self.land.is_field(Cell(c.i, c.j))


FAKE_CLASSES = {
    "pentos.sim.Cell": FakeJCell,
    "pentos.sim.Move": FakeJMove,
    "java.util.HashSet": set,
}


@pytest.fixture
def fake_java(monkeypatch):
    monkeypatch.setattr(bridge, "_java_class", FAKE_CLASSES.__getitem__)


def test_java_land_reads_the_java_board(board, fake_java):
    land = board([
        "wwww.",
        "#....",
        "..f..",
        ".....",
        ".....",
    ])
    jl = bridge.JavaLand(FakeJLand(land))
    assert jl.side == 5
    assert jl.get_cell_type(Cell(1, 0)) == CellType.ROAD
    assert jl.get_cell_type(Cell(2, 2)) == CellType.FACTORY
    assert jl.get_cell_type(Cell(5, 0)) == CellType.BLOCKED
    assert jl.unoccupied(Cell(3, 3))
    assert not jl.unoccupied(Cell(-1, 3))
    assert jl.is_pond(Cell(0, 2))
    assert not jl.is_pond(Cell(0, 4))
    assert not jl.is_field(Cell(0, 0))
    assert jl.buildable(factory(2, 2), Cell(3, 3))
    assert not jl.buildable(factory(2, 2), Cell(1, 1))


def test_from_java_building_keeps_rotation_order():
    horizontal = FakeJBuilding([(0, 0), (0, 1)], "FACTORY")
    vertical = FakeJBuilding([(0, 0), (1, 0)], "FACTORY")
    jb = FakeJBuilding([(0, 0), (0, 1)], "FACTORY", variants=[vertical, horizontal])

    b = bridge.from_java_building(jb)
    assert b.type == BuildingType.FACTORY
    assert b.size() == 2
    assert [r.cells for r in b.rotations()] == [
        frozenset({Cell(0, 0), Cell(1, 0)}),
        frozenset({Cell(0, 0), Cell(0, 1)}),
    ]


def test_to_java_move_copies_every_set(fake_java):
    move = Move(
        accept=True,
        request=factory(1, 1),
        location=Cell(2, 3),
        rotation=0,
        road=frozenset({Cell(1, 3), Cell(0, 3)}),
        water=frozenset({Cell(2, 4)}),
    )
    jmove = bridge.to_java_move(move, "jrequest")
    assert jmove.accept is True
    assert jmove.request == "jrequest"
    assert jmove.location == FakeJCell(2, 3)
    assert jmove.road == {FakeJCell(1, 3), FakeJCell(0, 3)}
    assert jmove.water == {FakeJCell(2, 4)}
    assert jmove.park == set()


def test_to_java_move_rejection(fake_java):
    jmove = bridge.to_java_move(Move.reject(), "jrequest")
    assert jmove.accept is False
    assert jmove.location is None


def test_proxy_play_delegates_to_engine(board, fake_java):
    land = board(["....."] * 5)
    proxy = SimpleNamespace(engine=Player())
    bridge.PentosPlayer.init(proxy)

    jmove = bridge.PentosPlayer.play(proxy, FakeJBuilding([(0, 0)], "FACTORY"), FakeJLand(land))
    assert jmove.accept is True
    assert jmove.location == FakeJCell(4, 4)


def test_proxy_play_rejects_when_nothing_fits(board, fake_java):
    land = board(["fffff"] * 5)
    proxy = SimpleNamespace(engine=Player())
    jmove = bridge.PentosPlayer.play(proxy, FakeJBuilding([(0, 0)], "RESIDENCE"), FakeJLand(land))
    assert jmove.accept is False
    assert proxy.engine.road_cells == frozenset()


def test_pentos_player_in_jvm(pentos_jar):
    import jpype

    bridge.start_jvm(pentos_jar)
    assert jpype.isJVMStarted()
    p = bridge.PentosPlayer()
    p.init()
    assert isinstance(p.engine, Player)
