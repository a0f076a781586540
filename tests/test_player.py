"""Tests for candidate generation and move selection."""

import logging

import pytest

from pentos_bot.buildings import Building, BuildingType, RandomSequencer, factory
from pentos_bot.config import EngineConfig
from pentos_bot.errors import NoCandidateError
from pentos_bot.geometry import Cell
from pentos_bot.land import Land
from pentos_bot.player import Player, ScoredMove

EMPTY_5 = ["....."] * 5


def test_higher_score_wins(player, board, monkeypatch):
    def fake_score(move, land, registry, config):
        return 150 if move.location == Cell(2, 2) else 100

    monkeypatch.setattr("pentos_bot.player.score_move", fake_score)
    move = player.play(factory(1, 1), board(EMPTY_5))
    assert move.accept
    assert move.location == Cell(2, 2)


def test_ties_go_to_first_in_scan_order(player, board, monkeypatch):
    monkeypatch.setattr("pentos_bot.player.score_move", lambda move, land, registry, config: 100)
    assert player.play(factory(1, 1), board(EMPTY_5)).location == Cell(4, 4)
    assert player.play(single_residence(), board(EMPTY_5)).location == Cell(0, 0)


def test_select_keeps_first_maximum():
    a, b, c = (object() for _ in range(3))
    picked = Player._select([ScoredMove(a, 1), ScoredMove(b, 7), ScoredMove(c, 7)])
    assert picked.move is b


def single_residence():
    return Building(frozenset({Cell(0, 0)}), BuildingType.RESIDENCE)


def test_sweep_direction_by_type(board):
    player = Player(EngineConfig(MIN_POTENTIAL_MOVES=0))
    player.init()
    land = board(["......"] * 6)
    assert player.play(factory(1, 1), land).location.i == 5
    assert player.play(single_residence(), land).location.i == 0


def test_residence_sweep_runs_past_frontier(board, monkeypatch):
    rows = []

    def spy(self, i, j, request, land, potential):
        rows.append(i)
        return original(self, i, j, request, land, potential)

    original = Player._evaluate_moves_at
    monkeypatch.setattr(Player, "_evaluate_moves_at", spy)

    player = Player(EngineConfig(MIN_POTENTIAL_MOVES=1))
    player.init()
    player._frontier = 3
    player.play(single_residence(), board(["......"] * 6))
    assert max(rows) == 3


def test_amenity_variant_is_a_candidate(player, board, monkeypatch):
    monkeypatch.setattr(
        "pentos_bot.player.score_move",
        lambda move, land, registry, config: 10 if move.water and move.park else 0,
    )
    move = player.play(single_residence(), board(["........"] * 8))
    assert len(move.water) == 4
    assert len(move.park) == 4


def test_no_candidate_raises_and_commits_nothing(player, board, caplog):
    land = board(["fffff"] * 5)
    with caplog.at_level(logging.WARNING, logger="pentos_bot.player"):
        with pytest.raises(NoCandidateError):
            player.play(factory(1, 1), land)
    assert "no legal placement" in caplog.text
    assert player.road_cells == frozenset()
    assert player.frontier == 0


def test_enclosed_space_is_not_a_candidate(player, board):
    land = board([
        "fffff",
        "f...f",
        "f...f",
        "f...f",
        "fffff",
    ])
    with pytest.raises(NoCandidateError):
        player.play(factory(1, 1), land)


def test_road_is_laid_to_interior_placement(player, board):
    land = board([
        "ff.ff",
        "ff.ff",
        "ff.ff",
        "ff.ff",
        "fffff",
    ])
    move = player.play(factory(1, 1), land)
    assert move.location == Cell(3, 2)
    assert move.road == frozenset({Cell(2, 2), Cell(1, 2), Cell(0, 2)})
    assert player.road_cells == move.road


def test_init_resets_state(player, board):
    land = board(["......"] * 6)
    player.play(single_residence(), land)
    player._road_cells.add(Cell(1, 1))
    player.init()
    assert player.road_cells == frozenset()
    assert player.frontier == 0
    assert player.turn == 0


def test_seeded_game_invariants():
    land = Land(14)
    player = Player()
    player.init()
    sequencer = RandomSequencer(seed=5)

    registry = frozenset()
    frontier = 0
    for _ in range(25):
        request = sequencer.next()
        try:
            move = player.play(request, land)
        except NoCandidateError:
            break

        cells = [move.footprint(), move.road, move.water, move.park]
        for k, a in enumerate(cells):
            assert all(land.unoccupied(c) for c in a)
            for b in cells[k + 1:]:
                assert not a & b

        assert player.road_cells >= registry | move.road
        registry = player.road_cells
        assert 0 <= player.frontier <= land.side - 1
        assert player.frontier >= frontier
        if request.type == BuildingType.RESIDENCE:
            assert player.frontier >= min(move.location.i, land.side - 1)
        frontier = player.frontier

        land.apply(move)
