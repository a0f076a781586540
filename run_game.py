#!/usr/bin/env python3
"""Play one local Pentos game and print a JSON summary.

The engine plays a seeded stream of random requests on an in-memory board
until a request cannot be placed or the turn limit is reached. Logs go to
stderr; stdout only carries the JSON result.

Examples:
    python run_game.py --seed 7
    python run_game.py --side 30 --turns 200 --set PERIMETER_PENALTY=8 --verbose
    python run_game.py --config ./configs/tuned.json

Config rules:
- Only existing UPPERCASE attributes of EngineConfig can be overridden.
- Layers: PENTOS_CONFIG_JSON env var, --json, --config, then each --set.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from typing import Any, Dict, Optional

from pentos_bot.buildings import BuildingType, RandomSequencer
from pentos_bot.config import EngineConfig, coerce_scalar, load_config
from pentos_bot.errors import ConfigError, NoCandidateError
from pentos_bot.land import DEFAULT_SIDE, CellType, Land
from pentos_bot.player import Player

logger = logging.getLogger("run_game")


def play_game(
    side: int = DEFAULT_SIDE,
    seed: Optional[int] = None,
    turns: Optional[int] = None,
    residence_ratio: float = 0.5,
    config: Optional[EngineConfig] = None,
) -> Dict[str, Any]:
    land = Land(side)
    sequencer = RandomSequencer(seed, residence_ratio)
    player = Player(config)
    player.init()

    built = {BuildingType.RESIDENCE: 0, BuildingType.FACTORY: 0}
    played = 0
    stopped_by = "turn_limit"
    t0 = time.perf_counter()
    while turns is None or played < turns:
        request = sequencer.next()
        try:
            move = player.play(request, land)
        except NoCandidateError:
            stopped_by = "no_candidate"
            break
        land.apply(move)
        built[request.type] += 1
        played += 1
    elapsed = time.perf_counter() - t0

    logger.info("game over after %d turns (%s) in %.2fs", played, stopped_by, elapsed)
    return {
        "side": side,
        "seed": seed,
        "turns": played,
        "stopped_by": stopped_by,
        "residences": built[BuildingType.RESIDENCE],
        "factories": built[BuildingType.FACTORY],
        "road": land.count(CellType.ROAD),
        "water": land.count(CellType.WATER),
        "park": land.count(CellType.PARK),
        "frontier": player.frontier,
        "seconds": round(elapsed, 3),
    }


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--side", type=int, default=DEFAULT_SIDE)
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--turns", type=int, default=None, help="Stop after this many turns")
    ap.add_argument("--residence-ratio", type=float, default=0.5)
    ap.add_argument("--config", type=str, default=None, help="Path to JSON config file")
    ap.add_argument("--json", type=str, default=None, help="Inline JSON object of overrides")
    ap.add_argument(
        "--set",
        action="append",
        default=[],
        help="Override a single key, e.g. --set PACKING_FACTOR_MULTIPLE=12 (repeatable)",
    )
    ap.add_argument("--verbose", action="store_true", help="Log every candidate sweep")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        cfg = load_config(args.config, args.json)
        for item in args.set:
            if "=" not in item:
                raise SystemExit(f"Invalid --set '{item}', expected KEY=VALUE")
            k, v = item.split("=", 1)
            cfg[k.strip()] = coerce_scalar(v)
        config = EngineConfig(cfg)
    except ConfigError as e:
        raise SystemExit(str(e))

    try:
        summary = play_game(args.side, args.seed, args.turns, args.residence_ratio, config)
    except ValueError as e:
        raise SystemExit(str(e))

    print(json.dumps(summary))


if __name__ == "__main__":
    main()
