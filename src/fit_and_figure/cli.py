from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from fit_and_figure.game import (
    LEVELS,
    GameConfig,
    GameState,
    LevelNotFoundError,
    ProgressTracker,
    get_level,
    level_ids,
    verify_level,
)
from fit_and_figure.utils.logger import configure_logging
from fit_and_figure.visualization.terminal_play import run as play_level
from fit_and_figure.visualization.text import format_best_times


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="fit-and-figure", description="Fit & Figure puzzle engine")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("levels", help="list the built-in levels")

    verify = sub.add_parser("verify", help="replay canonical solutions")
    verify.add_argument("--level", type=int, default=None, help="only this level id")

    play = sub.add_parser("play", help="play in the terminal")
    play.add_argument("--level", type=int, default=1)

    rand = sub.add_parser("random", help="run the random agent")
    rand.add_argument("--level", type=int, default=1)
    rand.add_argument("--episodes", type=int, default=20)
    rand.add_argument("--seed", type=int, default=None)
    return p


def cmd_levels() -> int:
    for level in LEVELS:
        print(f"{level.id}: {level.name}  {level.size}x{level.size}  "
              f"{len(level.zones)} zones, {len(level.shapes)} shapes")
        if level.hint:
            print(f"   {level.hint}")
    return 0


def cmd_verify(level_id: Optional[int]) -> int:
    targets = [get_level(level_id)] if level_id is not None else list(LEVELS)
    failures = 0
    for level in targets:
        result = verify_level(level)
        status = "OK" if result.solved else "FAILED"
        print(f"Level {level.id}: {status} - {result.message}")
        if not result.solved:
            failures += 1
    return 1 if failures else 0


def cmd_play(start_level: int, config: GameConfig) -> int:
    tracker = ProgressTracker(points_per_level=config.points_per_level)
    ids = level_ids()
    position = ids.index(get_level(start_level).id)
    while position < len(ids):
        engine = play_level(get_level(ids[position]), tracker=tracker)
        if engine.state != GameState.SOLVED:
            break
        position += 1
    print(format_best_times(tracker))
    return 0


def cmd_random(level_id: int, episodes: int, seed: Optional[int]) -> int:
    from fit_and_figure.rl.random_agent import run_random

    stats = run_random(level_id=level_id, episodes=episodes, seed=seed)
    print(f"Level {level_id}: {stats['solved']}/{stats['episodes']} solved, "
          f"{stats['failed']} failed, {stats['stuck']} stuck, "
          f"mean reward {stats['mean_reward']:.2f}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.WARNING)
    try:
        if args.command == "levels":
            return cmd_levels()
        if args.command == "verify":
            return cmd_verify(args.level)
        if args.command == "play":
            return cmd_play(args.level, GameConfig(level_id=args.level))
        if args.command == "random":
            return cmd_random(args.level, args.episodes, args.seed)
    except LevelNotFoundError as exc:
        print(f"Unknown level {exc.args[0]}; available: {level_ids()}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
