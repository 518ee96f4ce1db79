from __future__ import annotations

import sys
from typing import Callable, Dict, List, Optional, TextIO, Tuple

from fit_and_figure.game import GameState, LevelDefinition, ProgressTracker, PuzzleEngine
from fit_and_figure.visualization.text import format_grid, format_shape, format_zone_map


HELP = """Commands:
  show                 grid and zones
  shapes               shapes still to place
  rotate ID            turn an unplaced shape 90° clockwise
  place ID ROW COL     put shape ID with its top-left offset at (ROW, COL)
  remove ID            take shape ID off the grid
  take ROW COL         take off whatever shape covers (ROW, COL)
  spin ROW COL         take off the shape at (ROW, COL) and rotate it
  check                judge the grid
  hint                 show the level hint
  restart              start the level again
  quit                 leave"""


def _show(engine: PuzzleEngine, out: TextIO) -> None:
    assert engine.grid is not None
    print(format_grid(engine.grid), file=out)
    print(format_zone_map(engine), file=out)


def _shapes(engine: PuzzleEngine, out: TextIO) -> None:
    pending = engine.unplaced_shapes()
    if not pending:
        print("All shapes are on the grid.", file=out)
    for shape in pending:
        print(format_shape(shape), file=out)


def _rotate(engine: PuzzleEngine, args: List[int], out: TextIO) -> None:
    if not engine.rotate_shape(args[0]):
        print(f"Shape {args[0]} cannot be rotated (unknown or already placed).", file=out)
        return
    shape = engine.get_shape(args[0])
    assert shape is not None
    print(format_shape(shape), file=out)


def _place(engine: PuzzleEngine, args: List[int], out: TextIO) -> None:
    result = engine.place_shape(args[0], args[1], args[2])
    print(result.message, file=out)
    if result.ok:
        _show(engine, out)
    if result.completion is not None:
        print(result.completion.message, file=out)


def _remove(engine: PuzzleEngine, args: List[int], out: TextIO) -> None:
    if engine.remove_shape(args[0]):
        print(f"Shape {args[0]} removed.", file=out)
    else:
        print(f"Shape {args[0]} is not on the grid.", file=out)


def _take(engine: PuzzleEngine, args: List[int], out: TextIO) -> None:
    shape = engine.find_shape_at(args[0], args[1])
    if shape is None:
        print(f"No shape at {(args[0], args[1])}.", file=out)
        return
    _remove(engine, [shape.id], out)


def _spin(engine: PuzzleEngine, args: List[int], out: TextIO) -> None:
    shape = engine.find_shape_at(args[0], args[1])
    if shape is None:
        print(f"No shape at {(args[0], args[1])}.", file=out)
        return
    engine.remove_shape(shape.id)
    _rotate(engine, [shape.id], out)


def _check(engine: PuzzleEngine, out: TextIO) -> None:
    print(engine.check_completion().message, file=out)


def _hint(engine: PuzzleEngine, out: TextIO) -> None:
    hint = engine.level.hint if engine.level is not None else None
    print(hint or "No hint for this level.", file=out)


def _restart(engine: PuzzleEngine, out: TextIO) -> None:
    engine.reset()
    _show(engine, out)


# command -> (number of integer arguments, handler)
COMMANDS: Dict[str, Tuple[int, Callable[..., None]]] = {
    "show": (0, _show),
    "shapes": (0, _shapes),
    "rotate": (1, _rotate),
    "place": (3, _place),
    "remove": (1, _remove),
    "take": (2, _take),
    "spin": (2, _spin),
    "check": (0, _check),
    "hint": (0, _hint),
    "restart": (0, _restart),
}


def run(
    level: LevelDefinition,
    tracker: Optional[ProgressTracker] = None,
    input_fn: Callable[[str], str] = input,
    stream: Optional[TextIO] = None,
) -> PuzzleEngine:
    """Play one level from line commands until it is solved or the player quits."""
    out = stream or sys.stdout
    engine = PuzzleEngine(tracker=tracker)
    engine.load_level(level)
    print(f"=== {level.name} ({level.size}x{level.size}) ===", file=out)
    _show(engine, out)
    _shapes(engine, out)
    print("Type 'help' for commands.", file=out)

    while engine.state != GameState.SOLVED:
        try:
            line = input_fn("> ")
        except EOFError:
            break
        parts = line.split()
        if not parts:
            continue
        command, raw_args = parts[0].lower(), parts[1:]
        if command in ("quit", "exit", "q"):
            break
        if command == "help":
            print(HELP, file=out)
            continue
        if command not in COMMANDS:
            print(f"Unknown command '{command}'. Type 'help'.", file=out)
            continue

        arity, handler = COMMANDS[command]
        try:
            args = [int(arg) for arg in raw_args]
        except ValueError:
            print("Arguments must be integers.", file=out)
            continue
        if len(args) != arity:
            print(f"'{command}' takes {arity} argument(s).", file=out)
            continue
        if arity:
            handler(engine, args, out)
        else:
            handler(engine, out)

    if engine.state == GameState.SOLVED:
        print(f"Solved in {engine.elapsed_seconds():.1f}s.", file=out)
    return engine
