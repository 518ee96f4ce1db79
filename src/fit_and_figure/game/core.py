from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..utils.logger import get_logger
from .grid import GameGrid, PlacementResult, PlacementStatus
from .levels import LevelDefinition
from .progress import ProgressTracker
from .shapes import Coordinate, Shape
from .zones import Zone, create_zone


LOGGER = get_logger(__name__)


class GameState(str, Enum):
    LOADING = "loading"
    IN_PROGRESS = "in_progress"
    SOLVED = "solved"
    FAILED_ATTEMPT = "failed_attempt"


@dataclass
class GameConfig:
    """Settings shared by the environment and the command line front end."""
    level_id: int = 1
    max_episode_steps: int = 100
    invalid_action_penalty: float = -0.1
    cell_reward: float = 0.05
    solved_reward: float = 10.0
    failed_penalty: float = -1.0
    points_per_level: int = 100


@dataclass(frozen=True)
class CompletionResult:
    complete: bool
    solved: bool
    violated_zones: Tuple[Zone, ...] = ()
    state: GameState = GameState.IN_PROGRESS

    @property
    def message(self) -> str:
        if self.solved:
            return "Congratulations! Every constraint is satisfied."
        if not self.complete:
            return "The grid is not full yet."
        if self.violated_zones:
            labels = ", ".join(zone.label for zone in self.violated_zones)
            return f"Incorrect solution. Problem with: {labels}"
        return "Incorrect solution. Check every constraint."


class GridValidator:
    """Judges a grid against a fixed set of zones."""

    def __init__(self, zones: Sequence[Zone]) -> None:
        self.zones: Tuple[Zone, ...] = tuple(zones)

    def validate_all(self, grid: GameGrid) -> bool:
        return all(zone.validate(grid) for zone in self.zones)

    def invalid_zones(self, grid: GameGrid) -> List[Zone]:
        return [zone for zone in self.zones if not zone.validate(grid)]

    def check(self, grid: GameGrid) -> CompletionResult:
        # Partial grids are never judged, whatever the zones say
        if not grid.is_full():
            return CompletionResult(complete=False, solved=False)
        invalid = self.invalid_zones(grid)
        if not invalid:
            return CompletionResult(complete=True, solved=True, state=GameState.SOLVED)
        return CompletionResult(
            complete=True,
            solved=False,
            violated_zones=tuple(invalid),
            state=GameState.FAILED_ATTEMPT,
        )


class PuzzleEngine:
    """One play session: a loaded level, its grid, shapes and zones."""

    def __init__(
        self,
        tracker: Optional[ProgressTracker] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.tracker = tracker
        self.clock = clock
        self.level: Optional[LevelDefinition] = None
        self.grid: Optional[GameGrid] = None
        self.shapes: Dict[int, Shape] = {}
        self.zones: Tuple[Zone, ...] = ()
        self.validator = GridValidator(())
        self.state = GameState.LOADING
        self.last_result: Optional[CompletionResult] = None
        self._zone_by_cell: Dict[Coordinate, Zone] = {}
        self._started_at: Optional[float] = None
        self._finished_at: Optional[float] = None

    # ---------- Session lifecycle ----------
    def load_level(self, level: LevelDefinition) -> None:
        self.state = GameState.LOADING
        self.level = level
        # Zones are immutable, so they are built once and reused by every check
        self.zones = tuple(create_zone(spec.kind, spec.cells, spec.target) for spec in level.zones)
        self.validator = GridValidator(self.zones)
        self._zone_by_cell = {cell: zone for zone in self.zones for cell in zone.cells}
        self.grid = GameGrid(level.size)
        self.shapes = {spec.id: Shape(spec.id, spec.cells, spec.values) for spec in level.shapes}
        self.reset()
        LOGGER.info(
            "Loaded level %d (%dx%d, %d zones, %d shapes)",
            level.id, level.size, level.size, len(self.zones), len(self.shapes),
        )

    def reset(self) -> None:
        """Restart the current level with an empty grid and unrotated shapes."""
        if self.level is None or self.grid is None:
            return
        self.grid.reset()
        for shape in self.shapes.values():
            shape.reset()
        self.state = GameState.IN_PROGRESS
        self.last_result = None
        self._started_at = self.clock()
        self._finished_at = None

    def elapsed_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        end = self._finished_at if self._finished_at is not None else self.clock()
        return max(0.0, end - self._started_at)

    # ---------- Queries ----------
    def get_shape(self, shape_id: int) -> Optional[Shape]:
        return self.shapes.get(shape_id)

    def unplaced_shapes(self) -> List[Shape]:
        return [shape for shape in self.shapes.values() if not shape.is_placed]

    def placed_shapes(self) -> List[Shape]:
        return [shape for shape in self.shapes.values() if shape.is_placed]

    def find_shape_at(self, row: int, col: int) -> Optional[Shape]:
        for shape in self.shapes.values():
            if shape.occupies(row, col):
                return shape
        return None

    def get_zone_at(self, row: int, col: int) -> Optional[Zone]:
        return self._zone_by_cell.get((row, col))

    # ---------- Player moves ----------
    def _accepts_moves(self) -> bool:
        return self.grid is not None and self.state == GameState.IN_PROGRESS

    def rotate_shape(self, shape_id: int) -> bool:
        shape = self.get_shape(shape_id)
        if shape is None or not self._accepts_moves():
            LOGGER.debug("Ignored rotate of shape %s in state %s", shape_id, self.state.value)
            return False
        rotated = shape.rotate()
        if rotated:
            LOGGER.debug("Rotated shape %d to %d degrees", shape.id, shape.rotation)
        return rotated

    def place_shape(self, shape_id: int, row: int, col: int) -> PlacementResult:
        shape = self.get_shape(shape_id)
        if shape is None or self.grid is None or not self._accepts_moves():
            return PlacementResult(PlacementStatus.INVALID_SHAPE_STATE, shape_id=shape_id)
        result = self.grid.place_shape(shape, row, col)
        if result.ok and self.grid.is_full():
            result.completion = self.check_completion()
        return result

    def remove_shape(self, shape_id: int) -> bool:
        shape = self.get_shape(shape_id)
        if shape is None or self.grid is None or not self._accepts_moves():
            return False
        return self.grid.remove_shape(shape)

    # ---------- Judging ----------
    def check_completion(self, grid: Optional[GameGrid] = None) -> CompletionResult:
        """Judge ``grid``, or the live grid when none is given.

        An explicit grid is only evaluated. The live grid also drives the
        session state and reports a solve to the tracker.
        """
        if grid is not None:
            return self.validator.check(grid)
        if self.grid is None or self.level is None:
            return CompletionResult(complete=False, solved=False, state=GameState.LOADING)

        result = self.validator.check(self.grid)
        if self.state != GameState.IN_PROGRESS:
            return result

        if result.solved:
            self.state = GameState.SOLVED
            self._finished_at = self.clock()
            elapsed = self.elapsed_seconds()
            LOGGER.info("Level %d solved in %.1fs", self.level.id, elapsed)
            if self.tracker is not None:
                self.tracker.record_completion(self.level.id, elapsed)
        elif result.complete:
            # A failed attempt leaves the grid as is; the player keeps editing
            LOGGER.info(
                "Level %d: grid full but %d zone(s) violated: %s",
                self.level.id,
                len(result.violated_zones),
                ", ".join(zone.label for zone in result.violated_zones),
            )
        self.last_result = result
        return result

    def apply_solution(self) -> CompletionResult:
        """Restart the level and replay its canonical solution."""
        if self.level is None:
            return self.check_completion()
        if not self.level.solution:
            LOGGER.warning("Level %d has no canonical solution", self.level.id)
            return self.check_completion()

        self.reset()
        completion: Optional[CompletionResult] = None
        for step in self.level.solution:
            shape = self.shapes[step.shape_id]
            for _ in range(4):
                if shape.rotation == step.rotation:
                    break
                self.rotate_shape(shape.id)
            result = self.place_shape(shape.id, *step.position)
            if not result.ok:
                LOGGER.warning(
                    "Solution step for shape %d at %s rejected: %s",
                    step.shape_id, step.position, result.status.value,
                )
            completion = result.completion or completion
        return completion or self.check_completion()


def verify_level(level: LevelDefinition) -> CompletionResult:
    """Replay a level's canonical solution on a fresh engine."""
    engine = PuzzleEngine()
    engine.load_level(level)
    return engine.apply_solution()
