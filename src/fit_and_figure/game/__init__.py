"""Puzzle engine for Fit & Figure.

Exports the engine and its building blocks:
- GameGrid: square board with atomic shape placement and removal
- Shape: value-carrying polyomino with clockwise rotation
- Zone / create_zone: equal, distinct and summative constraints
- PuzzleEngine / GridValidator: session state and completion checks
- LEVELS / get_level: the built-in level catalog
- ProgressTracker: completed levels and best times
"""

from .core import CompletionResult, GameConfig, GameState, GridValidator, PuzzleEngine, verify_level
from .errors import FitAndFigureError, LevelDefinitionError, LevelNotFoundError
from .grid import GameGrid, PlacementResult, PlacementStatus
from .levels import LEVELS, LevelDefinition, get_level, level_from_dict, level_ids
from .progress import BestTime, ProgressTracker
from .shapes import Shape, rotate_offsets_cw, rotated_offsets
from .zones import Zone, ZoneType, create_zone

__all__ = [
    "BestTime",
    "CompletionResult",
    "FitAndFigureError",
    "GameConfig",
    "GameGrid",
    "GameState",
    "GridValidator",
    "LEVELS",
    "LevelDefinition",
    "LevelDefinitionError",
    "LevelNotFoundError",
    "PlacementResult",
    "PlacementStatus",
    "ProgressTracker",
    "PuzzleEngine",
    "Shape",
    "Zone",
    "ZoneType",
    "create_zone",
    "get_level",
    "level_from_dict",
    "level_ids",
    "rotate_offsets_cw",
    "rotated_offsets",
    "verify_level",
]
