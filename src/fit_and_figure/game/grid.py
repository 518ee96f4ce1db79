from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..utils.logger import get_logger
from .shapes import Coordinate, Shape

if TYPE_CHECKING:
    from .core import CompletionResult


LOGGER = get_logger(__name__)

CellRows = List[List[Optional[int]]]


class PlacementStatus(str, Enum):
    PLACED = "placed"
    OUT_OF_BOUNDS = "out_of_bounds"
    OVERLAP = "overlap"
    INVALID_SHAPE_STATE = "invalid_shape_state"


_STATUS_MESSAGES = {
    PlacementStatus.PLACED: "Shape placed.",
    PlacementStatus.OUT_OF_BOUNDS: "Cannot place here: the shape goes past the edge of the grid.",
    PlacementStatus.OVERLAP: "Cannot place here: the shape overlaps another shape.",
    PlacementStatus.INVALID_SHAPE_STATE: "That shape cannot be placed right now.",
}


@dataclass
class PlacementResult:
    status: PlacementStatus
    shape_id: Optional[int] = None
    anchor: Optional[Coordinate] = None
    cells: Tuple[Coordinate, ...] = ()
    # Set when the placement filled the grid and triggered a completion check
    completion: Optional["CompletionResult"] = None

    @property
    def ok(self) -> bool:
        return self.status == PlacementStatus.PLACED

    @property
    def message(self) -> str:
        return _STATUS_MESSAGES[self.status]


class GameGrid:
    """Square board of integer cells.

    Values live in ``values``; ``filled`` marks which cells hold one, so any
    integer (0 included) is a legal cell value.
    """

    def __init__(self, size: int) -> None:
        if int(size) <= 0:
            raise ValueError(f"Grid size must be positive, got {size}")
        self.size = int(size)
        self.values = np.zeros((self.size, self.size), dtype=np.int64)
        self.filled = np.zeros((self.size, self.size), dtype=np.bool_)

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Optional[int]]]) -> "GameGrid":
        """Build a grid from nested rows, ``None`` meaning empty."""
        grid = cls(len(rows))
        for r, row in enumerate(rows):
            if len(row) != grid.size:
                raise ValueError(f"Row {r} has {len(row)} cells, expected {grid.size}")
            for c, value in enumerate(row):
                if value is not None:
                    grid.values[r, c] = int(value)
                    grid.filled[r, c] = True
        return grid

    def reset(self) -> None:
        self.values.fill(0)
        self.filled.fill(False)

    def is_inside(self, row: int, col: int) -> bool:
        return 0 <= row < self.size and 0 <= col < self.size

    def is_empty(self, row: int, col: int) -> bool:
        return self.is_inside(row, col) and not bool(self.filled[row, col])

    def value_at(self, row: int, col: int) -> Optional[int]:
        if not self.is_inside(row, col) or not self.filled[row, col]:
            return None
        return int(self.values[row, col])

    def values_at(self, cells: Iterable[Coordinate]) -> List[int]:
        """Values of the filled cells among ``cells``; empty or outside cells are skipped."""
        out: List[int] = []
        for row, col in cells:
            value = self.value_at(row, col)
            if value is not None:
                out.append(value)
        return out

    def check_cells(self, cells: Sequence[Coordinate]) -> PlacementStatus:
        if any(not self.is_inside(r, c) for r, c in cells):
            return PlacementStatus.OUT_OF_BOUNDS
        if any(self.filled[r, c] for r, c in cells):
            return PlacementStatus.OVERLAP
        return PlacementStatus.PLACED

    def can_place(self, cells: Sequence[Coordinate]) -> bool:
        return self.check_cells(cells) == PlacementStatus.PLACED

    def place_shape(self, shape: Shape, row: int, col: int) -> PlacementResult:
        """Write every cell of ``shape`` anchored at (row, col), or nothing at all."""
        if shape.is_placed:
            return PlacementResult(PlacementStatus.INVALID_SHAPE_STATE, shape_id=shape.id)
        cells = shape.cells_at(row, col)
        status = self.check_cells(cells)
        if status != PlacementStatus.PLACED:
            LOGGER.debug("Rejected shape %d at %s: %s", shape.id, (row, col), status.value)
            return PlacementResult(status, shape_id=shape.id, anchor=(row, col))

        for (r, c), value in zip(cells, shape.values):
            self.values[r, c] = value
            self.filled[r, c] = True
        shape.mark_placed((row, col), cells)
        LOGGER.debug("Placed shape %d at %s covering %s", shape.id, (row, col), cells)
        return PlacementResult(
            PlacementStatus.PLACED, shape_id=shape.id, anchor=(row, col), cells=tuple(cells)
        )

    def remove_shape(self, shape: Shape) -> bool:
        """Clear the cells recorded when ``shape`` was placed."""
        if shape.placement is None:
            return False
        for r, c in shape.placement.cells:
            self.values[r, c] = 0
            self.filled[r, c] = False
        LOGGER.debug("Removed shape %d from %s", shape.id, shape.placement.anchor)
        shape.mark_unplaced()
        return True

    def filled_count(self) -> int:
        return int(np.count_nonzero(self.filled))

    def is_full(self) -> bool:
        return bool(np.all(self.filled))

    def to_rows(self) -> CellRows:
        return [
            [int(self.values[r, c]) if self.filled[r, c] else None for c in range(self.size)]
            for r in range(self.size)
        ]

    def clone_state(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.values.copy(), self.filled.copy()

    def copy(self) -> "GameGrid":
        new_grid = GameGrid(self.size)
        new_grid.values, new_grid.filled = self.clone_state()
        return new_grid
