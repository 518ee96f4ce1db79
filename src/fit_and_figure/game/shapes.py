from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple


Coordinate = Tuple[int, int]

ROTATION_STEP = 90
FULL_TURN = 360


def normalize_offsets(offsets: Sequence[Coordinate]) -> List[Coordinate]:
    """Shift offsets so that the smallest row and column are both 0."""
    min_row = min(r for r, _ in offsets)
    min_col = min(c for _, c in offsets)
    return [(r - min_row, c - min_col) for r, c in offsets]


def rotate_offsets_cw(offsets: Sequence[Coordinate]) -> List[Coordinate]:
    """Rotate 90 degrees clockwise: (r, c) -> (c, max_row - r).

    Index i of the result is the image of index i of the input, so values
    paired by index keep following their cell.
    """
    max_row = max(r for r, _ in offsets)
    return normalize_offsets([(c, max_row - r) for r, c in offsets])


def rotated_offsets(offsets: Sequence[Coordinate], quarter_turns: int) -> List[Coordinate]:
    result = list(offsets)
    for _ in range(quarter_turns % 4):
        result = rotate_offsets_cw(result)
    return result


@dataclass(frozen=True)
class Placement:
    """Where a shape was put, captured at placement time."""

    anchor: Coordinate
    cells: Tuple[Coordinate, ...]


class Shape:
    """A placeable polyomino whose cells each carry an integer value."""

    def __init__(self, shape_id: int, offsets: Sequence[Coordinate], values: Sequence[int]) -> None:
        if not offsets:
            raise ValueError(f"Shape {shape_id} has no cells")
        if len(offsets) != len(values):
            raise ValueError(
                f"Shape {shape_id}: {len(offsets)} cells but {len(values)} values"
            )
        self.id = int(shape_id)
        self._initial_offsets: Tuple[Coordinate, ...] = tuple(
            normalize_offsets([(int(r), int(c)) for r, c in offsets])
        )
        self.values: Tuple[int, ...] = tuple(int(v) for v in values)
        self.offsets: List[Coordinate] = list(self._initial_offsets)
        self.rotation = 0
        self.placement: Optional[Placement] = None

    def __repr__(self) -> str:
        state = f"placed@{self.placement.anchor}" if self.placement else "unplaced"
        return f"Shape(id={self.id}, rotation={self.rotation}, {state})"

    @property
    def is_placed(self) -> bool:
        return self.placement is not None

    @property
    def anchor(self) -> Optional[Coordinate]:
        return self.placement.anchor if self.placement else None

    @property
    def quarter_turns(self) -> int:
        return self.rotation // ROTATION_STEP

    def rotate(self) -> bool:
        """Turn the shape 90 degrees clockwise; refused while placed."""
        if self.is_placed:
            return False
        self.offsets = rotate_offsets_cw(self.offsets)
        self.rotation = (self.rotation + ROTATION_STEP) % FULL_TURN
        return True

    def offsets_for(self, quarter_turns: int) -> List[Coordinate]:
        """Offsets at an absolute orientation, without touching this shape."""
        return rotated_offsets(self._initial_offsets, quarter_turns)

    def cells_at(self, row: int, col: int) -> List[Coordinate]:
        return [(row + r, col + c) for r, c in self.offsets]

    def pairs(self) -> List[Tuple[Coordinate, int]]:
        return list(zip(self.offsets, self.values))

    def bounding_box(self) -> Tuple[int, int]:
        """(height, width) at the current rotation."""
        return (
            max(r for r, _ in self.offsets) + 1,
            max(c for _, c in self.offsets) + 1,
        )

    def occupies(self, row: int, col: int) -> bool:
        return self.placement is not None and (row, col) in self.placement.cells

    def mark_placed(self, anchor: Coordinate, cells: Sequence[Coordinate]) -> None:
        self.placement = Placement(anchor=anchor, cells=tuple(cells))

    def mark_unplaced(self) -> None:
        self.placement = None

    def reset(self) -> None:
        self.offsets = list(self._initial_offsets)
        self.rotation = 0
        self.placement = None
