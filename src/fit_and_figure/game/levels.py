from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from .errors import LevelDefinitionError, LevelNotFoundError
from .shapes import Coordinate
from .zones import ZoneType, parse_zone_type


VALID_ROTATIONS = (0, 90, 180, 270)


@dataclass(frozen=True)
class ZoneSpec:
    kind: str
    cells: Tuple[Coordinate, ...]
    target: Optional[int] = None


@dataclass(frozen=True)
class ShapeSpec:
    id: int
    cells: Tuple[Coordinate, ...]
    values: Tuple[int, ...]


@dataclass(frozen=True)
class SolutionStep:
    shape_id: int
    position: Coordinate
    rotation: int = 0


@dataclass(frozen=True)
class LevelDefinition:
    id: int
    name: str
    size: int
    zones: Tuple[ZoneSpec, ...]
    shapes: Tuple[ShapeSpec, ...]
    solution: Tuple[SolutionStep, ...] = ()
    hint: Optional[str] = None

    @property
    def cell_count(self) -> int:
        return self.size * self.size


def _coord(raw: Any, where: str) -> Coordinate:
    try:
        row, col = raw
        return int(row), int(col)
    except (TypeError, ValueError) as exc:
        raise LevelDefinitionError(f"{where}: expected a (row, col) pair, got {raw!r}") from exc


def _int(raw: Any, where: str, what: str) -> int:
    if isinstance(raw, bool):
        raise LevelDefinitionError(f"{where}: {what} must be an integer, got {raw!r}")
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise LevelDefinitionError(f"{where}: {what} must be an integer, got {raw!r}") from exc


def _entry(raw: Any, where: str) -> Mapping[str, Any]:
    if not isinstance(raw, Mapping):
        raise LevelDefinitionError(f"{where}: expected a mapping, got {raw!r}")
    return raw


def _coords(raw: Any, where: str) -> Tuple[Coordinate, ...]:
    if not raw:
        raise LevelDefinitionError(f"{where}: no cells")
    cells = tuple(_coord(item, where) for item in raw)
    if len(set(cells)) != len(cells):
        raise LevelDefinitionError(f"{where}: duplicate cells")
    return cells


def _parse_zones(raw_zones: Sequence[Mapping[str, Any]], size: int) -> Tuple[ZoneSpec, ...]:
    zones: List[ZoneSpec] = []
    owner: Dict[Coordinate, int] = {}
    for idx, raw in enumerate(raw_zones):
        where = f"zone {idx}"
        raw = _entry(raw, where)
        kind = str(raw.get("type", "none"))
        cells = _coords(raw.get("cells"), where)
        for row, col in cells:
            if not (0 <= row < size and 0 <= col < size):
                raise LevelDefinitionError(f"{where}: cell {(row, col)} is outside a {size}x{size} grid")
            if (row, col) in owner:
                raise LevelDefinitionError(
                    f"{where}: cell {(row, col)} already belongs to zone {owner[(row, col)]}"
                )
            owner[(row, col)] = idx

        target = raw.get("target")
        if parse_zone_type(kind) == ZoneType.SUMMATIVE:
            if isinstance(target, bool) or not isinstance(target, int):
                raise LevelDefinitionError(f"{where}: summative zone needs an integer target")
        else:
            target = None
        zones.append(ZoneSpec(kind=kind, cells=cells, target=target))
    return tuple(zones)


def _parse_shapes(raw_shapes: Sequence[Mapping[str, Any]]) -> Tuple[ShapeSpec, ...]:
    shapes: List[ShapeSpec] = []
    seen: Set[int] = set()
    for idx, raw in enumerate(raw_shapes):
        raw = _entry(raw, f"shape {idx}")
        try:
            shape_id = int(raw["id"])
        except (KeyError, TypeError, ValueError) as exc:
            raise LevelDefinitionError(f"shape {idx}: missing or invalid id") from exc
        where = f"shape {shape_id}"
        if shape_id in seen:
            raise LevelDefinitionError(f"{where}: duplicate id")
        seen.add(shape_id)

        cells = _coords(raw.get("cells"), where)
        if min(r for r, _ in cells) != 0 or min(c for _, c in cells) != 0:
            raise LevelDefinitionError(f"{where}: offsets must start at row 0 and column 0")
        values = tuple(_int(v, where, "value") for v in raw.get("values") or ())
        if len(values) != len(cells):
            raise LevelDefinitionError(f"{where}: {len(cells)} cells but {len(values)} values")
        shapes.append(ShapeSpec(id=shape_id, cells=cells, values=values))
    return tuple(shapes)


def _parse_solution(
    raw_steps: Sequence[Mapping[str, Any]], shapes: Sequence[ShapeSpec]
) -> Tuple[SolutionStep, ...]:
    known = {shape.id for shape in shapes}
    used: Set[int] = set()
    steps: List[SolutionStep] = []
    for idx, raw in enumerate(raw_steps):
        where = f"solution step {idx}"
        raw = _entry(raw, where)
        shape_id = _int(raw.get("shapeId", raw.get("shape_id")), where, "shape id")
        if shape_id not in known:
            raise LevelDefinitionError(f"{where}: unknown shape {shape_id}")
        if shape_id in used:
            raise LevelDefinitionError(f"{where}: shape {shape_id} is used twice")
        used.add(shape_id)
        rotation = _int(raw.get("rotation", 0), where, "rotation")
        if rotation not in VALID_ROTATIONS:
            raise LevelDefinitionError(f"{where}: rotation must be one of {VALID_ROTATIONS}")
        steps.append(
            SolutionStep(shape_id=shape_id, position=_coord(raw.get("position"), where), rotation=rotation)
        )
    return tuple(steps)


def level_from_dict(data: Mapping[str, Any]) -> LevelDefinition:
    """Parse and check a declarative level mapping (as loaded from JSON or Python)."""
    try:
        level_id = int(data["id"])
        size = int(data["size"])
    except (KeyError, TypeError, ValueError) as exc:
        raise LevelDefinitionError("level needs integer 'id' and 'size'") from exc
    if size <= 0:
        raise LevelDefinitionError(f"level {level_id}: size must be positive, got {size}")

    shapes = _parse_shapes(data.get("shapes", ()))
    if not shapes:
        raise LevelDefinitionError(f"level {level_id}: no shapes")
    return LevelDefinition(
        id=level_id,
        name=str(data.get("name", f"Level {level_id}")),
        size=size,
        zones=_parse_zones(data.get("zones", ()), size),
        shapes=shapes,
        solution=_parse_solution(data.get("solution", ()), shapes),
        hint=data.get("hint"),
    )


LEVEL_DATA: Tuple[Dict[str, Any], ...] = (
    {
        "id": 1,
        "name": "Level 1",
        "size": 3,
        "zones": [
            {"type": "equal", "cells": [[0, 1], [0, 2]]},
            {"type": "distinct", "cells": [[1, 0], [2, 0], [2, 1]]},
            {"type": "summative", "cells": [[1, 1], [1, 2], [2, 2]], "target": 8},
            {"type": "none", "cells": [[0, 0]]},
        ],
        "shapes": [
            # 2x2 square
            {"id": 1, "cells": [[0, 0], [0, 1], [1, 0], [1, 1]], "values": [2, 2, 1, 4]},
            # vertical line of 3
            {"id": 2, "cells": [[0, 0], [1, 0], [2, 0]], "values": [5, 2, 1]},
            # vertical domino, laid flat in the solution
            {"id": 3, "cells": [[0, 0], [1, 0]], "values": [3, 5]},
        ],
        "solution": [
            {"shapeId": 2, "position": [0, 0], "rotation": 0},
            {"shapeId": 1, "position": [0, 1], "rotation": 0},
            {"shapeId": 3, "position": [2, 1], "rotation": 90},
        ],
        "hint": "Blue = : same digit | Green ≠ : all different | Red Σ=8 : sum is 8",
    },
    {
        "id": 2,
        "name": "Level 2",
        "size": 4,
        "zones": [
            {"type": "equal", "cells": [[0, 0], [0, 1], [0, 2]]},
            {"type": "distinct", "cells": [[1, 1], [1, 2], [2, 2]]},
            {"type": "summative", "cells": [[2, 1], [3, 1]], "target": 6},
            {
                "type": "none",
                "cells": [[0, 3], [1, 0], [1, 3], [2, 0], [2, 3], [3, 0], [3, 2], [3, 3]],
            },
        ],
        "shapes": [
            {"id": 1, "cells": [[0, 0], [0, 1], [1, 0]], "values": [2, 2, 3]},
            {"id": 2, "cells": [[0, 0], [1, 0], [2, 0]], "values": [2, 1, 5]},
            {"id": 3, "cells": [[0, 0]], "values": [3]},
            {"id": 4, "cells": [[0, 0], [0, 1], [1, 0], [1, 1]], "values": [9, 2, 5, 4]},
            {"id": 5, "cells": [[0, 0], [0, 1], [0, 2], [0, 3]], "values": [3, 8, 2, 1]},
            {"id": 6, "cells": [[0, 0]], "values": [6]},
        ],
        "solution": [
            {"shapeId": 1, "position": [0, 0], "rotation": 0},
            {"shapeId": 2, "position": [0, 2], "rotation": 0},
            {"shapeId": 3, "position": [1, 1], "rotation": 0},
            {"shapeId": 4, "position": [2, 0], "rotation": 0},
            {"shapeId": 5, "position": [0, 3], "rotation": 90},
            {"shapeId": 6, "position": [3, 2], "rotation": 0},
        ],
        "hint": "Blue = : same digit | Green ≠ : all different | Red Σ=6 : sum is 6",
    },
    {
        "id": 3,
        "name": "Level 3",
        "size": 4,
        "zones": [
            {"type": "equal", "cells": [[0, 0], [0, 1], [0, 2], [0, 3]]},
            {"type": "distinct", "cells": [[1, 1], [1, 2], [2, 1], [2, 2]]},
            {"type": "summative", "cells": [[1, 3], [2, 3], [3, 3]], "target": 10},
            {"type": "summative", "cells": [[2, 0], [3, 0], [3, 1]], "target": 9},
            {"type": "none", "cells": [[1, 0], [3, 2]]},
        ],
        "shapes": [
            {"id": 1, "cells": [[0, 0], [0, 1], [1, 0]], "values": [4, 4, 7]},
            {"id": 2, "cells": [[0, 0], [1, 0], [2, 0], [2, 1]], "values": [5, 3, 4, 4]},
            {"id": 3, "cells": [[0, 0], [0, 1], [1, 0], [1, 1]], "values": [1, 2, 3, 4]},
            {"id": 4, "cells": [[0, 0], [0, 1], [1, 0]], "values": [2, 3, 4]},
            {"id": 5, "cells": [[0, 0], [1, 0]], "values": [2, 6]},
        ],
        "solution": [
            {"shapeId": 1, "position": [0, 0], "rotation": 0},
            {"shapeId": 2, "position": [0, 2], "rotation": 180},
            {"shapeId": 3, "position": [1, 1], "rotation": 0},
            {"shapeId": 4, "position": [2, 0], "rotation": 270},
            {"shapeId": 5, "position": [3, 2], "rotation": 90},
        ],
        "hint": "Two sums this time: the right column makes 10, the bottom-left corner makes 9",
    },
)

LEVELS: Tuple[LevelDefinition, ...] = tuple(level_from_dict(data) for data in LEVEL_DATA)


def level_ids() -> List[int]:
    return [level.id for level in LEVELS]


def get_level(level_id: int) -> LevelDefinition:
    for level in LEVELS:
        if level.id == level_id:
            return level
    raise LevelNotFoundError(level_id)
