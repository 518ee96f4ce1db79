"""Zone constraints.

A zone is a fixed group of cells checked with one rule. Every rule may be
asked about a partly filled grid: ``equal`` and ``distinct`` only judge the
cells that hold a value, and ``summative`` passes until all of its cells are
filled.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple, Union

from ..utils.logger import get_logger
from .errors import LevelDefinitionError
from .grid import GameGrid
from .shapes import Coordinate


LOGGER = get_logger(__name__)


class ZoneType(str, Enum):
    EQUAL = "equal"
    DISTINCT = "distinct"
    SUMMATIVE = "summative"
    NONE = "none"


@dataclass(frozen=True)
class Zone:
    kind: ZoneType
    cells: Tuple[Coordinate, ...]
    target: Optional[int] = None

    @property
    def label(self) -> str:
        if self.kind == ZoneType.EQUAL:
            return "equal (=)"
        if self.kind == ZoneType.DISTINCT:
            return "distinct (≠)"
        if self.kind == ZoneType.SUMMATIVE:
            return f"summative (Σ={self.target})"
        return "none"

    def validate(self, grid: GameGrid) -> bool:
        if self.kind == ZoneType.NONE:
            return True

        values = grid.values_at(self.cells)
        if self.kind == ZoneType.EQUAL:
            return all(v == values[0] for v in values)
        if self.kind == ZoneType.DISTINCT:
            return len(set(values)) == len(values)
        if self.kind == ZoneType.SUMMATIVE:
            if not self.cells or len(values) != len(self.cells):
                return True
            return sum(values) == self.target
        return True


def parse_zone_type(tag: Union[ZoneType, str]) -> Optional[ZoneType]:
    if isinstance(tag, ZoneType):
        return tag
    try:
        return ZoneType(str(tag).strip().lower())
    except ValueError:
        return None


def create_zone(
    kind: Union[ZoneType, str],
    cells: Sequence[Coordinate],
    target: Optional[int] = None,
) -> Zone:
    """Build the zone for a variant tag; unknown tags become unconstrained zones."""
    zone_type = parse_zone_type(kind)
    if zone_type is None:
        LOGGER.warning("Unknown zone type %r, treating it as unconstrained", kind)
        zone_type = ZoneType.NONE

    coords = tuple((int(r), int(c)) for r, c in cells)
    if zone_type == ZoneType.SUMMATIVE:
        if target is None or isinstance(target, bool) or not isinstance(target, int):
            raise LevelDefinitionError(f"Summative zone {coords} needs an integer target, got {target!r}")
        return Zone(zone_type, coords, int(target))
    return Zone(zone_type, coords)
