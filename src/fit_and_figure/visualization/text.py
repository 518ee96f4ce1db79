from __future__ import annotations

from typing import List, Optional

from fit_and_figure.game import GameGrid, ProgressTracker, PuzzleEngine, Shape, ZoneType


ZONE_SYMBOLS = {
    ZoneType.EQUAL: "=",
    ZoneType.DISTINCT: "#",
    ZoneType.SUMMATIVE: "S",
    ZoneType.NONE: ".",
}


def _framed(rows: List[List[str]]) -> str:
    width = len(rows[0]) if rows else 0
    lines = ["    " + " ".join(f"{c:>2}" for c in range(width))]
    lines.append("    " + "-" * (3 * width - 1))
    for r, row in enumerate(rows):
        lines.append(f"{r:>2} | " + " ".join(f"{cell:>2}" for cell in row))
    return "\n".join(lines)


def format_grid(grid: GameGrid) -> str:
    return _framed([["·" if v is None else str(v) for v in row] for row in grid.to_rows()])


def format_zone_map(engine: PuzzleEngine) -> str:
    """One symbol per cell naming the constraint that covers it."""
    if engine.level is None:
        return ""
    size = engine.level.size
    rows: List[List[str]] = []
    for r in range(size):
        row: List[str] = []
        for c in range(size):
            zone = engine.get_zone_at(r, c)
            row.append(ZONE_SYMBOLS[zone.kind] if zone is not None else " ")
        rows.append(row)
    legend = [
        f"  {ZONE_SYMBOLS[zone.kind]} {zone.label}"
        for zone in engine.zones
        if zone.kind != ZoneType.NONE
    ]
    return "\n".join([_framed(rows)] + legend)


def format_shape(shape: Shape) -> str:
    height, width = shape.bounding_box()
    cells: List[List[str]] = [["·"] * width for _ in range(height)]
    for (r, c), value in shape.pairs():
        cells[r][c] = str(value)
    body = "\n".join(" ".join(f"{cell:>2}" for cell in row) for row in cells)
    state = f"placed at {shape.anchor}" if shape.is_placed else "unplaced"
    return f"Shape {shape.id} ({shape.rotation}°, {state})\n{body}"


def format_best_times(tracker: ProgressTracker, title: Optional[str] = "Best times") -> str:
    lines = [title] if title else []
    best = tracker.get_best_times()
    if not best:
        lines.append("  (no completed levels)")
    for rank, entry in enumerate(best, start=1):
        lines.append(f"  {rank}. Level {entry.level_id}: {entry.seconds:.1f}s")
    lines.append(f"  Score: {tracker.score}")
    return "\n".join(lines)
