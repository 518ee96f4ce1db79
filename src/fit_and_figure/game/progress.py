from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class BestTime:
    level_id: int
    seconds: float


class ProgressTracker:
    """Completed levels, score and best times for one application run.

    Create one and hand it to every engine that should report into it.
    """

    def __init__(self, points_per_level: int = 100) -> None:
        self.points_per_level = int(points_per_level)
        self.completed_levels: List[int] = []
        self.score = 0
        self._best_times: Dict[int, float] = {}

    def record_completion(self, level_id: int, elapsed_seconds: float) -> bool:
        """Record a solve; returns True when it set a new best time."""
        level_id = int(level_id)
        elapsed = float(elapsed_seconds)
        if level_id not in self.completed_levels:
            self.completed_levels.append(level_id)
            self.score += self.points_per_level

        best = self._best_times.get(level_id)
        if best is None or elapsed < best:
            self._best_times[level_id] = elapsed
            LOGGER.info("New best time for level %d: %.1fs", level_id, elapsed)
            return True
        return False

    def is_completed(self, level_id: int) -> bool:
        return int(level_id) in self.completed_levels

    def get_best_times(self) -> List[BestTime]:
        ordered = sorted(self._best_times.items(), key=lambda item: (item[1], item[0]))
        return [BestTime(level_id=level_id, seconds=seconds) for level_id, seconds in ordered]
