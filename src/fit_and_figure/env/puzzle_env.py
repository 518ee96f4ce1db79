from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from fit_and_figure.game import GameConfig, GameState, PlacementStatus, PuzzleEngine, get_level
from fit_and_figure.visualization.text import format_grid


def compute_action_mask(engine: PuzzleEngine) -> np.ndarray:
    """Boolean mask over (shape index, row, col, quarter turns)."""
    assert engine.level is not None and engine.grid is not None
    size = engine.level.size
    mask = np.zeros((len(engine.shapes), size, size, 4), dtype=np.bool_)
    if engine.state != GameState.IN_PROGRESS:
        return mask
    for idx, shape in enumerate(engine.shapes.values()):
        if shape.is_placed:
            continue
        for turns in range(4):
            offsets = shape.offsets_for(turns)
            height = max(r for r, _ in offsets) + 1
            width = max(c for _, c in offsets) + 1
            for row in range(size - height + 1):
                for col in range(size - width + 1):
                    cells = [(row + r, col + c) for r, c in offsets]
                    if engine.grid.can_place(cells):
                        mask[idx, row, col, turns] = True
    return mask


class FitAndFigureEnv(gym.Env):
    """One puzzle level as an episode.

    Action: (shape index, anchor row, anchor col, quarter turns clockwise).
    The episode ends once the grid is full, solved or not.
    """

    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(
        self,
        level_id: Optional[int] = None,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.config = config or GameConfig()
        self.level = get_level(level_id if level_id is not None else self.config.level_id)
        self.engine = PuzzleEngine()
        self.engine.load_level(self.level)
        self.render_mode = render_mode

        self._shape_ids = [spec.id for spec in self.level.shapes]
        size = self.level.size
        n_shapes = len(self._shape_ids)
        all_values = [v for spec in self.level.shapes for v in spec.values]

        # Empty cells read as 0 in "grid"; "filled" tells them apart
        self.observation_space = spaces.Dict(
            {
                "grid": spaces.Box(
                    low=min(0, min(all_values)),
                    high=max(0, max(all_values)),
                    shape=(size, size),
                    dtype=np.int64,
                ),
                "filled": spaces.MultiBinary((size, size)),
                "placed": spaces.MultiBinary(n_shapes),
            }
        )
        self.action_space = spaces.MultiDiscrete((n_shapes, size, size, 4))

        self._steps = 0

    def _get_obs(self) -> Dict[str, Any]:
        assert self.engine.grid is not None
        placed = np.array(
            [self.engine.shapes[shape_id].is_placed for shape_id in self._shape_ids], dtype=np.int8
        )
        return {
            "grid": self.engine.grid.values.copy(),
            "filled": self.engine.grid.filled.astype(np.int8),
            "placed": placed,
        }

    def _get_info(self) -> Dict[str, Any]:
        result = self.engine.last_result
        return {
            "action_mask": compute_action_mask(self.engine),
            "state": self.engine.state.value,
            "violated_zones": [zone.label for zone in result.violated_zones] if result else [],
            "steps": self._steps,
        }

    def get_action_mask(self) -> np.ndarray:
        return compute_action_mask(self.engine)

    def reset(
        self, *, seed: Optional[int] = None, options: Optional[dict] = None
    ) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        self.engine.reset()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action):
        shape_idx, row, col, turns = map(int, action)
        reward_components: Dict[str, float] = {}
        status = PlacementStatus.INVALID_SHAPE_STATE

        shape = None
        if 0 <= shape_idx < len(self._shape_ids):
            shape = self.engine.get_shape(self._shape_ids[shape_idx])

        if shape is not None and not shape.is_placed:
            while shape.quarter_turns != turns % 4 and self.engine.rotate_shape(shape.id):
                pass
            result = self.engine.place_shape(shape.id, row, col)
            status = result.status
            if result.ok:
                reward_components["cells"] = self.config.cell_reward * len(result.cells)
                if result.completion is not None:
                    if result.completion.solved:
                        reward_components["solved"] = self.config.solved_reward
                    else:
                        reward_components["failed"] = self.config.failed_penalty

        if status != PlacementStatus.PLACED:
            reward_components["invalid"] = self.config.invalid_action_penalty

        self._steps += 1
        assert self.engine.grid is not None
        terminated = self.engine.grid.is_full()
        truncated = not terminated and self._steps >= self.config.max_episode_steps

        info = self._get_info()
        info["placement"] = status.value
        info["reward_components"] = reward_components
        return self._get_obs(), float(sum(reward_components.values())), terminated, truncated, info

    def render(self) -> Optional[str]:
        if self.render_mode == "ansi" and self.engine.grid is not None:
            return format_grid(self.engine.grid)
        return None

    def close(self) -> None:
        pass
