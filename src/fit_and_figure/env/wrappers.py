from __future__ import annotations

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from .puzzle_env import compute_action_mask


class FlattenDiscreteActionWrapper(gym.ActionWrapper):
    """Flattens MultiDiscrete (shape, row, col, turns) -> Discrete(N).

    Also exposes `get_action_mask()` returning a 1D boolean mask of shape (N,),
    in the same C-order as the flat action index.
    """

    def __init__(self, env: gym.Env):
        super().__init__(env)
        if not isinstance(env.action_space, spaces.MultiDiscrete):
            raise TypeError("FlattenDiscreteActionWrapper needs a MultiDiscrete action space")
        self.nvec = tuple(int(n) for n in env.action_space.nvec)
        self.action_space = spaces.Discrete(int(np.prod(self.nvec)))

    def action(self, action: int):  # type: ignore[override]
        return np.array(np.unravel_index(int(action), self.nvec), dtype=np.int64)

    def flatten(self, action) -> int:
        return int(np.ravel_multi_index(tuple(int(a) for a in action), self.nvec))

    def get_action_mask(self) -> np.ndarray:
        return compute_action_mask(self.env.unwrapped.engine).reshape(-1)
