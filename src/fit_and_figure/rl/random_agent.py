from __future__ import annotations

import random
from typing import Dict, Optional

import numpy as np
import gymnasium as gym

import fit_and_figure.env  # noqa: F401  (registers FitAndFigure-v0)


def run_random(level_id: int = 1, episodes: int = 20, seed: Optional[int] = None) -> Dict[str, float]:
    """Play uniformly among valid placements and tally the outcomes.

    An episode is "stuck" when shapes remain but none of them fits anywhere.
    """
    rng = random.Random(seed)
    env = gym.make("FitAndFigure-v0", level_id=level_id)
    stats = {"episodes": 0, "solved": 0, "failed": 0, "stuck": 0, "total_reward": 0.0}
    try:
        for episode in range(episodes):
            obs, info = env.reset(seed=None if seed is None else seed + episode)
            while True:
                valid = np.argwhere(info["action_mask"])
                if len(valid) == 0:
                    stats["stuck"] += 1
                    break
                action = valid[rng.randrange(len(valid))]
                obs, reward, terminated, truncated, info = env.step(action)
                stats["total_reward"] += float(reward)
                if terminated:
                    stats["solved" if info["state"] == "solved" else "failed"] += 1
                    break
                if truncated:
                    stats["stuck"] += 1
                    break
            stats["episodes"] += 1
    finally:
        env.close()
    stats["mean_reward"] = stats["total_reward"] / max(1, stats["episodes"])
    return stats


if __name__ == "__main__":  # pragma: no cover
    print(run_random())
