"""Gymnasium environments for Fit & Figure."""

from __future__ import annotations

from gymnasium.envs.registration import register

# One episode per level; pass level_id=... to gym.make
register(
    id="FitAndFigure-v0",
    entry_point="fit_and_figure.env.puzzle_env:FitAndFigureEnv",
)

__all__ = ["FitAndFigure-v0"]
