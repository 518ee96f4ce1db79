"""Exceptions raised for malformed input data.

Play operations (rotate, place, remove, check) never raise; they report
rejections through their return values instead.
"""


class FitAndFigureError(Exception):
    """Base exception for the puzzle package."""


class LevelDefinitionError(FitAndFigureError, ValueError):
    """Raised when a level definition is structurally invalid."""


class LevelNotFoundError(FitAndFigureError, KeyError):
    """Raised when the catalog has no level with the requested id."""
