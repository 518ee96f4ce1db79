from __future__ import annotations

import logging
from typing import Optional


ROOT_LOGGER_NAME = "fit_and_figure"


def configure_logging(level: int = logging.INFO) -> None:
    """Attach a single stream handler to the package logger.

    Calling it again replaces the handler, so the CLI can raise verbosity
    after the library has already logged with the defaults.
    """

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-7s | %(name)s | %(message)s",
            datefmt="%H:%M:%S",
        )
    )

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(level)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger below the package namespace."""

    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
