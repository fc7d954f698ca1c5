"""Logging helpers shared by the engine, the CLI and the diagnostics."""

from __future__ import annotations

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
SOLVER_LOGGER = "reunion.engine.solver"


def configure_logging(level: int = logging.INFO, solver_level: Optional[int] = None) -> None:
    """Install a single stream handler on the root logger.

    Backtracking emits one DEBUG record per tried candidate, which drowns
    everything else at DEBUG. ``solver_level`` lets callers keep the rest
    of the engine verbose while muting (or raising) the solver separately.
    """

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%H:%M:%S"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    logging.getLogger(SOLVER_LOGGER).setLevel(
        solver_level if solver_level is not None else logging.NOTSET
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a namespaced logger, configuring defaults on first use."""

    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name or "reunion")
