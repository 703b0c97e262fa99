"""Logging helpers for simulation scripts.

One call sets up console and optional file logging so every run leaves a
`run.log` next to its artifacts. The engine logs one start/finish pair per
run, which floods ensemble logs; `engine_level` raises the threshold for the
engine loggers alone.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union


LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Per-run and per-day loggers of the simulation engine.
ENGINE_LOGGERS = ("src.slir.simulate", "src.slir.contacts", "src.slir.population")


def _resolve_level(level: str) -> int:
    """Map a string level to a logging level constant."""
    return getattr(logging, str(level).upper(), logging.INFO)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    console: bool = True,
    engine_level: Optional[str] = None,
) -> logging.Logger:
    """Configure root logging with optional file and console handlers.

    `engine_level`, when given, sets the level of the engine loggers
    independently of the root level; otherwise they inherit it.
    """
    logger = logging.getLogger()
    resolved_level = _resolve_level(level)

    # Drop handlers from a previous call in the same process.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.setLevel(resolved_level)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers = []
    if console:
        handlers.append(logging.StreamHandler())
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(resolved_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for name in ENGINE_LOGGERS:
        engine_logger = logging.getLogger(name)
        engine_logger.setLevel(_resolve_level(engine_level) if engine_level else logging.NOTSET)

    # matplotlib font-manager chatter is rarely useful at DEBUG.
    logging.getLogger("matplotlib").setLevel(max(resolved_level, logging.WARNING))

    return logger
