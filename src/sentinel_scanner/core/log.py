"""Logging setup for command line runs."""

from __future__ import annotations

import logging
import os
from typing import Optional

LOGGER_NAME = "sentinel_scanner"
LOG_FORMAT = "%(asctime)s [%(levelname)s] (%(name)s) %(message)s"
LEVEL_ENV_VAR = "SENTINEL_LOG_LEVEL"


def resolve_level(verbose: bool = False, env_value: Optional[str] = None) -> int:
    if verbose:
        return logging.DEBUG

    value = env_value if env_value is not None else os.getenv(LEVEL_ENV_VAR, "")
    level = logging.getLevelName(value.strip().upper()) if value else None
    return level if isinstance(level, int) else logging.INFO


def configure_logging(verbose: bool = False) -> logging.Logger:
    """Attach a single stream handler to the package logger."""

    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(resolve_level(verbose))

    if not any(getattr(handler, "_sentinel", False) for handler in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._sentinel = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    return root
