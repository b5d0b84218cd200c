"""Logging setup for the ``justcmd`` logger.

Nothing here runs on import. Every module logs through
``logging.getLogger(__name__)``, so all records land under the ``justcmd``
logger. ``configure_logging`` attaches a single stream handler there. It is
called by ``Runner.from_config`` when ``RunnerConfig.log_level`` is set, and
programs can also call it directly.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

LIBRARY_LOGGER = "justcmd"
ENV_VAR = "JUSTCMD_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class _JustCmdHandler(logging.StreamHandler):
    """Marks the handler installed by ``configure_logging``."""


def parse_level(value: int | str | None, default: int | None = None) -> int | None:
    """Turn ``"debug"``, ``"WARNING"`` or ``10`` into a logging level.

    Unknown names give ``default``.
    """
    if value is None:
        return default
    if isinstance(value, int):
        return value
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(
    level: int | str | None = None,
    *,
    stream: IO[str] | None = None,
    format: str = DEFAULT_FORMAT,
    respect_env: bool = True,
) -> logging.Logger:
    """Send ``justcmd`` log records to ``stream`` (stderr by default).

    The level comes from ``level`` first, then ``JUSTCMD_LOG_LEVEL`` when
    ``respect_env`` is set, and falls back to WARNING. Calling it again
    replaces the handler from the previous call. Records stop propagating to
    the root logger so they are not printed twice.
    """
    final_level = parse_level(level)
    if final_level is None and respect_env:
        final_level = parse_level(os.getenv(ENV_VAR))
    if final_level is None:
        final_level = logging.WARNING

    logger = logging.getLogger(LIBRARY_LOGGER)
    for handler in [h for h in logger.handlers if isinstance(h, _JustCmdHandler)]:
        logger.removeHandler(handler)

    handler = _JustCmdHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(format))
    logger.addHandler(handler)
    logger.setLevel(final_level)
    logger.propagate = False
    return logger


__all__ = ["ENV_VAR", "LIBRARY_LOGGER", "configure_logging", "parse_level"]
