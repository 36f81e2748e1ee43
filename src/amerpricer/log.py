"""Logging configuration for entry points.

Library modules never call ``basicConfig``; they hold
``logger = logging.getLogger(__name__)``.  The CLI calls :func:`setup_logging`
once.
"""

from __future__ import annotations

import logging

__all__ = ["setup_logging"]

_LEVELS: dict[str, int] = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}


def _coerce_level(level: int | str) -> int:
    """Accept ``logging.INFO``, ``"info"`` or ``"20"``."""
    if isinstance(level, int):
        return level
    s = str(level).strip().upper()
    if s.isdigit():
        return int(s)
    try:
        return _LEVELS[s]
    except KeyError as e:
        raise ValueError(f"Unknown logging level: {level!r}") from e


def setup_logging(
    level: int | str = "WARNING",
    *,
    fmt: str = "%(asctime)s %(levelname)s %(name)s - %(message)s",
    datefmt: str = "%Y-%m-%d %H:%M:%S",
) -> None:
    """Configure the root logger (``force=True`` so reruns do not stack handlers)."""
    logging.basicConfig(level=_coerce_level(level), format=fmt, datefmt=datefmt, force=True)
