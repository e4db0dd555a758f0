"""Validator configuration from environment variables."""

from __future__ import annotations

import logging
import os

from jv.models.results import OutputLevel

# Defaults
DEFAULT_OUTPUT_LEVEL = OutputLevel.basic
DEFAULT_MAX_DEPTH = 128
DEFAULT_LOG_LEVEL = "WARNING"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off", "")


def get_output_level() -> OutputLevel:
    """Return the default output level from ``JV_OUTPUT_LEVEL``.

    Raises:
        ValueError: If the level is not one of flag/basic/detailed/verbose.
    """
    value = os.environ.get("JV_OUTPUT_LEVEL", "").lower()
    if not value:
        return DEFAULT_OUTPUT_LEVEL
    try:
        return OutputLevel(value)
    except ValueError:
        choices = tuple(level.value for level in OutputLevel)
        raise ValueError(f"Unsupported JV_OUTPUT_LEVEL: {value!r}. Choose from {choices}") from None


def get_max_depth() -> int:
    """Return the evaluation depth limit from ``JV_MAX_DEPTH``.

    Raises:
        ValueError: If the value is not a positive integer.
    """
    value = os.environ.get("JV_MAX_DEPTH")
    if not value:
        return DEFAULT_MAX_DEPTH
    try:
        depth = int(value)
    except ValueError:
        raise ValueError(f"JV_MAX_DEPTH must be an integer, got {value!r}") from None
    if depth < 1:
        raise ValueError(f"JV_MAX_DEPTH must be positive, got {depth}")
    return depth


def get_log_level() -> int:
    """Return the logging level named by ``JV_LOG_LEVEL``."""
    name = os.environ.get("JV_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown JV_LOG_LEVEL: {name!r}")
    return level


def get_assert_formats() -> bool:
    """Return whether the CLI registers the built-in format validators (``JV_ASSERT_FORMATS``)."""
    value = os.environ.get("JV_ASSERT_FORMATS", "").lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"JV_ASSERT_FORMATS must be a boolean flag, got {value!r}")
