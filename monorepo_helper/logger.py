"""Logging utilities.

Wraps the stdlib logger so messages can carry ``{placeholder}`` templates
filled from a context mapping, the way the host package manager's IO does.
Every message is prefixed with the plugin name.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping
from typing import Any

PREFIX = "Monorepo Helper: "
LOGGER_NAME = "monorepo_helper"


def interpolate(message: str, context: Mapping[str, Any]) -> str:
    """Replace ``{key}`` placeholders in message with values from context.

    Containers are not interpolated; their placeholders stay untouched.
    """
    for key, value in context.items():
        if isinstance(value, (list, tuple, set, frozenset, dict)):
            continue
        message = message.replace("{" + key + "}", str(value))
    return message


class MonorepoLogger(logging.LoggerAdapter):
    """Logger adapter accepting a ``context`` keyword for placeholders.

    Example:
        logger.info("Added {package}.", context={"package": "acme/foo"})
    """

    def process(self, msg: Any, kwargs: Any) -> tuple[Any, Any]:
        context = kwargs.pop("context", None) or {}
        return PREFIX + interpolate(str(msg), context), kwargs


def get_logger(name: str = LOGGER_NAME) -> MonorepoLogger:
    """Return a MonorepoLogger for the given logger name."""
    return MonorepoLogger(logging.getLogger(name), {})


def configure_logging(verbosity: int = 0) -> None:
    """Install a stderr handler on the package logger.

    Errors are always shown, info and warnings only when verbose (1),
    debug messages only at verbosity 2 or higher.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.ERROR

    root = logging.getLogger(LOGGER_NAME)
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
