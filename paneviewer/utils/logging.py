# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Logging setup for Pane Viewer.

All loggers live under the ``paneviewer`` namespace. Output goes to stderr
through rich so that stdout stays clean for pane ids and hook responses.
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "paneviewer"
DEBUG_ENV = "PANE_VIEWER_DEBUG"

_configured = False


def is_debug_mode() -> bool:
    """Check whether debug logging was requested via the environment."""
    return os.getenv(DEBUG_ENV, "").lower() in ("1", "true", "yes", "on")


def get_logger(name: str) -> logging.Logger:
    """Get a logger in the paneviewer namespace.

    Args:
        name: Module name, usually ``__name__``

    Returns:
        Logger instance
    """
    if name == ROOT_LOGGER or name.startswith(f"{ROOT_LOGGER}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(debug: Optional[bool] = None) -> None:
    """Install the stderr handler on the package logger.

    Safe to call more than once; later calls only adjust the level.

    Args:
        debug: Force debug logging on or off. ``None`` reads PANE_VIEWER_DEBUG.
    """
    global _configured

    if debug is None:
        debug = is_debug_mode()
    level = logging.DEBUG if debug else logging.WARNING

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level)

    if not _configured:
        handler = RichHandler(
            console=Console(stderr=True),
            show_path=debug,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        root.addHandler(handler)
        root.propagate = False
        _configured = True
