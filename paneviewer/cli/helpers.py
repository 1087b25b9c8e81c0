# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Shared CLI helpers."""

import functools

from rich.console import Console

from paneviewer.manager import PaneManager
from paneviewer.utils.exceptions import PaneViewerError

console = Console()


def handle_errors(func):
    """Print Pane Viewer errors in red and exit 1 instead of a traceback."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (PaneViewerError, ValueError) as e:
            console.print(f"[red]Error: {e}[/red]")
            raise SystemExit(1)

    return wrapper


def _get_manager() -> PaneManager:
    """Pane manager for the user's configured state file."""
    return PaneManager()
