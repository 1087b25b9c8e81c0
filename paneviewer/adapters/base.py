# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Base class for terminal multiplexer adapters."""

import shutil
import subprocess
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from paneviewer.utils.exceptions import AdapterOperationError
from paneviewer.utils.logging import get_logger

logger = get_logger(__name__)

DIRECTION_ALIASES = {
    "right": "right",
    "left": "left",
    "up": "up",
    "top": "up",
    "down": "down",
    "bottom": "down",
}


def normalize_direction(direction: str) -> str:
    """Map a layout hint onto right/left/up/down.

    Raises:
        ValueError: If the direction is unknown
    """
    try:
        return DIRECTION_ALIASES[direction.lower()]
    except KeyError:
        raise ValueError(
            f"Invalid direction: {direction}. Use one of: right, left, up, down"
        ) from None


def validate_percent(percent: int) -> int:
    if not 1 <= int(percent) <= 99:
        raise ValueError(f"Invalid pane size: {percent}%. Must be between 1 and 99.")
    return int(percent)


@dataclass
class PaneInfo:
    """Live pane details reported by a multiplexer."""

    pane_id: str
    pid: Optional[int] = None
    title: str = ""
    extra: Dict[str, str] = field(default_factory=dict)


class MultiplexerAdapter(ABC):
    """Multiplexer-specific pane operations.

    Subclasses must define:
    - name: Identifier stored with each pane record
    - binary: Executable the adapter shells out to
    """

    name: str
    binary: str

    def __init__(self, timeout: float = 5.0):
        self.timeout = timeout

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    def is_available(self) -> bool:
        """Whether this multiplexer is usable from the current environment."""
        return self.is_running_inside() and shutil.which(self.binary) is not None

    @abstractmethod
    def is_running_inside(self) -> bool:
        """Whether the current process runs inside this multiplexer."""

    @abstractmethod
    def split_pane(self, direction: str, percent: int, command: Sequence[str]) -> str:
        """Split the current view and run command in the new pane.

        Returns:
            Pane id of the new pane
        """

    @abstractmethod
    def send_keys(self, pane_id: str, text: str) -> None:
        """Type text into a pane."""

    @abstractmethod
    def get_pane_info(self, pane_id: str) -> Optional[PaneInfo]:
        """Return pane details, or None if the pane no longer exists."""

    @abstractmethod
    def close_pane(self, pane_id: str) -> None:
        """Close a pane."""

    def _run(self, args: List[str]) -> str:
        """Run the multiplexer CLI and return stdout.

        Raises:
            AdapterOperationError: On missing binary, timeout or non-zero exit
        """
        cmd = [self.binary] + args
        logger.debug(f"Running: {cmd}")
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except FileNotFoundError as e:
            raise AdapterOperationError(f"{self.binary} not found", cmd) from e
        except subprocess.TimeoutExpired as e:
            raise AdapterOperationError(
                f"{self.binary} timed out after {self.timeout}s", cmd
            ) from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            raise AdapterOperationError(
                f"{self.binary} {args[0] if args else ''} failed: {stderr or f'exit {result.returncode}'}",
                cmd,
                stderr,
            )
        return result.stdout
