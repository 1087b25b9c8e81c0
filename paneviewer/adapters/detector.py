# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Multiplexer detection."""

from typing import List, Optional, Sequence

from paneviewer.adapters.base import MultiplexerAdapter
from paneviewer.adapters.tmux import TmuxAdapter
from paneviewer.adapters.wezterm import WezTermAdapter
from paneviewer.utils.logging import get_logger

logger = get_logger(__name__)


def default_adapters(timeout: float = 5.0) -> List[MultiplexerAdapter]:
    """All supported adapters, in detection order."""
    return [TmuxAdapter(timeout=timeout), WezTermAdapter(timeout=timeout)]


class MultiplexerDetector:
    """Picks the adapter for the multiplexer we are running inside."""

    def __init__(
        self,
        preferred: Optional[str] = None,
        adapters: Optional[Sequence[MultiplexerAdapter]] = None,
        timeout: float = 5.0,
    ):
        self.preferred = preferred
        self.adapters = list(adapters) if adapters is not None else default_adapters(timeout)

    def detect(self) -> List[str]:
        """Names of all adapters usable right now."""
        return [adapter.name for adapter in self.adapters if adapter.is_available()]

    def auto_select(self) -> Optional[MultiplexerAdapter]:
        """Return the preferred adapter if usable, else the first usable one."""
        if self.preferred:
            for adapter in self.adapters:
                if adapter.name == self.preferred:
                    if adapter.is_available():
                        logger.debug(f"Using preferred multiplexer: {adapter.name}")
                        return adapter
                    logger.warning(f"Preferred multiplexer {self.preferred} not available, detecting")
                    break
            else:
                logger.warning(f"Unknown multiplexer: {self.preferred}")

        for adapter in self.adapters:
            if adapter.is_available():
                logger.debug(f"Detected multiplexer: {adapter.name}")
                return adapter

        logger.debug("No terminal multiplexer detected")
        return None
