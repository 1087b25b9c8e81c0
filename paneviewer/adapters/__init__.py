# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Terminal multiplexer adapters."""

from paneviewer.adapters.base import MultiplexerAdapter, PaneInfo
from paneviewer.adapters.detector import MultiplexerDetector, default_adapters
from paneviewer.adapters.tmux import TmuxAdapter
from paneviewer.adapters.wezterm import WezTermAdapter

__all__ = [
    "MultiplexerAdapter",
    "PaneInfo",
    "MultiplexerDetector",
    "default_adapters",
    "TmuxAdapter",
    "WezTermAdapter",
]
