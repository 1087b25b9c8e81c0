# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Centralized path definitions for Pane Viewer.

Usage:
    from paneviewer.paths import HostPaths

    state_file = HostPaths.state_file()
    monitor = HostPaths.monitor_script()
"""

import os
import tempfile
from pathlib import Path


class HostPaths:
    """Paths on the host machine where the pane viewer runs."""

    STATE_FILENAME = "panes.json"

    @staticmethod
    def state_dir() -> Path:
        """~/.ai-mesh-pane-viewer/"""
        return Path.home() / ".ai-mesh-pane-viewer"

    @staticmethod
    def state_file() -> Path:
        """~/.ai-mesh-pane-viewer/panes.json"""
        return HostPaths.state_dir() / HostPaths.STATE_FILENAME

    @staticmethod
    def config_dir() -> Path:
        """~/.config/pane-viewer/ (honours XDG_CONFIG_HOME)"""
        xdg = os.getenv("XDG_CONFIG_HOME")
        base = Path(xdg) if xdg else Path.home() / ".config"
        return base / "pane-viewer"

    @staticmethod
    def config_file() -> Path:
        """~/.config/pane-viewer/config.yml"""
        return HostPaths.config_dir() / "config.yml"

    @staticmethod
    def signal_dir() -> Path:
        """Directory holding per-task signal files."""
        return Path(tempfile.gettempdir())

    @staticmethod
    def monitor_script() -> Path:
        """Bundled monitor script launched inside each pane."""
        return Path(__file__).resolve().parent / "scripts" / "agent-monitor.sh"
