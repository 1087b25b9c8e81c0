# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Pydantic models for Pane Viewer state and configuration."""

from paneviewer.models.state import (
    PaneConfig,
    PaneRecord,
    RegistryState,
)
from paneviewer.models.host_config import (
    HostConfigModel,
    PathsConfig,
    MultiplexerConfig,
    PaneDefaultsConfig,
    TimeoutsConfig,
)

__all__ = [
    # Registry state
    "PaneConfig",
    "PaneRecord",
    "RegistryState",
    # Host config
    "HostConfigModel",
    "PathsConfig",
    "MultiplexerConfig",
    "PaneDefaultsConfig",
    "TimeoutsConfig",
]
