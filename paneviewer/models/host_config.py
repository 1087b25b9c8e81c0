# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Pydantic models for host configuration (~/.config/pane-viewer/config.yml)."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Direction = Literal["right", "left", "up", "down", "top", "bottom"]


class PathsConfig(BaseModel):
    """Path configuration overrides."""

    state_dir: Optional[str] = None
    monitor_script: Optional[str] = None
    signal_dir: Optional[str] = None


class MultiplexerConfig(BaseModel):
    """Multiplexer selection."""

    preferred: Optional[str] = None  # None = first detected


class PaneDefaultsConfig(BaseModel):
    """Defaults for newly spawned panes."""

    direction: Direction = "right"
    percent: int = Field(default=40, ge=1, le=99)
    auto_close_timeout: int = Field(default=0, ge=0)  # 0 = manual close


class TimeoutsConfig(BaseModel):
    """Timeouts for multiplexer CLI calls."""

    command: float = 5.0


class HostConfigModel(BaseModel):
    """Main host configuration model for ~/.config/pane-viewer/config.yml."""

    version: str = "1.0"
    paths: PathsConfig = Field(default_factory=PathsConfig)
    multiplexer: MultiplexerConfig = Field(default_factory=MultiplexerConfig)
    pane: PaneDefaultsConfig = Field(default_factory=PaneDefaultsConfig)
    timeouts: TimeoutsConfig = Field(default_factory=TimeoutsConfig)

    model_config = ConfigDict(extra="allow")  # Allow extra fields for forward compatibility
