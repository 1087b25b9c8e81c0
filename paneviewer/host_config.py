# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Host configuration for Pane Viewer (~/.config/pane-viewer/config.yml)."""

import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from paneviewer.models.host_config import HostConfigModel
from paneviewer.paths import HostPaths
from paneviewer.utils.exceptions import ConfigLoadError
from paneviewer.utils.logging import get_logger

logger = get_logger(__name__)

CONFIG_ENV = "PANE_VIEWER_CONFIG"
STATE_DIR_ENV = "PANE_VIEWER_STATE_DIR"
MULTIPLEXER_ENV = "PANE_VIEWER_MULTIPLEXER"


class HostConfig:
    """Resolved host configuration.

    Wraps the validated model and resolves path defaults and environment
    overrides, so callers never deal with ``None`` paths.
    """

    def __init__(self, model: Optional[HostConfigModel] = None, config_path: Optional[Path] = None):
        self.model = model or HostConfigModel()
        self.config_path = config_path

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "HostConfig":
        """Load configuration from disk.

        Args:
            config_path: Config file (defaults to $PANE_VIEWER_CONFIG or
                ~/.config/pane-viewer/config.yml)

        Returns:
            HostConfig, with defaults when the file doesn't exist

        Raises:
            ConfigLoadError: If the file exists but is invalid
        """
        if config_path is None:
            env_path = os.getenv(CONFIG_ENV)
            config_path = Path(env_path) if env_path else HostPaths.config_file()

        if not config_path.exists():
            logger.debug(f"Config file not found: {config_path}, using defaults")
            return cls(HostConfigModel(), config_path)

        try:
            with open(config_path, "r") as f:
                raw_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigLoadError(f"Invalid YAML in {config_path}: {e}") from e
        except OSError as e:
            raise ConfigLoadError(f"Failed to load {config_path}: {e}") from e

        if not isinstance(raw_config, dict):
            raise ConfigLoadError(f"{config_path} must contain a mapping")

        try:
            model = HostConfigModel.model_validate(raw_config)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(x) for x in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise ConfigLoadError(f"Invalid config in {config_path}: {problems}") from e

        logger.debug(f"Loaded config from {config_path}")
        return cls(model, config_path)

    @property
    def state_dir(self) -> Path:
        env_dir = os.getenv(STATE_DIR_ENV)
        if env_dir:
            return Path(env_dir).expanduser()
        if self.model.paths.state_dir:
            return Path(self.model.paths.state_dir).expanduser()
        return HostPaths.state_dir()

    @property
    def state_file(self) -> Path:
        return self.state_dir / HostPaths.STATE_FILENAME

    @property
    def monitor_script(self) -> Path:
        if self.model.paths.monitor_script:
            return Path(self.model.paths.monitor_script).expanduser()
        return HostPaths.monitor_script()

    @property
    def signal_dir(self) -> Path:
        if self.model.paths.signal_dir:
            return Path(self.model.paths.signal_dir).expanduser()
        return HostPaths.signal_dir()

    @property
    def preferred_multiplexer(self) -> Optional[str]:
        return os.getenv(MULTIPLEXER_ENV) or self.model.multiplexer.preferred

    @property
    def command_timeout(self) -> float:
        return self.model.timeouts.command


_config: Optional[HostConfig] = None


def get_config() -> HostConfig:
    """Get the process-wide host configuration, loading it on first use."""
    global _config
    if _config is None:
        _config = HostConfig.load()
    return _config


def reset_config() -> None:
    """Forget the cached configuration (next get_config() reloads)."""
    global _config
    _config = None
