"""Custom exception hierarchy for Pane Viewer."""

from typing import List, Optional


class PaneViewerError(Exception):
    """Base exception for all Pane Viewer errors."""

    pass


class NoAdapterAvailableError(PaneViewerError):
    """No supported terminal multiplexer was detected."""

    pass


class StateError(PaneViewerError):
    """Pane state file errors."""

    pass


class StateReadError(StateError):
    """State file is missing, unreadable or corrupt."""

    pass


class StateWriteError(StateError):
    """State file could not be written."""

    pass


class AdapterError(PaneViewerError):
    """Multiplexer adapter errors."""

    pass


class AdapterOperationError(AdapterError):
    """A multiplexer CLI call failed."""

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = command or []
        self.stderr = stderr


class ConfigError(PaneViewerError):
    """Configuration-related errors."""

    pass


class ConfigLoadError(ConfigError):
    """Failed to load configuration."""

    pass
