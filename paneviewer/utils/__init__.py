"""Shared utility functions for Pane Viewer."""

from paneviewer.utils.exceptions import (
    PaneViewerError,
    NoAdapterAvailableError,
    StateError,
    StateReadError,
    StateWriteError,
    AdapterError,
    AdapterOperationError,
    ConfigError,
    ConfigLoadError,
)
from paneviewer.utils.logging import (
    get_logger,
    configure_logging,
    is_debug_mode,
)
from paneviewer.utils.config_io import (
    load_json_file,
    save_json_file,
)

__all__ = [
    # Exceptions
    "PaneViewerError",
    "NoAdapterAvailableError",
    "StateError",
    "StateReadError",
    "StateWriteError",
    "AdapterError",
    "AdapterOperationError",
    "ConfigError",
    "ConfigLoadError",
    # Logging
    "get_logger",
    "configure_logging",
    "is_debug_mode",
    # JSON I/O
    "load_json_file",
    "save_json_file",
]
