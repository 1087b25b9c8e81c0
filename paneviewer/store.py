# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""State storage for the pane registry.

The registry reads and writes its state as one whole document. Stores only
move raw documents around; validation happens in the manager.
"""

import copy
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from paneviewer.utils.config_io import load_json_file, save_json_file
from paneviewer.utils.exceptions import StateReadError, StateWriteError
from paneviewer.utils.logging import get_logger

logger = get_logger(__name__)


class StateStore(ABC):
    """Whole-document storage for registry state."""

    @abstractmethod
    def ensure(self) -> None:
        """Make sure the storage location exists."""

    @abstractmethod
    def load(self) -> Dict[str, Any]:
        """Return the stored document.

        Raises:
            StateReadError: If nothing usable is stored
        """

    @abstractmethod
    def save(self, document: Dict[str, Any]) -> None:
        """Replace the stored document.

        Raises:
            StateWriteError: If the document cannot be written
        """


class JsonFileStateStore(StateStore):
    """Stores state in a JSON file, replaced atomically on every save."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def __repr__(self) -> str:
        return f"JsonFileStateStore({str(self.path)!r})"

    def ensure(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StateWriteError(f"Cannot create state directory {self.path.parent}: {e}") from e

    def load(self) -> Dict[str, Any]:
        data = load_json_file(self.path)
        if not isinstance(data, dict):
            raise StateReadError(f"{self.path} does not contain a JSON object")
        return data

    def save(self, document: Dict[str, Any]) -> None:
        save_json_file(self.path, document)


class MemoryStateStore(StateStore):
    """Keeps state in memory. Used by tests and one-shot callers."""

    def __init__(self, document: Optional[Dict[str, Any]] = None):
        self.document = copy.deepcopy(document) if document is not None else None
        self.saves = 0

    def ensure(self) -> None:
        pass

    def load(self) -> Dict[str, Any]:
        if self.document is None:
            raise StateReadError("No state stored")
        return copy.deepcopy(self.document)

    def save(self, document: Dict[str, Any]) -> None:
        self.document = copy.deepcopy(document)
        self.saves += 1
