"""JSON file I/O utilities."""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

from paneviewer.utils.exceptions import StateReadError, StateWriteError
from paneviewer.utils.logging import get_logger

logger = get_logger(__name__)


def load_json_file(path: Path) -> Any:
    """Load a JSON document.

    Args:
        path: Path to JSON file

    Returns:
        Parsed document

    Raises:
        StateReadError: If the file is missing, unreadable or not valid JSON
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        logger.debug(f"Loaded {path}")
        return data
    except FileNotFoundError as e:
        raise StateReadError(f"{path} does not exist") from e
    except json.JSONDecodeError as e:
        raise StateReadError(f"Invalid JSON in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise StateReadError(f"Failed to read {path}: {e}") from e


def save_json_file(path: Path, data: Any, indent: int = 2) -> None:
    """Atomically replace a JSON document.

    The data is written to a temporary file next to ``path`` and renamed
    over it, so readers see either the old or the new document.

    Args:
        path: Path to JSON file
        data: JSON-serializable data
        indent: JSON indentation level

    Raises:
        StateWriteError: If the write or rename fails
    """
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent)
            f.write("\n")
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
        tmp_name = None
        logger.debug(f"Saved {path}")
    except (OSError, TypeError, ValueError) as e:
        raise StateWriteError(f"Failed to save {path}: {e}") from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
