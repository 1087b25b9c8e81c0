# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Agent hook commands.

Hooks receive a JSON payload on stdin. They must never break the calling
agent, so failures are logged and the exit code stays 0.
"""

import json
import sys
from typing import Any, Dict, Optional

import click
from pydantic import ValidationError

from paneviewer.cli import cli
from paneviewer.cli.commands.panes import DIRECTIONS
from paneviewer.cli.helpers import _get_manager
from paneviewer.models.state import PaneConfig
from paneviewer.utils.exceptions import PaneViewerError
from paneviewer.utils.logging import get_logger

logger = get_logger(__name__)


def _read_payload() -> Optional[Dict[str, Any]]:
    """Parse the hook payload from stdin."""
    raw = sys.stdin.read()
    if not raw.strip():
        logger.warning("Hook called without payload")
        return None
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning(f"Invalid hook payload: {e}")
        return None
    if not isinstance(payload, dict):
        logger.warning("Hook payload is not a JSON object")
        return None
    return payload


def _text(value: Any) -> str:
    """Payload field as a string; missing or null reads as empty."""
    if value is None:
        return ""
    return str(value)


def _task_id(payload: Dict[str, Any]) -> Optional[str]:
    return _text(payload.get("tool_use_id") or payload.get("task_id")) or None


@cli.group()
def hook():
    """Agent hook entry points (read JSON from stdin)."""
    pass


@hook.command(name="pre-task")
@click.option("--direction", type=click.Choice(DIRECTIONS), help="Split direction")
@click.option("--percent", type=click.IntRange(1, 99), help="Pane size in percent")
@click.option("--auto-close", type=click.IntRange(min=0), help="Close N seconds after completion")
def pre_task(direction: Optional[str], percent: Optional[int], auto_close: Optional[int]):
    """Open a monitor pane when an agent task starts."""
    payload = _read_payload()
    if payload is None:
        return

    tool_input = payload.get("tool_input")
    if not isinstance(tool_input, dict):
        tool_input = {}

    try:
        config = PaneConfig(
            task_id=_task_id(payload),
            agent_type=_text(tool_input.get("subagent_type")) or "unknown",
            description=_text(tool_input.get("description")),
            transcript_path=_text(payload.get("transcript_path")),
            direction=direction,
            percent=percent,
            auto_close_timeout=auto_close,
        )
        pane_id = _get_manager().get_or_create_pane(config)
    except (PaneViewerError, ValidationError, OSError) as e:
        logger.warning(f"Could not open monitor pane: {e}")
        return
    logger.debug(f"Opened monitor pane {pane_id} for task {config.task_id}")


@hook.command(name="post-task")
@click.option("--status", default="done", show_default=True, help="Status written to the signal file")
@click.option("--close", "close_now", is_flag=True, help="Close the pane instead of signalling it")
def post_task(status: str, close_now: bool):
    """Signal a task's monitor pane that the task finished."""
    payload = _read_payload()
    if payload is None:
        return

    task_id = _task_id(payload)
    if not task_id:
        logger.warning("Hook payload has no task id")
        return

    try:
        manager = _get_manager()
        if close_now:
            record = manager.find_pane(task_id)
            if record is not None:
                manager.close_pane(record.pane_id)
        else:
            manager.signal_completion(task_id, status)
    except (PaneViewerError, OSError) as e:
        logger.warning(f"Could not finish monitor pane for {task_id}: {e}")
