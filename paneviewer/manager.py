# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Pane manager.

Tracks monitor panes across process invocations. Each pane spawned for a
task is recorded in a state document keyed by task id, so a later hook
invocation can find it, signal it, or close it.

The state document is a best-effort cache over what the multiplexer
reports. Concurrent processes may overwrite each other's updates (last
writer wins); cleanup() re-derives liveness from the adapter and drops
records whose pane is gone.
"""

import hashlib
import re
import time
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from paneviewer.adapters.base import MultiplexerAdapter
from paneviewer.adapters.detector import MultiplexerDetector
from paneviewer.host_config import HostConfig, get_config
from paneviewer.models.state import PaneConfig, PaneRecord, RegistryState, utc_now
from paneviewer.store import JsonFileStateStore, StateStore
from paneviewer.utils.exceptions import NoAdapterAvailableError, StateReadError
from paneviewer.utils.logging import get_logger

logger = get_logger(__name__)

# Task ids are cut to this length for pane titles
SHORT_TASK_ID_LENGTH = 12

AdapterSelector = Callable[[], Optional[MultiplexerAdapter]]


def short_task_id(task_id: Optional[str]) -> str:
    """Task id as shown in the monitor pane."""
    if task_id:
        return task_id[:SHORT_TASK_ID_LENGTH]
    return str(int(time.time() * 1000))


class PaneManager:
    """Create, message, close and reconcile tracked panes."""

    def __init__(
        self,
        store: Optional[StateStore] = None,
        adapter: Optional[MultiplexerAdapter] = None,
        selector: Optional[AdapterSelector] = None,
        monitor_script: Optional[Union[str, Path]] = None,
        signal_dir: Optional[Union[str, Path]] = None,
        config: Optional[HostConfig] = None,
    ):
        """Initialize pane manager.

        Args:
            store: State storage (defaults to the configured panes.json)
            adapter: Pre-selected adapter; skips detection when given
            selector: Returns an adapter or None; defaults to auto-detection
            monitor_script: Script launched in each pane
            signal_dir: Directory for per-task signal files
            config: Host configuration (defaults to the user's config file)
        """
        self.config = config or get_config()
        self.store = store or JsonFileStateStore(self.config.state_file)
        self.selector = selector or MultiplexerDetector(
            preferred=self.config.preferred_multiplexer,
            timeout=self.config.command_timeout,
        ).auto_select
        self.monitor_script = Path(monitor_script) if monitor_script else self.config.monitor_script
        self.signal_dir = Path(signal_dir) if signal_dir else self.config.signal_dir
        self._injected_adapter = adapter
        self.adapter: Optional[MultiplexerAdapter] = None
        self.initialized = False

    def init(self) -> MultiplexerAdapter:
        """Prepare state storage and select the adapter (first call only).

        Raises:
            NoAdapterAvailableError: If no multiplexer is detected. The
                manager stays uninitialized so a later call can retry.
        """
        if self.initialized:
            return self.adapter

        self.store.ensure()

        adapter = self._injected_adapter or self.selector()
        if adapter is None:
            raise NoAdapterAvailableError(
                "No terminal multiplexer detected (run inside tmux or WezTerm)"
            )

        self.adapter = adapter
        self.initialized = True
        logger.debug(f"Pane manager initialized with {adapter.name} ({self.store!r})")
        return adapter

    def load_state(self) -> RegistryState:
        """Load pane state. Never fails.

        An unreadable document reads as empty; invalid records are dropped
        one by one so the rest of the registry survives.
        """
        try:
            document = self.store.load()
        except StateReadError as e:
            logger.debug(f"Starting with empty pane state: {e}")
            return RegistryState()

        raw_panes = document.get("panes") or {}
        if not isinstance(raw_panes, dict):
            logger.warning("Ignoring pane state: panes is not a mapping")
            raw_panes = {}

        # A bad record only costs that record, never its neighbours
        panes = {}
        for task_id, raw_record in raw_panes.items():
            try:
                panes[task_id] = PaneRecord.model_validate(raw_record)
            except ValidationError as e:
                logger.warning(f"Dropping invalid pane record {task_id}: {e.error_count()} validation errors")

        last_updated = document.get("lastUpdated")
        if not isinstance(last_updated, str):
            last_updated = None
        extras = {
            key: value
            for key, value in document.items()
            if key not in ("panes", "lastUpdated", "last_updated")
        }

        state = RegistryState.model_validate({"panes": {}, "lastUpdated": last_updated, **extras})
        state.panes = panes
        return state

    def save_state(self, state: RegistryState) -> None:
        """Stamp and persist the whole state document.

        Raises:
            StateWriteError: If the document cannot be written
        """
        state.last_updated = utc_now()
        self.store.save(state.to_document())

    def signal_file_for(self, task_id: Optional[str] = None) -> Path:
        """Signal file for a task; unique per call when there is no task id."""
        if task_id:
            safe_id = re.sub(r"[^A-Za-z0-9._-]", "_", task_id)
            if safe_id != task_id:
                # keep ids that sanitize alike apart
                safe_id = f"{safe_id}-{hashlib.sha1(task_id.encode()).hexdigest()[:8]}"
            return self.signal_dir / f"agent-signal-{safe_id}"
        return self.signal_dir / f"agent-signal-{time.time_ns()}"

    def build_command(self, config: PaneConfig, signal_file: Path, auto_close_timeout: int) -> List[str]:
        """Monitor command line.

        Argument order is what agent-monitor.sh expects: script, agent type,
        description, signal file, transcript dir, short task id, auto-close.
        """
        transcript_dir = str(Path(config.transcript_path).parent) if config.transcript_path else ""
        return [
            str(self.monitor_script),
            config.agent_type,
            config.description,
            str(signal_file),
            transcript_dir,
            short_task_id(config.task_id),
            str(auto_close_timeout),
        ]

    def get_or_create_pane(self, config: Optional[PaneConfig] = None, **overrides: Any) -> str:
        """Spawn a monitor pane and track it under its task id.

        Every call spawns a new pane unless ``reuse`` is set and the pane
        recorded for the task id is still live.

        Args:
            config: Pane request
            **overrides: PaneConfig fields, applied on top of config

        Returns:
            Pane id of the new (or reused) pane
        """
        if config is None:
            config = PaneConfig(**overrides)
        elif overrides:
            config = PaneConfig.model_validate({**config.model_dump(), **overrides})

        adapter = self.init()
        defaults = self.config.model.pane
        task_id = config.task_id

        if config.reuse and task_id:
            existing = self.find_pane(task_id)
            if existing and adapter.get_pane_info(existing.pane_id):
                logger.debug(f"Reusing pane {existing.pane_id} for task {task_id}")
                return existing.pane_id

        signal_file = self.signal_file_for(task_id)
        auto_close = (
            config.auto_close_timeout
            if config.auto_close_timeout is not None
            else defaults.auto_close_timeout
        )
        command = self.build_command(config, signal_file, auto_close)

        pane_id = adapter.split_pane(
            direction=config.direction or defaults.direction,
            percent=config.percent or defaults.percent,
            command=command,
        )
        logger.debug(f"Spawned pane {pane_id} via {adapter.name}")

        if task_id:
            state = self.load_state()
            state.panes[task_id] = PaneRecord(
                pane_id=pane_id,
                signal_file=str(signal_file),
                multiplexer=adapter.name,
                agent_type=config.agent_type,
                description=config.description,
            )
            self.save_state(state)

        return pane_id

    def send_message(self, pane_id: str, message: str) -> None:
        """Type a line of text into a pane."""
        adapter = self.init()
        adapter.send_keys(pane_id, f"{message}\n")

    def close_pane(self, pane_id: str) -> None:
        """Close a pane and forget every record that points at it."""
        adapter = self.init()
        adapter.close_pane(pane_id)

        state = self.load_state()
        stale = [task_id for task_id, record in state.panes.items() if record.pane_id == pane_id]
        for task_id in stale:
            del state.panes[task_id]
        self.save_state(state)
        logger.debug(f"Closed pane {pane_id}, removed {len(stale)} record(s)")

    def cleanup(self) -> int:
        """Drop records whose pane no longer exists.

        Returns:
            Number of records removed
        """
        adapter = self.init()
        state = self.load_state()
        cleaned = 0

        for task_id in list(state.panes):
            record = state.panes[task_id]
            if adapter.get_pane_info(record.pane_id) is None:
                del state.panes[task_id]
                cleaned += 1

        if cleaned > 0:
            self.save_state(state)
            logger.debug(f"Cleaned up {cleaned} stale pane(s)")
        return cleaned

    def find_pane(self, task_id: str) -> Optional[PaneRecord]:
        """Record tracked for a task, if any."""
        return self.load_state().panes.get(task_id)

    def list_panes(self) -> Dict[str, PaneRecord]:
        """All tracked records keyed by task id."""
        return dict(self.load_state().panes)

    def signal_completion(self, task_id: str, status: str = "done") -> Optional[PaneRecord]:
        """Write status to a task's signal file so its monitor can finish.

        Returns:
            The task's record, or None if the task isn't tracked
        """
        record = self.find_pane(task_id)
        if record is None:
            logger.debug(f"No pane tracked for task {task_id}")
            return None

        signal_file = Path(record.signal_file)
        signal_file.parent.mkdir(parents=True, exist_ok=True)
        signal_file.write_text(f"{status}\n")
        logger.debug(f"Signalled {status} to {signal_file}")
        return record
