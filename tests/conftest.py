"""Shared fixtures for pane viewer tests."""

from typing import List, Optional, Sequence

import pytest

from paneviewer.adapters.base import MultiplexerAdapter, PaneInfo
from paneviewer.host_config import HostConfig
from paneviewer.manager import PaneManager
from paneviewer.models.host_config import HostConfigModel
from paneviewer.store import MemoryStateStore
from paneviewer.utils.exceptions import AdapterOperationError


class FakeAdapter(MultiplexerAdapter):
    """In-memory multiplexer that records every call."""

    name = "fake"
    binary = "fake"

    def __init__(self):
        super().__init__()
        self.live = set()
        self.splits: List[dict] = []
        self.sent: List[tuple] = []
        self.closed: List[str] = []
        self.info_queries: List[str] = []
        self._next_id = 0

    def is_running_inside(self) -> bool:
        return True

    def is_available(self) -> bool:
        return True

    def split_pane(self, direction: str, percent: int, command: Sequence[str]) -> str:
        self._next_id += 1
        pane_id = f"%{self._next_id}"
        self.splits.append({"direction": direction, "percent": percent, "command": list(command)})
        self.live.add(pane_id)
        return pane_id

    def send_keys(self, pane_id: str, text: str) -> None:
        if pane_id not in self.live:
            raise AdapterOperationError(f"can't find pane: {pane_id}")
        self.sent.append((pane_id, text))

    def get_pane_info(self, pane_id: str) -> Optional[PaneInfo]:
        self.info_queries.append(pane_id)
        if pane_id in self.live:
            return PaneInfo(pane_id=pane_id)
        return None

    def close_pane(self, pane_id: str) -> None:
        if pane_id not in self.live:
            raise AdapterOperationError(f"can't find pane: {pane_id}")
        self.live.discard(pane_id)
        self.closed.append(pane_id)


@pytest.fixture
def host_config():
    """Default host config that never touches the user's config file."""
    return HostConfig(HostConfigModel())


@pytest.fixture
def adapter():
    return FakeAdapter()


@pytest.fixture
def store():
    return MemoryStateStore()


@pytest.fixture
def manager(store, adapter, host_config, tmp_path):
    return PaneManager(
        store=store,
        adapter=adapter,
        monitor_script="/opt/pane-viewer/agent-monitor.sh",
        signal_dir=tmp_path / "signals",
        config=host_config,
    )


def make_record(pane_id: str, **extra) -> dict:
    """A pane record as it appears in panes.json."""
    record = {
        "paneId": pane_id,
        "signalFile": f"/tmp/agent-signal-{pane_id}",
        "multiplexer": "fake",
        "agentType": "reviewer",
        "description": "",
        "createdAt": "2025-01-01T00:00:00+00:00",
    }
    record.update(extra)
    return record
