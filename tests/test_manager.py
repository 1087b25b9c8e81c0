# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""Tests for paneviewer/manager.py"""

import json
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from paneviewer.manager import PaneManager
from paneviewer.models.host_config import HostConfigModel
from paneviewer.host_config import HostConfig
from paneviewer.models.state import PaneConfig, PaneRecord, RegistryState
from paneviewer.store import JsonFileStateStore, MemoryStateStore
from paneviewer.utils.exceptions import (
    AdapterOperationError,
    NoAdapterAvailableError,
    StateWriteError,
)
from tests.conftest import FakeAdapter, make_record


class TestInit:
    """Adapter selection and storage setup"""

    def test_selects_adapter_once(self, store, host_config):
        adapter = FakeAdapter()
        selector = Mock(return_value=adapter)
        manager = PaneManager(store=store, selector=selector, config=host_config)

        results = [manager.init() for _ in range(3)]

        selector.assert_called_once()
        assert all(result is adapter for result in results)
        assert manager.adapter is adapter

    def test_no_adapter_raises(self, store, host_config):
        manager = PaneManager(store=store, selector=Mock(return_value=None), config=host_config)

        with pytest.raises(NoAdapterAvailableError):
            manager.init()
        assert manager.initialized is False

    def test_retries_after_failed_detection(self, store, host_config):
        adapter = FakeAdapter()
        selector = Mock(side_effect=[None, adapter])
        manager = PaneManager(store=store, selector=selector, config=host_config)

        with pytest.raises(NoAdapterAvailableError):
            manager.init()
        assert manager.init() is adapter
        assert selector.call_count == 2

    def test_injected_adapter_skips_detection(self, store, adapter, host_config):
        selector = Mock()
        manager = PaneManager(store=store, adapter=adapter, selector=selector, config=host_config)

        assert manager.init() is adapter
        selector.assert_not_called()

    def test_creates_state_directory(self, tmp_path, adapter, host_config):
        state_file = tmp_path / "nested" / "dir" / "panes.json"
        manager = PaneManager(
            store=JsonFileStateStore(state_file), adapter=adapter, config=host_config
        )

        manager.init()

        assert state_file.parent.is_dir()

    def test_operations_fail_without_adapter(self, store, host_config):
        manager = PaneManager(store=store, selector=Mock(return_value=None), config=host_config)

        with pytest.raises(NoAdapterAvailableError):
            manager.get_or_create_pane(task_id="T1")
        with pytest.raises(NoAdapterAvailableError):
            manager.cleanup()
        assert store.saves == 0


class TestLoadState:
    """Fail-open state loading"""

    def _manager(self, path: Path, adapter, host_config) -> PaneManager:
        return PaneManager(store=JsonFileStateStore(path), adapter=adapter, config=host_config)

    def test_missing_file(self, tmp_path, adapter, host_config):
        state = self._manager(tmp_path / "panes.json", adapter, host_config).load_state()

        assert state.panes == {}
        assert state.last_updated is None

    def test_malformed_json(self, tmp_path, adapter, host_config):
        path = tmp_path / "panes.json"
        path.write_text("{not json")

        state = self._manager(path, adapter, host_config).load_state()

        assert state == RegistryState()

    def test_wrong_shape(self, tmp_path, adapter, host_config):
        path = tmp_path / "panes.json"
        path.write_text(json.dumps({"panes": ["not", "a", "mapping"]}))

        state = self._manager(path, adapter, host_config).load_state()

        assert state == RegistryState()

    def test_not_an_object(self, tmp_path, adapter, host_config):
        path = tmp_path / "panes.json"
        path.write_text("[]")

        assert self._manager(path, adapter, host_config).load_state() == RegistryState()

    def test_reads_existing_records(self, adapter, host_config):
        store = MemoryStateStore({"panes": {"T1": make_record("%3")}, "lastUpdated": None})
        manager = PaneManager(store=store, adapter=adapter, config=host_config)

        state = manager.load_state()

        assert state.panes["T1"].pane_id == "%3"
        assert state.panes["T1"].agent_type == "reviewer"

    def test_invalid_record_does_not_drop_the_rest(self, adapter, host_config):
        store = MemoryStateStore({
            "panes": {"T1": make_record("%1"), "T2": {"paneId": "%2"}},
            "lastUpdated": "2025-01-01T00:00:00+00:00",
        })
        manager = PaneManager(store=store, adapter=adapter, config=host_config)

        state = manager.load_state()

        assert set(state.panes) == {"T1"}
        assert state.last_updated == "2025-01-01T00:00:00+00:00"

    def test_null_labels_read_as_defaults(self, adapter, host_config):
        store = MemoryStateStore({
            "panes": {
                "T1": make_record("%1"),
                "T2": make_record("%2", description=None, agentType=None),
            },
        })
        manager = PaneManager(store=store, adapter=adapter, config=host_config)

        state = manager.load_state()

        assert state.panes["T2"].description == ""
        assert state.panes["T2"].agent_type == "unknown"

    def test_new_pane_keeps_existing_records(self, adapter, host_config, tmp_path):
        store = MemoryStateStore({
            "panes": {"T1": make_record("%1"), "T2": make_record("%2", signalFile=7)},
        })
        manager = PaneManager(store=store, adapter=adapter, config=host_config, signal_dir=tmp_path)

        manager.get_or_create_pane(task_id="T3")

        assert set(store.document["panes"]) == {"T1", "T3"}

    def test_bad_last_updated(self, adapter, host_config):
        store = MemoryStateStore({"panes": {"T1": make_record("%1")}, "lastUpdated": 12})
        manager = PaneManager(store=store, adapter=adapter, config=host_config)

        state = manager.load_state()

        assert state.last_updated is None
        assert set(state.panes) == {"T1"}


class TestSaveState:
    """Whole-document persistence"""

    def test_round_trip(self, tmp_path, adapter, host_config):
        manager = PaneManager(
            store=JsonFileStateStore(tmp_path / "panes.json"), adapter=adapter, config=host_config
        )
        state = RegistryState(panes={"T1": PaneRecord.model_validate(make_record("%1"))})

        manager.save_state(state)
        loaded = manager.load_state()

        assert loaded == state
        assert loaded.last_updated is not None

    def test_stamps_last_updated(self, manager, store):
        state = RegistryState()

        manager.save_state(state)

        assert state.last_updated is not None
        assert store.document["lastUpdated"] == state.last_updated

    def test_uses_camel_case_keys(self, tmp_path, adapter, host_config):
        path = tmp_path / "panes.json"
        manager = PaneManager(store=JsonFileStateStore(path), adapter=adapter, config=host_config)

        manager.save_state(RegistryState(panes={"T1": PaneRecord.model_validate(make_record("%1"))}))

        document = json.loads(path.read_text())
        assert set(document) == {"panes", "lastUpdated"}
        assert set(document["panes"]["T1"]) == {
            "paneId", "signalFile", "multiplexer", "agentType", "description", "createdAt"
        }

    def test_keeps_unknown_record_fields(self, adapter, host_config):
        store = MemoryStateStore({"panes": {"T1": make_record("%1", color="blue")}})
        manager = PaneManager(store=store, adapter=adapter, config=host_config)

        manager.save_state(manager.load_state())

        assert store.document["panes"]["T1"]["color"] == "blue"

    def test_write_error_propagates(self, adapter, host_config):
        store = Mock(spec=MemoryStateStore)
        store.save.side_effect = StateWriteError("disk full")
        manager = PaneManager(store=store, adapter=adapter, config=host_config)

        with pytest.raises(StateWriteError):
            manager.save_state(RegistryState())


class TestGetOrCreatePane:
    """Spawning and tracking panes"""

    def test_tracks_task(self, manager, adapter, store):
        pane_id = manager.get_or_create_pane(task_id="T1", agent_type="reviewer", description="Review")

        panes = store.document["panes"]
        assert list(panes) == ["T1"]
        assert panes["T1"]["paneId"] == pane_id
        assert panes["T1"]["multiplexer"] == "fake"
        assert panes["T1"]["agentType"] == "reviewer"
        assert panes["T1"]["description"] == "Review"
        assert panes["T1"]["signalFile"] == str(manager.signal_file_for("T1"))
        assert store.document["lastUpdated"] is not None

    def test_untracked_pane_leaves_state_alone(self, manager, adapter, store):
        pane_id = manager.get_or_create_pane(agent_type="reviewer")

        assert pane_id in adapter.live
        assert store.saves == 0
        assert store.document is None

    def test_command_argument_order(self, manager, adapter):
        manager.get_or_create_pane(
            task_id="T1",
            agent_type="reviewer",
            description="Check the diff",
            transcript_path="/home/me/.claude/projects/x/session.jsonl",
            auto_close_timeout=30,
        )

        command = adapter.splits[0]["command"]
        assert command == [
            "/opt/pane-viewer/agent-monitor.sh",
            "reviewer",
            "Check the diff",
            str(manager.signal_file_for("T1")),
            "/home/me/.claude/projects/x",
            "T1",
            "30",
        ]

    def test_task_id_truncated_to_12_chars(self, manager, adapter):
        manager.get_or_create_pane(task_id="toolu_01ABCDEFGHIJKLMNOP")

        assert adapter.splits[0]["command"][5] == "toolu_01ABCD"
        assert len(adapter.splits[0]["command"][5]) == 12

    def test_no_transcript_passes_empty_dir(self, manager, adapter):
        manager.get_or_create_pane(task_id="T1")

        assert adapter.splits[0]["command"][4] == ""

    def test_layout_defaults_from_config(self, manager, adapter):
        manager.get_or_create_pane(task_id="T1")

        assert adapter.splits[0]["direction"] == "right"
        assert adapter.splits[0]["percent"] == 40
        assert adapter.splits[0]["command"][6] == "0"

    def test_layout_defaults_from_custom_config(self, store, adapter, tmp_path):
        config = HostConfig(HostConfigModel.model_validate(
            {"pane": {"direction": "down", "percent": 25, "auto_close_timeout": 10}}
        ))
        manager = PaneManager(store=store, adapter=adapter, config=config, signal_dir=tmp_path)

        manager.get_or_create_pane(PaneConfig(task_id="T1"))

        assert adapter.splits[0]["direction"] == "down"
        assert adapter.splits[0]["percent"] == 25
        assert adapter.splits[0]["command"][6] == "10"

    def test_explicit_layout(self, manager, adapter):
        manager.get_or_create_pane(PaneConfig(direction="left", percent=30), task_id="T1")

        assert adapter.splits[0]["direction"] == "left"
        assert adapter.splits[0]["percent"] == 30

    def test_same_task_overwrites_record(self, manager, adapter, store):
        first = manager.get_or_create_pane(task_id="T1", description="first")
        second = manager.get_or_create_pane(task_id="T1", description="second")

        assert first != second
        assert len(adapter.splits) == 2
        assert store.document["panes"]["T1"]["paneId"] == second
        assert store.document["panes"]["T1"]["description"] == "second"

    def test_keeps_other_tasks(self, manager, store):
        manager.get_or_create_pane(task_id="T1")
        manager.get_or_create_pane(task_id="T2")

        assert set(store.document["panes"]) == {"T1", "T2"}

    def test_reuse_returns_live_pane(self, manager, adapter):
        first = manager.get_or_create_pane(task_id="T1")

        again = manager.get_or_create_pane(task_id="T1", reuse=True)

        assert again == first
        assert len(adapter.splits) == 1

    def test_reuse_spawns_when_pane_is_gone(self, manager, adapter, store):
        first = manager.get_or_create_pane(task_id="T1")
        adapter.live.discard(first)

        again = manager.get_or_create_pane(task_id="T1", reuse=True)

        assert again != first
        assert store.document["panes"]["T1"]["paneId"] == again

    def test_split_failure_leaves_state_alone(self, manager, adapter, store):
        adapter.split_pane = Mock(side_effect=AdapterOperationError("no space for new pane"))

        with pytest.raises(AdapterOperationError):
            manager.get_or_create_pane(task_id="T1")
        assert store.document is None


class TestSignalFile:
    """Signal file naming"""

    def test_deterministic_for_task(self, manager):
        assert manager.signal_file_for("T1") == manager.signal_file_for("T1")
        assert manager.signal_file_for("T1").name == "agent-signal-T1"

    def test_distinct_tasks(self, manager):
        assert manager.signal_file_for("T1") != manager.signal_file_for("T2")

    def test_unique_without_task(self, manager):
        with patch("paneviewer.manager.time.time_ns", side_effect=[1000, 2000]):
            first = manager.signal_file_for()
            second = manager.signal_file_for()

        assert first != second

    def test_path_separators_stay_in_signal_dir(self, manager):
        path = manager.signal_file_for("../../etc/passwd")

        assert path.parent == manager.signal_dir

    def test_sanitized_ids_do_not_collide(self, manager):
        assert manager.signal_file_for("T/1") != manager.signal_file_for("T_1")
        assert manager.signal_file_for("T/1") == manager.signal_file_for("T/1")
        assert manager.signal_file_for("T_1").name == "agent-signal-T_1"


class TestSendMessage:
    """Sending input to panes"""

    def test_appends_newline(self, manager, adapter):
        pane_id = manager.get_or_create_pane(task_id="T1")

        manager.send_message(pane_id, "hello")

        assert adapter.sent == [(pane_id, "hello\n")]

    def test_does_not_touch_state(self, manager, adapter, store):
        pane_id = manager.get_or_create_pane(task_id="T1")
        saves = store.saves

        manager.send_message(pane_id, "hello")

        assert store.saves == saves

    def test_adapter_error_propagates(self, manager):
        with pytest.raises(AdapterOperationError):
            manager.send_message("%999", "hello")


class TestClosePane:
    """Explicit close"""

    def test_removes_record(self, manager, adapter, store):
        pane_id = manager.get_or_create_pane(task_id="T1")
        manager.get_or_create_pane(task_id="T2")

        manager.close_pane(pane_id)

        assert adapter.closed == [pane_id]
        assert set(store.document["panes"]) == {"T2"}

    def test_removes_all_matching_records(self, adapter, host_config):
        adapter.live.update({"%1", "%2"})
        store = MemoryStateStore({
            "panes": {
                "T1": make_record("%1"),
                "T2": make_record("%1"),
                "T3": make_record("%2"),
            },
            "lastUpdated": None,
        })
        manager = PaneManager(store=store, adapter=adapter, config=host_config)

        manager.close_pane("%1")

        assert set(store.document["panes"]) == {"T3"}

    def test_untracked_pane(self, manager, adapter, store):
        manager.get_or_create_pane(task_id="T1")
        untracked = manager.get_or_create_pane()

        manager.close_pane(untracked)

        assert set(store.document["panes"]) == {"T1"}

    def test_adapter_error_propagates_and_keeps_state(self, manager, store):
        manager.get_or_create_pane(task_id="T1")
        saves = store.saves

        with pytest.raises(AdapterOperationError):
            manager.close_pane("%999")
        assert store.saves == saves
        assert "T1" in store.document["panes"]


class TestCleanup:
    """Reconciliation against live panes"""

    def test_removes_dead_records(self, adapter, host_config):
        adapter.live.add("%2")
        store = MemoryStateStore({
            "panes": {
                "T1": make_record("%1"),
                "T2": make_record("%2"),
                "T3": make_record("%3"),
            },
            "lastUpdated": None,
        })
        manager = PaneManager(store=store, adapter=adapter, config=host_config)

        assert manager.cleanup() == 2
        assert set(store.document["panes"]) == {"T2"}
        assert store.saves == 1

        assert manager.cleanup() == 0
        assert store.saves == 1

    def test_one_query_per_record(self, adapter, host_config):
        store = MemoryStateStore({"panes": {"T1": make_record("%1"), "T2": make_record("%2")}})
        manager = PaneManager(store=store, adapter=adapter, config=host_config)

        manager.cleanup()

        assert sorted(adapter.info_queries) == ["%1", "%2"]

    def test_empty_state(self, manager, store):
        assert manager.cleanup() == 0
        assert store.saves == 0

    def test_adapter_error_propagates(self, adapter, host_config):
        store = MemoryStateStore({"panes": {"T1": make_record("%1")}})
        adapter.get_pane_info = Mock(side_effect=AdapterOperationError("server exited"))
        manager = PaneManager(store=store, adapter=adapter, config=host_config)

        with pytest.raises(AdapterOperationError):
            manager.cleanup()
        assert store.saves == 0


class TestLookup:
    """find_pane, list_panes and signal_completion"""

    def test_find_pane(self, manager):
        pane_id = manager.get_or_create_pane(task_id="T1")

        assert manager.find_pane("T1").pane_id == pane_id
        assert manager.find_pane("T2") is None

    def test_list_panes(self, manager):
        manager.get_or_create_pane(task_id="T1")
        manager.get_or_create_pane(task_id="T2")

        assert set(manager.list_panes()) == {"T1", "T2"}

    def test_signal_completion_writes_status(self, manager):
        manager.get_or_create_pane(task_id="T1")

        record = manager.signal_completion("T1", "failed")

        assert Path(record.signal_file).read_text() == "failed\n"

    def test_signal_completion_untracked(self, manager):
        assert manager.signal_completion("nope") is None
