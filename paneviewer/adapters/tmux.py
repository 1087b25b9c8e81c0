# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""tmux adapter."""

import os
import shlex
from typing import List, Optional, Sequence

from paneviewer.adapters.base import (
    MultiplexerAdapter,
    PaneInfo,
    normalize_direction,
    validate_percent,
)
from paneviewer.utils.exceptions import AdapterOperationError

# tab separated, pane titles may contain colons
PANE_FORMAT = "#{pane_id}\t#{pane_pid}\t#{pane_title}"

SPLIT_FLAGS = {
    "right": ["-h"],
    "left": ["-h", "-b"],
    "down": ["-v"],
    "up": ["-v", "-b"],
}


class TmuxAdapter(MultiplexerAdapter):
    """Drives tmux through its CLI. Pane ids look like ``%42``."""

    name = "tmux"
    binary = "tmux"

    def is_running_inside(self) -> bool:
        return bool(os.environ.get("TMUX"))

    def split_pane(self, direction: str, percent: int, command: Sequence[str]) -> str:
        args: List[str] = ["split-window"]
        args += SPLIT_FLAGS[normalize_direction(direction)]
        args += ["-l", f"{validate_percent(percent)}%", "-d", "-P", "-F", "#{pane_id}"]
        if command:
            args.append(shlex.join(command))

        pane_id = self._run(args).strip()
        if not pane_id:
            raise AdapterOperationError("tmux split-window returned no pane id", [self.binary] + args)
        return pane_id

    def send_keys(self, pane_id: str, text: str) -> None:
        # -l sends text literally; newlines become Enter key presses
        lines = text.split("\n")
        for i, line in enumerate(lines):
            if line:
                self._run(["send-keys", "-t", pane_id, "-l", line])
            if i < len(lines) - 1:
                self._run(["send-keys", "-t", pane_id, "Enter"])

    def get_pane_info(self, pane_id: str) -> Optional[PaneInfo]:
        try:
            output = self._run(["list-panes", "-a", "-F", PANE_FORMAT])
        except AdapterOperationError as e:
            # No server means no panes at all
            if "no server running" in e.stderr or "error connecting" in e.stderr:
                return None
            raise

        for line in output.splitlines():
            parts = line.split("\t", 2)
            if parts[0] != pane_id:
                continue
            pid = int(parts[1]) if len(parts) > 1 and parts[1].isdigit() else None
            title = parts[2] if len(parts) > 2 else ""
            return PaneInfo(pane_id=pane_id, pid=pid, title=title)
        return None

    def close_pane(self, pane_id: str) -> None:
        self._run(["kill-pane", "-t", pane_id])
