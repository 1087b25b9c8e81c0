# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT
# See LICENSE file in the project root for full license information.

"""WezTerm adapter (``wezterm cli``)."""

import json
import os
from typing import List, Optional, Sequence

from paneviewer.adapters.base import (
    MultiplexerAdapter,
    PaneInfo,
    normalize_direction,
    validate_percent,
)
from paneviewer.utils.exceptions import AdapterOperationError

SPLIT_FLAGS = {
    "right": "--right",
    "left": "--left",
    "down": "--bottom",
    "up": "--top",
}


class WezTermAdapter(MultiplexerAdapter):
    """Drives WezTerm's multiplexer. Pane ids are integers, kept as strings."""

    name = "wezterm"
    binary = "wezterm"

    def is_running_inside(self) -> bool:
        return bool(os.environ.get("WEZTERM_PANE"))

    def split_pane(self, direction: str, percent: int, command: Sequence[str]) -> str:
        args: List[str] = [
            "cli",
            "split-pane",
            SPLIT_FLAGS[normalize_direction(direction)],
            "--percent",
            str(validate_percent(percent)),
        ]
        if command:
            args += ["--"] + list(command)

        pane_id = self._run(args).strip()
        if not pane_id:
            raise AdapterOperationError("wezterm split-pane returned no pane id", [self.binary] + args)
        return pane_id

    def send_keys(self, pane_id: str, text: str) -> None:
        # Without bracketed paste a carriage return is what submits a line
        self._run(["cli", "send-text", "--pane-id", pane_id, "--no-paste", text.replace("\n", "\r")])

    def get_pane_info(self, pane_id: str) -> Optional[PaneInfo]:
        output = self._run(["cli", "list", "--format", "json"])
        try:
            panes = json.loads(output or "[]")
        except json.JSONDecodeError as e:
            raise AdapterOperationError(f"Unexpected wezterm list output: {e}") from e

        for pane in panes:
            if str(pane.get("pane_id")) != str(pane_id):
                continue
            return PaneInfo(
                pane_id=str(pane_id),
                title=pane.get("title", ""),
                extra={
                    key: str(pane[key])
                    for key in ("tab_id", "window_id", "workspace", "cwd")
                    if key in pane
                },
            )
        return None

    def close_pane(self, pane_id: str) -> None:
        self._run(["cli", "kill-pane", "--pane-id", pane_id])
