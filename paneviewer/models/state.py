# Copyright (c) 2025 Marc Schütze <scharc@gmail.com>
# SPDX-License-Identifier: MIT

"""Pydantic models for the persisted pane registry (panes.json)."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from paneviewer.models.host_config import Direction


def utc_now() -> str:
    """Current time as an ISO-8601 UTC string."""
    return datetime.now(timezone.utc).isoformat()


class PaneRecord(BaseModel):
    """A tracked pane, keyed by task id in RegistryState.panes."""

    pane_id: str = Field(alias="paneId")
    signal_file: str = Field(alias="signalFile")
    multiplexer: str
    agent_type: str = Field(default="unknown", alias="agentType")
    description: str = ""
    created_at: str = Field(default_factory=utc_now, alias="createdAt")

    model_config = ConfigDict(populate_by_name=True, extra="allow", frozen=True)

    @field_validator("agent_type", "description", mode="before")
    @classmethod
    def _null_labels(cls, value, info):
        # older writers stored null for labels they were not given
        if value is None:
            return cls.model_fields[info.field_name].default
        return value


class RegistryState(BaseModel):
    """The whole state document. Written and read as one unit."""

    panes: Dict[str, PaneRecord] = Field(default_factory=dict)
    last_updated: Optional[str] = Field(default=None, alias="lastUpdated")

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_document(self) -> Dict[str, Any]:
        """Serialize using the on-disk (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)


class PaneConfig(BaseModel):
    """Request to spawn a monitor pane.

    Fields left as None fall back to the host configuration defaults.
    """

    direction: Optional[Direction] = None
    percent: Optional[int] = Field(default=None, ge=1, le=99)
    task_id: Optional[str] = None
    agent_type: str = "unknown"
    description: str = ""
    transcript_path: str = ""
    auto_close_timeout: Optional[int] = Field(default=None, ge=0)
    reuse: bool = False
