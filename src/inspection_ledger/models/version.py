"""Version snapshot and pull history models."""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from inspection_ledger.models.base import DocumentBase, utcnow


class PullAction(StrEnum):
    PULL = "pull"
    RESTORE = "restore"


class VersionSnapshot(DocumentBase):
    """The authoritative copy of an inspection at a given version.

    The current snapshot is stored under the inspection id; every version is
    also archived under its version number.
    """

    inspection_id: str
    version: int
    content: dict[str, Any] = Field(default_factory=dict)
    source_last_updated: datetime | None = None
    pulled_by: str
    pulled_at: datetime = Field(default_factory=utcnow)
    pull_notes: str = ""
    is_restore: bool = False
    restored_from_version: int | None = None


class PullHistoryEntry(DocumentBase):
    """Append-only audit record of a pull or restore."""

    inspection_id: str
    version: int
    action: PullAction
    source_version: int | None = None
    notes: str = ""
    performed_by: str
    performed_at: datetime = Field(default_factory=utcnow)
    source_version_timestamp: datetime | None = None


class ChangeInfo(BaseModel):
    """Result of comparing the live inspection with its current snapshot."""

    is_first_pull: bool = False
    has_changes: bool = False
    original_last_updated: datetime | None = None
    last_pulled: datetime | None = None
    current_version: int = 0
    error: str | None = None


class FieldChange(BaseModel):
    original: Any = None
    updated: Any = None
    changed: bool = True


class ChangeSummary(BaseModel):
    total_changes: int = 0
    has_general_changes: bool = False
    has_structure_changes: bool = False


class VersionComparison(BaseModel):
    general: dict[str, FieldChange] = Field(default_factory=dict)
    structure: dict[str, FieldChange] = Field(default_factory=dict)
    summary: ChangeSummary = Field(default_factory=ChangeSummary)


class PreviewStatistics(BaseModel):
    total_topics: int = 0
    total_items: int = 0
    total_details: int = 0
    last_updated: datetime | None = None


class PreviewData(BaseModel):
    """What a pull would capture, next to what is currently pulled."""

    original: dict[str, Any]
    current: dict[str, Any] | None = None
    is_first_pull: bool
    changes: VersionComparison | None = None
    statistics: PreviewStatistics


class PullResult(BaseModel):
    version: int
    restored_from_version: int | None = None
    snapshot: VersionSnapshot
