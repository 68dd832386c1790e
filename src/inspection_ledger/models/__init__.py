"""Data models for ledger document types."""

from inspection_ledger.models.inspection import Inspection, ItemDetail, Topic, TopicItem
from inspection_ledger.models.release import Release, ReleaseResult
from inspection_ledger.models.version import (
    ChangeInfo,
    PreviewData,
    PreviewStatistics,
    PullAction,
    PullHistoryEntry,
    PullResult,
    VersionComparison,
    VersionSnapshot,
)

__all__ = [
    "ChangeInfo",
    "Inspection",
    "ItemDetail",
    "PreviewData",
    "PreviewStatistics",
    "PullAction",
    "PullHistoryEntry",
    "PullResult",
    "Release",
    "ReleaseResult",
    "Topic",
    "TopicItem",
    "VersionComparison",
    "VersionSnapshot",
]
