"""Snapshot helpers: schema-aware copies, version numbers and comparisons."""

from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from inspection_ledger.errors import InvalidArgumentError
from inspection_ledger.models.inspection import Inspection
from inspection_ledger.models.version import (
    ChangeSummary,
    FieldChange,
    PreviewStatistics,
    VersionComparison,
)

GENERAL_FIELDS = ("title", "area", "observation")


def snapshot_content(content: Inspection | Mapping[str, Any]) -> dict[str, Any]:
    """Return an independent JSON copy of inspection content.

    Content is validated against :class:`Inspection` so datetimes and nested
    topics serialize consistently. Only the fields present in ``content`` are
    copied; model defaults are never added and unknown fields survive.
    """
    if isinstance(content, Inspection):
        inspection = content
    else:
        try:
            inspection = Inspection.model_validate(dict(content))
        except ValidationError as exc:
            raise InvalidArgumentError(f"invalid inspection content: {exc}") from exc
    return inspection.model_dump(mode="json", exclude_unset=True)


def next_version(current: int | None) -> int:
    """Millisecond clock value, bumped past ``current`` so versions always increase."""
    now_ms = time.time_ns() // 1_000_000
    return max(now_ms, (current or 0) + 1)


def compare_versions(live: Mapping[str, Any], pulled: Mapping[str, Any]) -> VersionComparison:
    """Describe how the live inspection differs from the pulled copy."""
    comparison = VersionComparison()
    summary = ChangeSummary()

    for name in GENERAL_FIELDS:
        if live.get(name) != pulled.get(name):
            comparison.general[name] = FieldChange(
                original=pulled.get(name) or "", updated=live.get(name) or ""
            )
            summary.total_changes += 1
            summary.has_general_changes = True

    live_topics = live.get("topics") or []
    pulled_topics = pulled.get("topics") or []
    if live_topics != pulled_topics:
        comparison.structure["topics"] = FieldChange(original=pulled_topics, updated=live_topics)
        summary.total_changes += 1
        summary.has_structure_changes = True

    comparison.summary = summary
    return comparison


def statistics(inspection: Inspection) -> PreviewStatistics:
    return PreviewStatistics(
        total_topics=len(inspection.topics),
        total_items=sum(topic.item_count for topic in inspection.topics),
        total_details=sum(topic.detail_count for topic in inspection.topics),
        last_updated=inspection.updated_at,
    )
