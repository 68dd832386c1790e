"""Tests for document model defaults and fields."""

from datetime import datetime

import pytest

from inspection_ledger.models import (
    ChangeInfo,
    Inspection,
    PullAction,
    PullHistoryEntry,
    Release,
    Topic,
    VersionSnapshot,
)
from inspection_ledger.models.base import as_utc


class TestInspectionModel:
    """Test the Inspection document model."""

    def test_defaults(self) -> None:
        """Verify workflow defaults on a new inspection."""
        inspection = Inspection(id="I1")

        assert inspection.inspection_edit_blocked is False
        assert inspection.delivered is False
        assert inspection.delivered_at is None
        assert inspection.delivered_release_id is None
        assert inspection.topics == []
        assert inspection.updated_at is None

    def test_keeps_unknown_fields(self) -> None:
        """Verify fields outside the known shape are preserved."""
        inspection = Inspection.model_validate({"id": "I1", "client_ref": "ACME"})
        assert inspection.model_dump()["client_ref"] == "ACME"

    def test_topic_counts(self) -> None:
        """Verify item and detail counts for both topic shapes."""
        nested = Topic(items=[{"details": [{}, {}]}, {"details": [{}]}])
        direct = Topic(direct_details=True, details=[{}, {}], items=[{"details": [{}]}])

        assert (nested.item_count, nested.detail_count) == (2, 3)
        assert (direct.item_count, direct.detail_count) == (0, 2)


class TestVersionModels:
    """Test version snapshot and history models."""

    def test_snapshot_defaults(self) -> None:
        """Verify snapshot defaults."""
        snapshot = VersionSnapshot(inspection_id="I1", version=1, pulled_by="u1")

        assert snapshot.content == {}
        assert snapshot.pull_notes == ""
        assert snapshot.is_restore is False
        assert snapshot.restored_from_version is None

    @pytest.mark.parametrize("action", list(PullAction))
    def test_history_actions(self, action: PullAction) -> None:
        """Verify history entries accept every action."""
        entry = PullHistoryEntry(inspection_id="I1", version=1, action=action, performed_by="u1")
        assert entry.action == action

    def test_change_info_defaults(self) -> None:
        """Verify an empty change info reports nothing."""
        info = ChangeInfo()
        assert (info.is_first_pull, info.has_changes, info.error) == (False, False, None)


class TestReleaseModel:
    """Test the Release document model."""

    def test_defaults(self) -> None:
        """Verify a new release is undelivered."""
        release = Release(inspection_id="I1", created_by="u1", version=1)

        assert release.is_delivered is False
        assert release.delivered_at is None
        assert release.delivered_by is None
        assert release.inspection_snapshot == {}
        assert release.id


def test_as_utc_assumes_utc_for_naive() -> None:
    naive = datetime(2026, 1, 1, 12, 0)  # noqa: DTZ001
    assert as_utc(naive).utcoffset().total_seconds() == 0
