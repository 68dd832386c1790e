"""Inspection versioning — pull live inspections into an authoritative snapshot.

The live record lives in ``inspections``. A pull copies it into the current
snapshot (``inspections_data``), archives the body under its version number and
appends a history entry, all in one batch. Drift is detected by comparing the
live ``updated_at`` with the ``updated_at`` captured at pull time.

Concurrent callers are not coordinated: the last write wins, and an edit that
lands between the read and the write of a pull is not captured.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from inspection_ledger.database.repositories import (
    CurrentSnapshotRepository,
    InspectionRepository,
    PullHistoryRepository,
    VersionArchiveRepository,
)
from inspection_ledger.database.repositories.inspections import INSPECTIONS
from inspection_ledger.database.store import DocumentStore, Subscription
from inspection_ledger.errors import InvalidArgumentError, LedgerError, NotFoundError, require_id
from inspection_ledger.models.base import as_utc, utcnow
from inspection_ledger.models.inspection import Inspection
from inspection_ledger.models.version import (
    ChangeInfo,
    PreviewData,
    PullAction,
    PullHistoryEntry,
    PullResult,
    VersionSnapshot,
)
from inspection_ledger.services.snapshots import (
    compare_versions,
    next_version,
    snapshot_content,
    statistics,
)

logger = logging.getLogger(__name__)

ChangeHandler = Callable[[ChangeInfo], Awaitable[None] | None]


def _notes(notes: str | None) -> str:
    if notes is None:
        return ""
    if not isinstance(notes, str):
        raise InvalidArgumentError("notes must be a string")
    return notes.strip()


def _version_number(version: Any) -> int:
    if isinstance(version, bool) or not isinstance(version, int) or version <= 0:
        raise InvalidArgumentError(f"invalid version: {version!r}")
    return version


class VersionStore:
    """Pull, inspect and restore versions of an inspection."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._inspections = InspectionRepository(store)
        self._current = CurrentSnapshotRepository(store)
        self._archive = VersionArchiveRepository(store)
        self._history = PullHistoryRepository(store)

    async def _require_inspection(self, inspection_id: str) -> Inspection:
        inspection = await self._inspections.get_by_id(inspection_id)
        if inspection is None:
            raise NotFoundError(f"inspection {inspection_id} not found")
        return inspection

    async def check_for_changes(self, inspection_id: str) -> ChangeInfo:
        """Compare the live inspection with the last pull. Never raises."""
        try:
            inspection_id = require_id(inspection_id, "inspection_id")
            inspection = await self._require_inspection(inspection_id)
            current = await self._current.get_current(inspection_id)
        except LedgerError as exc:
            logger.warning("Change check failed for %s: %s", inspection_id, exc)
            return ChangeInfo(error=str(exc))

        live_updated = as_utc(inspection.updated_at) if inspection.updated_at else None
        if current is None:
            return ChangeInfo(
                is_first_pull=True, has_changes=True, original_last_updated=live_updated
            )

        last_pulled = as_utc(current.source_last_updated) if current.source_last_updated else None
        # Without a live timestamp there is nothing to compare against.
        drifted = live_updated is not None and (
            last_pulled is None or live_updated > last_pulled
        )
        return ChangeInfo(
            has_changes=drifted,
            original_last_updated=live_updated,
            last_pulled=last_pulled,
            current_version=current.version,
        )

    async def generate_preview_data(self, inspection_id: str) -> PreviewData:
        """Show what a pull would capture, without writing anything."""
        inspection_id = require_id(inspection_id, "inspection_id")
        inspection = await self._require_inspection(inspection_id)
        current = await self._current.get_current(inspection_id)

        original = snapshot_content(inspection)
        return PreviewData(
            original=original,
            current=current.content if current else None,
            is_first_pull=current is None,
            changes=compare_versions(original, current.content) if current else None,
            statistics=statistics(inspection),
        )

    async def get_current_version(self, inspection_id: str) -> VersionSnapshot | None:
        inspection_id = require_id(inspection_id, "inspection_id")
        return await self._current.get_current(inspection_id)

    async def pull_inspection_data(
        self, inspection_id: str, user_id: str, notes: str | None = ""
    ) -> PullResult:
        """Snapshot the live inspection as a new version.

        Every call appends a version and a history entry, even when nothing
        changed since the previous pull.
        """
        inspection_id = require_id(inspection_id, "inspection_id")
        user_id = require_id(user_id, "user_id")
        notes = _notes(notes)

        inspection = await self._require_inspection(inspection_id)
        current = await self._current.get_current(inspection_id)
        version = next_version(current.version if current else None)
        now = utcnow()

        snapshot = VersionSnapshot(
            id=inspection_id,
            inspection_id=inspection_id,
            version=version,
            content=snapshot_content(inspection),
            source_last_updated=inspection.updated_at,
            pulled_by=user_id,
            pulled_at=now,
            pull_notes=notes,
        )
        entry = PullHistoryEntry(
            inspection_id=inspection_id,
            version=version,
            action=PullAction.PULL,
            notes=notes,
            performed_by=user_id,
            performed_at=now,
            source_version_timestamp=inspection.updated_at,
        )
        await self._commit_version(snapshot, entry)

        logger.info("Pulled inspection %s as version %d by %s", inspection_id, version, user_id)
        return PullResult(version=version, snapshot=snapshot)

    async def get_pull_history(self, inspection_id: str) -> list[PullHistoryEntry]:
        inspection_id = require_id(inspection_id, "inspection_id")
        return await self._history.list_by_inspection(inspection_id)

    async def get_version_snapshot(self, inspection_id: str, version: int) -> VersionSnapshot:
        inspection_id = require_id(inspection_id, "inspection_id")
        version = _version_number(version)
        snapshot = await self._archive.get_version(inspection_id, version)
        if snapshot is None:
            raise NotFoundError(f"version {version} of inspection {inspection_id} not found")
        return snapshot

    async def restore_version(
        self,
        inspection_id: str,
        target_version: int,
        user_id: str,
        notes: str | None = "",
    ) -> PullResult:
        """Make an archived version current again under a new version number."""
        inspection_id = require_id(inspection_id, "inspection_id")
        user_id = require_id(user_id, "user_id")
        notes = _notes(notes)

        target = await self.get_version_snapshot(inspection_id, target_version)
        inspection = await self._require_inspection(inspection_id)
        current = await self._current.get_current(inspection_id)
        version = next_version(max(target.version, current.version if current else 0))
        now = utcnow()

        snapshot = VersionSnapshot(
            id=inspection_id,
            inspection_id=inspection_id,
            version=version,
            content=target.model_copy(deep=True).content,
            source_last_updated=inspection.updated_at,
            pulled_by=user_id,
            pulled_at=now,
            pull_notes=notes,
            is_restore=True,
            restored_from_version=target.version,
        )
        entry = PullHistoryEntry(
            inspection_id=inspection_id,
            version=version,
            action=PullAction.RESTORE,
            source_version=target.version,
            notes=notes,
            performed_by=user_id,
            performed_at=now,
            source_version_timestamp=inspection.updated_at,
        )
        await self._commit_version(snapshot, entry)

        logger.info(
            "Restored inspection %s version %d as version %d by %s",
            inspection_id,
            target.version,
            version,
            user_id,
        )
        return PullResult(version=version, restored_from_version=target.version, snapshot=snapshot)

    async def _commit_version(self, snapshot: VersionSnapshot, entry: PullHistoryEntry) -> None:
        archived = snapshot.model_copy(update={"id": str(snapshot.version)})
        await self._store.commit(
            snapshot.inspection_id,
            [
                self._current.upsert_op(snapshot, snapshot.inspection_id),
                self._archive.create_op(archived),
                self._history.create_op(entry),
            ],
        )

    def create_change_listener(
        self, inspection_id: str, on_change_detected: ChangeHandler
    ) -> Subscription:
        """Call ``on_change_detected`` whenever the live record drifts from the last pull.

        Must be called from a running event loop. The handler may fire several
        times for one burst of edits and should stay cheap.
        """
        inspection_id = require_id(inspection_id, "inspection_id")

        async def _on_record(_record: dict[str, Any]) -> None:
            info = await self.check_for_changes(inspection_id)
            if not info.has_changes or not subscription.active:
                return
            result = on_change_detected(info)
            if inspect.isawaitable(result):
                await result

        subscription = self._store.subscribe(
            INSPECTIONS, inspection_id, partition_key=inspection_id, callback=_on_record
        )
        logger.debug("Listening for changes to inspection %s", inspection_id)
        return subscription
