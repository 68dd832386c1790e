"""Release workflow — immutable inspection releases and their delivery state.

A release is created undelivered, can be delivered to the client and the
delivery can be reverted, after which it may be delivered again. Each
transition writes the release and the inspection in one batch.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from inspection_ledger.database.repositories import InspectionRepository, ReleaseRepository
from inspection_ledger.database.store import DocumentStore
from inspection_ledger.errors import InvalidArgumentError, NotFoundError, require_id
from inspection_ledger.models.base import utcnow
from inspection_ledger.models.inspection import Inspection
from inspection_ledger.models.release import Release, ReleaseResult
from inspection_ledger.services.snapshots import next_version, snapshot_content

logger = logging.getLogger(__name__)


class ReleaseWorkflow:
    """Create, deliver and revert releases, and manage the edit block."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._inspections = InspectionRepository(store)
        self._releases = ReleaseRepository(store)

    async def _require_inspection(self, inspection_id: str) -> Inspection:
        inspection = await self._inspections.get_by_id(inspection_id)
        if inspection is None:
            raise NotFoundError(f"inspection {inspection_id} not found")
        return inspection

    async def get_release(self, release_id: str, inspection_id: str) -> Release:
        """Fetch a release, verifying it belongs to the inspection."""
        release_id = require_id(release_id, "release_id")
        inspection_id = require_id(inspection_id, "inspection_id")
        release = await self._releases.get(release_id, inspection_id)
        if release is None or release.inspection_id != inspection_id:
            raise NotFoundError(f"release {release_id} not found for inspection {inspection_id}")
        return release

    async def get_releases(self, inspection_id: str) -> list[Release]:
        inspection_id = require_id(inspection_id, "inspection_id")
        return await self._releases.list_by_inspection(inspection_id)

    async def create_release(
        self,
        inspection_id: str,
        inspection_content: Inspection | Mapping[str, Any],
        notes: str | None,
        user_id: str,
    ) -> ReleaseResult:
        """Store a deep copy of ``inspection_content`` and reopen editing."""
        inspection_id = require_id(inspection_id, "inspection_id")
        user_id = require_id(user_id, "user_id")
        if notes is not None and not isinstance(notes, str):
            raise InvalidArgumentError("notes must be a string")
        if not isinstance(inspection_content, (Inspection, Mapping)):
            raise InvalidArgumentError("inspection_content must be a mapping")

        await self._require_inspection(inspection_id)

        latest = await self._releases.get_latest(inspection_id)
        now = utcnow()
        release = Release(
            inspection_id=inspection_id,
            inspection_snapshot=snapshot_content(inspection_content),
            release_notes=(notes or "").strip(),
            created_by=user_id,
            created_at=now,
            version=next_version(latest.version if latest else None),
        )
        await self._store.commit(
            inspection_id,
            [
                self._releases.create_op(release),
                self._inspections.patch_op(
                    inspection_id,
                    inspection_edit_blocked=False,
                    last_editor=user_id,
                    updated_at=now,
                ),
            ],
        )

        logger.info(
            "Created release %s (version %d) for inspection %s",
            release.id,
            release.version,
            inspection_id,
        )
        return ReleaseResult(release_id=release.id, version=release.version)

    async def deliver_release(self, release_id: str, inspection_id: str, user_id: str) -> Release:
        """Mark a release as the one delivered to the client.

        A release delivered earlier keeps its own delivered flag; only the
        inspection's pointer moves to ``release_id``.
        """
        user_id = require_id(user_id, "user_id")
        release = await self.get_release(release_id, inspection_id)
        inspection = await self._require_inspection(release.inspection_id)

        if inspection.delivered_release_id and inspection.delivered_release_id != release.id:
            logger.warning(
                "Inspection %s: release %s replaces delivered release %s without reverting it",
                inspection.id,
                release.id,
                inspection.delivered_release_id,
            )

        now = utcnow()
        await self._store.commit(
            release.inspection_id,
            [
                self._releases.patch_op(
                    release.id, is_delivered=True, delivered_at=now, delivered_by=user_id
                ),
                self._inspections.patch_op(
                    release.inspection_id,
                    delivered=True,
                    delivered_at=now,
                    delivered_release_id=release.id,
                    last_editor=user_id,
                    updated_at=now,
                ),
            ],
        )

        logger.info(
            "Delivered release %s of inspection %s by %s",
            release.id,
            release.inspection_id,
            user_id,
        )
        return release.model_copy(
            update={"is_delivered": True, "delivered_at": now, "delivered_by": user_id}
        )

    async def revert_delivery(self, release_id: str, inspection_id: str, user_id: str) -> Release:
        """Undo a delivery; the release becomes deliverable again.

        The inspection's delivery fields are cleared only when they point at
        this release (or at nothing), so reverting a superseded release leaves
        the current delivery intact.
        """
        user_id = require_id(user_id, "user_id")
        release = await self.get_release(release_id, inspection_id)
        inspection = await self._require_inspection(release.inspection_id)

        now = utcnow()
        inspection_fields: dict[str, Any] = {"last_editor": user_id, "updated_at": now}
        if inspection.delivered_release_id in (None, release.id):
            inspection_fields.update(delivered=False, delivered_at=None, delivered_release_id=None)

        await self._store.commit(
            release.inspection_id,
            [
                self._releases.patch_op(
                    release.id, is_delivered=False, delivered_at=None, delivered_by=None
                ),
                self._inspections.patch_op(release.inspection_id, **inspection_fields),
            ],
        )

        logger.info(
            "Reverted delivery of release %s of inspection %s by %s",
            release.id,
            release.inspection_id,
            user_id,
        )
        return release.model_copy(
            update={"is_delivered": False, "delivered_at": None, "delivered_by": None}
        )

    async def toggle_edit_block(self, inspection_id: str, blocked: bool, user_id: str) -> bool:
        """Lock or unlock direct edits, independently of any release."""
        inspection_id = require_id(inspection_id, "inspection_id")
        user_id = require_id(user_id, "user_id")
        if not isinstance(blocked, bool):
            raise InvalidArgumentError("blocked must be a boolean")

        await self._require_inspection(inspection_id)
        await self._store.commit(
            inspection_id,
            [
                self._inspections.patch_op(
                    inspection_id,
                    inspection_edit_blocked=blocked,
                    last_editor=user_id,
                    updated_at=utcnow(),
                )
            ],
        )
        logger.info("Inspection %s edit block set to %s by %s", inspection_id, blocked, user_id)
        return blocked
