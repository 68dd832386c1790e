"""Repositories for the current version snapshot and the per-version archive."""

from __future__ import annotations

from inspection_ledger.database.repositories.base import BaseRepository
from inspection_ledger.models.version import VersionSnapshot

CURRENT_SNAPSHOTS = "inspections_data"
VERSION_ARCHIVE = "inspection_versions"


class CurrentSnapshotRepository(BaseRepository[VersionSnapshot]):
    """One document per inspection, keyed by the inspection id."""

    collection_name = CURRENT_SNAPSHOTS
    model_class = VersionSnapshot

    async def get_current(self, inspection_id: str) -> VersionSnapshot | None:
        return await self.get(inspection_id, inspection_id)


class VersionArchiveRepository(BaseRepository[VersionSnapshot]):
    """Immutable snapshot bodies, keyed by version number."""

    collection_name = VERSION_ARCHIVE
    model_class = VersionSnapshot

    async def get_version(self, inspection_id: str, version: int) -> VersionSnapshot | None:
        return await self.get(str(version), inspection_id)
