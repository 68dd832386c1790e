"""Repository for inspection releases."""

from __future__ import annotations

from inspection_ledger.database.repositories.base import BaseRepository
from inspection_ledger.models.release import Release

RELEASES = "inspection_releases"


class ReleaseRepository(BaseRepository[Release]):
    collection_name = RELEASES
    model_class = Release

    async def list_by_inspection(self, inspection_id: str) -> list[Release]:
        """Fetch every release of an inspection, newest first."""
        return await self.query(inspection_id, order_by="version")

    async def get_latest(self, inspection_id: str) -> Release | None:
        results = await self.query(inspection_id, order_by="version", limit=1)
        return results[0] if results else None
