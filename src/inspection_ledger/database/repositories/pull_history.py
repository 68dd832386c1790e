"""Repository for the append-only pull/restore history."""

from __future__ import annotations

from inspection_ledger.database.repositories.base import BaseRepository
from inspection_ledger.models.version import PullHistoryEntry

PULL_HISTORY = "inspection_pull_history"


class PullHistoryRepository(BaseRepository[PullHistoryEntry]):
    collection_name = PULL_HISTORY
    model_class = PullHistoryEntry

    async def list_by_inspection(self, inspection_id: str) -> list[PullHistoryEntry]:
        """Fetch history newest first.

        Versions increase with every operation, so ordering by version matches
        ``performed_at`` without depending on clock precision.
        """
        return await self.query(inspection_id, order_by="version")
