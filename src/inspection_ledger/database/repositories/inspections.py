"""Repository for live inspection records (partitioned by their own id)."""

from __future__ import annotations

from inspection_ledger.database.repositories.base import BaseRepository
from inspection_ledger.models.inspection import Inspection

INSPECTIONS = "inspections"


class InspectionRepository(BaseRepository[Inspection]):
    collection_name = INSPECTIONS
    model_class = Inspection

    async def get_by_id(self, inspection_id: str) -> Inspection | None:
        return await self.get(inspection_id, inspection_id)
