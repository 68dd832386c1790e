"""Release document model — immutable, deliverable copies of an inspection."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from inspection_ledger.models.base import DocumentBase


class Release(DocumentBase):
    """A release of inspection content prepared for client delivery.

    Only the delivery fields change after creation.
    """

    inspection_id: str
    inspection_snapshot: dict[str, Any] = Field(default_factory=dict)
    release_notes: str = ""
    created_by: str
    version: int
    is_delivered: bool = False
    delivered_at: datetime | None = None
    delivered_by: str | None = None


class ReleaseResult(BaseModel):
    release_id: str
    version: int
