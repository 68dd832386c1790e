"""Inspection document model — the live working record edited by inspectors."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from inspection_ledger.models.base import DocumentBase


class ItemDetail(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    value: Any = None
    media: list[dict[str, Any]] = Field(default_factory=list)
    non_conformities: list[dict[str, Any]] = Field(default_factory=list)


class TopicItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str = ""
    observation: str | None = None
    details: list[ItemDetail] = Field(default_factory=list)


class Topic(BaseModel):
    """A topic holds items, or details directly when ``direct_details`` is set."""

    model_config = ConfigDict(extra="allow")

    name: str = ""
    observation: str | None = None
    direct_details: bool = False
    items: list[TopicItem] = Field(default_factory=list)
    details: list[ItemDetail] = Field(default_factory=list)

    @property
    def item_count(self) -> int:
        return 0 if self.direct_details else len(self.items)

    @property
    def detail_count(self) -> int:
        if self.direct_details:
            return len(self.details)
        return sum(len(item.details) for item in self.items)


class Inspection(DocumentBase):
    """The live inspection record. Unknown fields are kept as-is."""

    model_config = ConfigDict(extra="allow")

    title: str = ""
    cod: str | None = None
    status: str = "pending"
    area: str | None = None
    observation: str | None = None
    project_id: str | None = None
    inspector_id: str | None = None
    topics: list[Topic] = Field(default_factory=list)

    inspection_edit_blocked: bool = False
    delivered: bool = False
    delivered_at: datetime | None = None
    delivered_release_id: str | None = None
    last_editor: str | None = None
    updated_at: datetime | None = None
