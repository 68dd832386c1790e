"""Document store contract shared by the Cosmos DB and in-memory adapters.

Documents are plain JSON dictionaries grouped into logical collections. Every
document belongs to a partition (the inspection id); all writes committed in
one call land atomically inside that partition.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[dict[str, Any]], Awaitable[None]]


class WriteKind(StrEnum):
    CREATE = "create"
    UPSERT = "upsert"
    PATCH = "patch"


@dataclass(frozen=True)
class WriteOperation:
    """One write inside an atomic batch.

    ``body`` is the full document for create/upsert and the top-level fields to
    set for patch.
    """

    kind: WriteKind
    collection: str
    doc_id: str
    body: dict[str, Any] = field(default_factory=dict)


class Subscription:
    """Cancellation handle for a live document subscription."""

    def __init__(self, on_cancel: Callable[[], None] | None = None) -> None:
        self._on_cancel = on_cancel
        self._cancelled = False

    @property
    def active(self) -> bool:
        return not self._cancelled

    def cancel(self) -> None:
        """Stop delivery. Safe to call more than once."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._on_cancel is not None:
            self._on_cancel()
            self._on_cancel = None


@runtime_checkable
class DocumentStore(Protocol):
    """Storage client injected into the workflow services."""

    async def read(
        self, collection: str, doc_id: str, *, partition_key: str
    ) -> dict[str, Any] | None:
        """Return one document, or None when it does not exist."""
        ...

    async def query(
        self,
        collection: str,
        *,
        partition_key: str,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = True,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Return documents of a collection within one partition."""
        ...

    async def commit(self, partition_key: str, operations: Sequence[WriteOperation]) -> None:
        """Apply all operations atomically, or none of them."""
        ...

    def subscribe(
        self,
        collection: str,
        doc_id: str,
        *,
        partition_key: str,
        callback: ChangeCallback,
    ) -> Subscription:
        """Push every later change of one document to ``callback``."""
        ...


async def deliver(
    subscription: Subscription, callback: ChangeCallback, document: dict[str, Any]
) -> None:
    """Invoke a subscriber unless it was cancelled; failures are logged, not raised."""
    if not subscription.active:
        return
    try:
        await callback(document)
    except Exception:
        logger.exception("Change subscriber failed for document %s", document.get("id"))
