"""Dict-backed document store used by tests and local development."""

from __future__ import annotations

import copy
import logging
from collections import defaultdict
from collections.abc import Mapping, Sequence
from typing import Any

from inspection_ledger.database.store import (
    ChangeCallback,
    Subscription,
    WriteKind,
    WriteOperation,
    deliver,
)
from inspection_ledger.errors import InvalidArgumentError, NotFoundError

logger = logging.getLogger(__name__)

_Key = tuple[str, str, str]


class InMemoryDocumentStore:
    """Implements :class:`DocumentStore` on nested dictionaries.

    Commits validate every operation before applying any, so a failed batch
    leaves no trace. Subscribers are notified after the batch is applied.
    """

    def __init__(self) -> None:
        self._documents: dict[_Key, dict[str, Any]] = {}
        self._subscribers: dict[_Key, list[tuple[Subscription, ChangeCallback]]] = defaultdict(
            list
        )

    async def read(
        self, collection: str, doc_id: str, *, partition_key: str
    ) -> dict[str, Any] | None:
        document = self._documents.get((partition_key, collection, doc_id))
        return copy.deepcopy(document) if document is not None else None

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
        matches = [
            copy.deepcopy(document)
            for (pk, coll, _), document in self._documents.items()
            if pk == partition_key
            and coll == collection
            and all(document.get(k) == v for k, v in (filters or {}).items())
        ]
        if order_by:
            matches.sort(key=lambda d: d.get(order_by), reverse=descending)
        return matches[:limit] if limit is not None else matches

    async def commit(self, partition_key: str, operations: Sequence[WriteOperation]) -> None:
        staged: dict[_Key, dict[str, Any]] = {}
        for op in operations:
            key = (partition_key, op.collection, op.doc_id)
            existing = staged.get(key, self._documents.get(key))
            if op.kind is WriteKind.CREATE:
                if existing is not None:
                    raise InvalidArgumentError(f"{op.collection}/{op.doc_id} already exists")
                staged[key] = {**copy.deepcopy(op.body), "id": op.doc_id}
            elif op.kind is WriteKind.UPSERT:
                staged[key] = {**copy.deepcopy(op.body), "id": op.doc_id}
            else:
                if existing is None:
                    raise NotFoundError(f"{op.collection}/{op.doc_id} not found")
                staged[key] = {**existing, **copy.deepcopy(op.body)}

        self._documents.update(staged)
        logger.debug("Committed %d operation(s) to partition %s", len(operations), partition_key)

        for key, document in staged.items():
            for subscription, callback in list(self._subscribers.get(key, ())):
                await deliver(subscription, callback, copy.deepcopy(document))

    def subscribe(
        self,
        collection: str,
        doc_id: str,
        *,
        partition_key: str,
        callback: ChangeCallback,
    ) -> Subscription:
        entries = self._subscribers[(partition_key, collection, doc_id)]

        def _remove() -> None:
            entries.remove(entry)

        subscription = Subscription(on_cancel=_remove)
        entry = (subscription, callback)
        entries.append(entry)
        return subscription
