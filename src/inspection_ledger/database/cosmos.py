"""Cosmos DB adapter for the document store contract.

Every logical collection shares one container partitioned by ``/_pk`` (the
inspection id). Item ids are ``<collection>:<doc_id>`` so the same key can be
used in several collections, and a transactional batch on the partition
covers every write of a workflow step. Container bookkeeping fields are
underscore-prefixed, so document fields named ``collection`` or ``pk`` survive.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any, cast

from azure.core.exceptions import ServiceRequestError, ServiceResponseError
from azure.cosmos.aio import ContainerProxy
from azure.cosmos.exceptions import CosmosBatchOperationError, CosmosHttpResponseError

from inspection_ledger.database.store import ChangeCallback, Subscription, WriteKind, WriteOperation
from inspection_ledger.errors import (
    InvalidArgumentError,
    LedgerError,
    NotFoundError,
    PermissionDeniedError,
    UnavailableError,
)
from inspection_ledger.pipeline.change_feed import ChangeFeedListener

logger = logging.getLogger(__name__)

_SYSTEM_FIELDS = ("_rid", "_self", "_etag", "_attachments", "_ts", "_lsn")
_BOOKKEEPING_FIELDS = ("_collection", "_doc_id", "_pk")
_FIELD_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

_HTTP_UNAUTHORIZED = 401
_HTTP_FORBIDDEN = 403
_HTTP_NOT_FOUND = 404
_HTTP_TIMEOUT = 408
_HTTP_CONFLICT = 409
_HTTP_TOO_MANY_REQUESTS = 429
_HTTP_RETRY_WITH = 449
_HTTP_SERVER_ERROR = 500


def item_id(collection: str, doc_id: str) -> str:
    return f"{collection}:{doc_id}"


def _field(name: str) -> str:
    if not _FIELD_NAME.match(name):
        raise InvalidArgumentError(f"invalid field name: {name!r}")
    return name


def _status_code(exc: Exception) -> int | None:
    if isinstance(exc, CosmosBatchOperationError):
        responses = getattr(exc, "operation_responses", None) or []
        index = getattr(exc, "error_index", None)
        if isinstance(index, int) and 0 <= index < len(responses):
            code = responses[index].get("statusCode")
            if isinstance(code, int):
                return code
    return getattr(exc, "status_code", None)


def translate(exc: Exception, action: str) -> LedgerError:
    """Map a Cosmos SDK failure onto the ledger error kinds."""
    if isinstance(exc, (ServiceRequestError, ServiceResponseError)):
        return UnavailableError(f"{action}: {exc}")
    status = _status_code(exc)
    if status == _HTTP_NOT_FOUND:
        return NotFoundError(f"{action}: not found")
    if status in (_HTTP_UNAUTHORIZED, _HTTP_FORBIDDEN):
        return PermissionDeniedError(f"{action}: permission denied")
    if status == _HTTP_CONFLICT:
        return InvalidArgumentError(f"{action}: document already exists")
    if status in (_HTTP_TIMEOUT, _HTTP_TOO_MANY_REQUESTS, _HTTP_RETRY_WITH) or (
        status is not None and status >= _HTTP_SERVER_ERROR
    ):
        return UnavailableError(f"{action}: backend unavailable ({status})")
    return LedgerError(f"{action}: {exc}")


@contextmanager
def _translated(action: str) -> Iterator[None]:
    try:
        yield
    except (
        CosmosBatchOperationError,
        CosmosHttpResponseError,
        ServiceRequestError,
        ServiceResponseError,
    ) as exc:
        raise translate(exc, action) from exc


def to_document(item: Mapping[str, Any]) -> dict[str, Any]:
    """Strip container bookkeeping from a Cosmos item."""
    document = {
        k: v
        for k, v in item.items()
        if k not in _SYSTEM_FIELDS and k not in _BOOKKEEPING_FIELDS
    }
    document["id"] = item.get("_doc_id", item.get("id"))
    return document


def to_item(
    collection: str, doc_id: str, partition_key: str, body: Mapping[str, Any]
) -> dict[str, Any]:
    return {
        **body,
        "id": item_id(collection, doc_id),
        "_doc_id": doc_id,
        "_collection": collection,
        "_pk": partition_key,
    }


def _batch_operation(op: WriteOperation, partition_key: str) -> tuple[str, tuple[Any, ...]]:
    if op.kind is WriteKind.PATCH:
        patch = [{"op": "set", "path": f"/{_field(k)}", "value": v} for k, v in op.body.items()]
        return ("patch", (item_id(op.collection, op.doc_id), patch))
    return (op.kind.value, (to_item(op.collection, op.doc_id, partition_key, op.body),))


class CosmosDocumentStore:
    """Implements :class:`DocumentStore` on a single Cosmos DB container."""

    def __init__(self, container: ContainerProxy, *, poll_seconds: float = 1.0) -> None:
        self._container = container
        self._poll_seconds = poll_seconds

    async def read(
        self, collection: str, doc_id: str, *, partition_key: str
    ) -> dict[str, Any] | None:
        try:
            item = await self._container.read_item(
                item=item_id(collection, doc_id), partition_key=partition_key
            )
        except CosmosHttpResponseError as exc:
            if exc.status_code == _HTTP_NOT_FOUND:
                return None
            raise translate(exc, f"read {collection}/{doc_id}") from exc
        except (ServiceRequestError, ServiceResponseError) as exc:
            raise translate(exc, f"read {collection}/{doc_id}") from exc
        return to_document(cast("dict[str, Any]", item))

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
        top = f"TOP {int(limit)} " if limit is not None else ""
        clauses = ["c._collection = @collection"]
        parameters: list[dict[str, Any]] = [{"name": "@collection", "value": collection}]
        for index, (name, value) in enumerate((filters or {}).items()):
            clauses.append(f"c.{_field(name)} = @p{index}")
            parameters.append({"name": f"@p{index}", "value": value})
        sql = f"SELECT {top}* FROM c WHERE {' AND '.join(clauses)}"
        if order_by:
            sql += f" ORDER BY c.{_field(order_by)} {'DESC' if descending else 'ASC'}"

        results: list[dict[str, Any]] = []
        with _translated(f"query {collection}"):
            async for item in self._container.query_items(
                query=sql, parameters=parameters, partition_key=partition_key
            ):
                results.append(to_document(item))
        return results

    async def commit(self, partition_key: str, operations: Sequence[WriteOperation]) -> None:
        if not operations:
            return
        batch = [_batch_operation(op, partition_key) for op in operations]
        with _translated(f"commit to partition {partition_key}"):
            await self._container.execute_item_batch(
                batch_operations=batch, partition_key=partition_key
            )
        logger.debug("Committed %d operation(s) to partition %s", len(batch), partition_key)

    def subscribe(
        self,
        collection: str,
        doc_id: str,
        *,
        partition_key: str,
        callback: ChangeCallback,
    ) -> Subscription:
        listener = ChangeFeedListener(
            self._container,
            partition_key=partition_key,
            item_id=item_id(collection, doc_id),
            poll_seconds=self._poll_seconds,
        )
        subscription = Subscription(on_cancel=listener.cancel)

        async def _forward(item: dict[str, Any]) -> None:
            if subscription.active:
                await callback(to_document(item))

        listener.start(_forward)
        return subscription
