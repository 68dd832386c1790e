"""Generic repository over one logical collection of the document store."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from inspection_ledger.database.store import DocumentStore, WriteKind, WriteOperation
from inspection_ledger.errors import MalformedDocumentError

T = TypeVar("T", bound=BaseModel)

_JSON = TypeAdapter(dict[str, Any])


def jsonable(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Convert field values (datetimes, enums, models) to JSON-compatible values."""
    return _JSON.dump_python(dict(fields), mode="json")


class BaseRepository(Generic[T]):
    """Reads documents into ``model_class`` and builds write operations.

    Writes are returned as :class:`WriteOperation` values so callers can
    commit several of them atomically.
    """

    collection_name: ClassVar[str]
    model_class: ClassVar[type[BaseModel]]

    def __init__(self, store: DocumentStore) -> None:
        self._store = store

    async def get(self, doc_id: str, partition_key: str) -> T | None:
        data = await self._store.read(self.collection_name, doc_id, partition_key=partition_key)
        if data is None:
            return None
        return self._to_model(data)

    async def query(
        self,
        partition_key: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str | None = None,
        descending: bool = True,
        limit: int | None = None,
    ) -> list[T]:
        rows = await self._store.query(
            self.collection_name,
            partition_key=partition_key,
            filters=filters,
            order_by=order_by,
            descending=descending,
            limit=limit,
        )
        return [self._to_model(row) for row in rows]

    def _to_model(self, data: dict[str, Any]) -> T:
        try:
            return self.model_class.model_validate(data)  # type: ignore[return-value]
        except ValidationError as exc:
            raise MalformedDocumentError(
                f"{self.collection_name}/{data.get('id')} is malformed: {exc}"
            ) from exc

    def create_op(self, item: T, doc_id: str | None = None) -> WriteOperation:
        key = doc_id or item.id  # type: ignore[attr-defined]
        return WriteOperation(
            WriteKind.CREATE, self.collection_name, key, item.model_dump(mode="json")
        )

    def upsert_op(self, item: T, doc_id: str | None = None) -> WriteOperation:
        key = doc_id or item.id  # type: ignore[attr-defined]
        return WriteOperation(
            WriteKind.UPSERT, self.collection_name, key, item.model_dump(mode="json")
        )

    def patch_op(self, doc_id: str, **fields: Any) -> WriteOperation:
        return WriteOperation(WriteKind.PATCH, self.collection_name, doc_id, jsonable(fields))
