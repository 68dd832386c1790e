"""Storage layer: the document store contract and its adapters."""

from inspection_ledger.database.memory import InMemoryDocumentStore
from inspection_ledger.database.store import (
    DocumentStore,
    Subscription,
    WriteKind,
    WriteOperation,
)

__all__ = [
    "DocumentStore",
    "InMemoryDocumentStore",
    "Subscription",
    "WriteKind",
    "WriteOperation",
]
