"""Live change delivery from the Cosmos DB change feed."""

from inspection_ledger.pipeline.change_feed import ChangeFeedListener

__all__ = ["ChangeFeedListener"]
