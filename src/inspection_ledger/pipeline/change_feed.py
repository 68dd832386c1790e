"""Cosmos DB change feed listener — pushes updates of one document to a handler."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any

from azure.cosmos.aio import ContainerProxy

logger = logging.getLogger(__name__)

ItemHandler = Callable[[dict[str, Any]], Awaitable[None]]


class ChangeFeedListener:
    """Polls the change feed of one partition and forwards changes to one item.

    Runs as a background task. Changes are handled sequentially; a burst of
    writes may produce several deliveries for the same item.
    """

    def __init__(
        self,
        container: ContainerProxy,
        *,
        partition_key: str,
        item_id: str,
        poll_seconds: float = 1.0,
    ) -> None:
        self._container = container
        self._partition_key = partition_key
        self._item_id = item_id
        self._poll_seconds = poll_seconds
        self._running = False
        self._task: asyncio.Task | None = None
        self._started_at: datetime | None = None

    @property
    def running(self) -> bool:
        return self._running

    def start(self, handler: ItemHandler) -> None:
        """Start polling in a background task on the running loop."""
        self._running = True
        self._started_at = datetime.now(UTC)
        self._task = asyncio.get_running_loop().create_task(self._poll_loop(handler))
        logger.info("Change feed listener started for %s", self._item_id)

    def cancel(self) -> None:
        """Stop delivery immediately; the task is cancelled without waiting."""
        if not self._running:
            return
        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
        logger.info("Change feed listener stopped for %s", self._item_id)

    async def stop(self) -> None:
        """Cancel and wait for the background task to finish."""
        task = self._task
        self.cancel()
        if task:
            with contextlib.suppress(asyncio.CancelledError):
                await task

    async def _poll_loop(self, handler: ItemHandler) -> None:
        token: str | None = None
        while self._running:
            try:
                token = await self._process_feed(token, handler)
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("Error processing change feed for %s", self._item_id)

            await asyncio.sleep(self._poll_seconds)

    async def _process_feed(
        self, continuation_token: str | None, handler: ItemHandler
    ) -> str | None:
        """Read one batch of changes and hand matching items to ``handler``."""
        query_kwargs: dict[str, Any] = {
            "max_item_count": 100,
            "partition_key": self._partition_key,
        }
        if continuation_token:
            query_kwargs["continuation"] = continuation_token
        else:
            query_kwargs["start_time"] = self._started_at or datetime.now(UTC)

        response = self._container.query_items_change_feed(**query_kwargs)
        new_token = continuation_token

        async for item in response:
            if not self._running:
                break
            if item.get("id") != self._item_id:
                continue
            try:
                await handler(item)
            except Exception:
                logger.exception("Failed to handle change for %s", self._item_id)

        token = getattr(response, "continuation_token", None)
        if not isinstance(token, str):
            headers = getattr(
                getattr(self._container, "client_connection", None), "last_response_headers", None
            )
            token = headers.get("etag") if isinstance(headers, dict) else None
        if isinstance(token, str):
            new_token = token

        return new_token
