"""Deletion of individual objects with failure isolation."""

import asyncio
from collections.abc import Sequence

from blob_retention.observability.logging import get_logger
from blob_retention.storage.base import (
    DeleteOutcome,
    DeleteResult,
    ObjectStore,
    StoredObject,
)

logger = get_logger(__name__)


class DeletionExecutor:
    """Issues delete calls, never letting one failure stop the others.

    Example:
        >>> executor = DeletionExecutor(store, concurrency=10)
        >>> results = await executor.delete_many(objects)
    """

    def __init__(self, store: ObjectStore, concurrency: int = 10):
        """Initialize the executor.

        Args:
            store: Object store
            concurrency: Maximum delete calls in flight
        """
        if concurrency < 1:
            raise ValueError("concurrency must be >= 1")
        self.store = store
        self.concurrency = concurrency
        self._semaphore = asyncio.Semaphore(concurrency)

    async def delete(self, obj: StoredObject) -> DeleteResult:
        """Delete one object.

        Args:
            obj: Object to delete

        Returns:
            DeleteResult; unexpected adapter exceptions become ERROR
        """
        async with self._semaphore:
            try:
                result = await self.store.delete(obj.url)
            except Exception as e:
                result = DeleteResult(DeleteOutcome.ERROR, str(e) or type(e).__name__)

        if result.outcome is DeleteOutcome.ERROR:
            logger.error("object_delete_failed", key=obj.key, url=obj.url, reason=result.error)
        elif result.outcome is DeleteOutcome.NOT_FOUND:
            logger.debug("object_already_deleted", key=obj.key)
        return result

    async def delete_many(
        self,
        objects: Sequence[StoredObject],
    ) -> list[tuple[StoredObject, DeleteResult]]:
        """Delete objects concurrently, bounded by the executor limit.

        Args:
            objects: Objects to delete

        Returns:
            (object, result) pairs in input order
        """
        results = await asyncio.gather(*(self.delete(obj) for obj in objects))
        return list(zip(objects, results))
