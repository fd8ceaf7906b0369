"""Paginated enumeration of objects under a key prefix."""

from collections.abc import AsyncIterator

from blob_retention.observability.logging import get_logger
from blob_retention.storage.base import ObjectStore, StoredObject, StoreListError

logger = get_logger(__name__)


class PrefixScanner:
    """Flattens cursor-paginated listings into one object stream.

    Each call to ``scan`` starts a fresh listing. Pages are fetched
    sequentially because every cursor depends on the previous page.
    """

    def __init__(self, store: ObjectStore):
        self.store = store

    async def scan(self, prefix: str) -> AsyncIterator[StoredObject]:
        """Yield every object under a prefix.

        Args:
            prefix: Key prefix to list

        Yields:
            Stored objects in listing order

        Raises:
            StoreListError: If any list call fails; the scan is aborted
        """
        cursor: str | None = None
        pages = 0
        count = 0

        while True:
            try:
                page = await self.store.list(prefix, cursor)
            except StoreListError:
                raise
            except Exception as e:
                raise StoreListError(prefix, str(e)) from e

            pages += 1
            for obj in page.objects:
                count += 1
                yield obj

            if not page.next_cursor:
                break
            if page.next_cursor == cursor:
                raise StoreListError(prefix, f"cursor did not advance: {cursor}")
            cursor = page.next_cursor

        logger.debug("prefix_scanned", prefix=prefix, pages=pages, objects=count)
