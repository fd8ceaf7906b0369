"""Shared fixtures for the Blob Retention test suite."""

from typing import Optional

import pytest

from blob_retention.config import RetentionSettings
from blob_retention.storage.base import (
    DeleteOutcome,
    DeleteResult,
    ListPage,
    StoredObject,
    StoreListError,
)
from helpers import BASE


class FakeObjectStore:
    """In-memory object store with cursor pagination and injectable failures."""

    def __init__(self, page_size: int = 2):
        self.page_size = page_size
        self.objects: dict[str, StoredObject] = {}
        self.list_calls: list[tuple[str, Optional[str]]] = []
        self.delete_calls: list[str] = []
        self.failing_urls: set[str] = set()
        self.failing_prefixes: set[str] = set()
        self.raising_urls: set[str] = set()

    def add(self, *objects: StoredObject) -> None:
        for obj in objects:
            self.objects[obj.key] = obj

    async def list(self, prefix: str, cursor: Optional[str] = None) -> ListPage:
        self.list_calls.append((prefix, cursor))
        if prefix in self.failing_prefixes:
            raise StoreListError(prefix, "Blob service unavailable")

        matching = sorted(
            (obj for obj in self.objects.values() if obj.key.startswith(prefix)),
            key=lambda obj: obj.key,
        )
        start = int(cursor) if cursor else 0
        end = start + self.page_size
        next_cursor = str(end) if end < len(matching) else None
        return ListPage(objects=matching[start:end], next_cursor=next_cursor)

    async def delete(self, url: str) -> DeleteResult:
        self.delete_calls.append(url)
        if url in self.raising_urls:
            raise RuntimeError("connection reset")
        if url in self.failing_urls:
            return DeleteResult(DeleteOutcome.ERROR, "Delete failed")
        for key, obj in list(self.objects.items()):
            if obj.url == url:
                del self.objects[key]
                return DeleteResult(DeleteOutcome.DELETED)
        return DeleteResult(DeleteOutcome.NOT_FOUND)


@pytest.fixture
def fake_store():
    """Create an empty in-memory object store."""
    return FakeObjectStore()


@pytest.fixture
def retention_settings():
    """Default retention settings for the test namespace."""
    return RetentionSettings(base_prefix=BASE)
