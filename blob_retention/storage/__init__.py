"""Object store interface and adapters."""

from blob_retention.storage.base import (
    DeleteOutcome,
    DeleteResult,
    ListPage,
    ObjectStore,
    StoredObject,
    StoreError,
    StoreListError,
)
from blob_retention.storage.vercel_blob import VercelBlobStore

__all__ = [
    "DeleteOutcome",
    "DeleteResult",
    "ListPage",
    "ObjectStore",
    "StoredObject",
    "StoreError",
    "StoreListError",
    "VercelBlobStore",
]
