"""Object builders and constants shared by the test modules."""

from datetime import datetime, timezone
from typing import Optional

from blob_retention.storage.base import StoredObject

BASE = "damilola.tech/"
BLOB_HOST = "https://store.public.blob.vercel-storage.com/"

# Reference time used by scenario tests
NOW = datetime(2025, 4, 22, 12, 0, 0, tzinfo=timezone.utc)


def make_object(
    key: str,
    size: int = 1024,
    uploaded_at: Optional[datetime] = None,
) -> StoredObject:
    """Build a stored object whose URL mirrors its key."""
    return StoredObject(key=key, url=f"{BLOB_HOST}{key}", size=size, uploaded_at=uploaded_at)
