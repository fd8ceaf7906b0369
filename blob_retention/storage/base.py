"""Object store interface consumed by the retention engine.

The store itself is owned by the hosted blob service; this module defines
the shapes the engine reads and the two primitives it calls.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Protocol


@dataclass(frozen=True)
class StoredObject:
    """One object in the store.

    Attributes:
        key: Unique path-like identifier (the blob pathname)
        url: Dereferenceable location used for delete calls
        size: Size in bytes
        uploaded_at: Store-assigned upload time, may be missing
    """
    key: str
    url: str
    size: int
    uploaded_at: Optional[datetime] = None

    @property
    def basename(self) -> str:
        """Last path segment of the key (empty for container markers)."""
        return self.key.rsplit("/", 1)[-1]


@dataclass
class ListPage:
    """One page of a prefix listing.

    Attributes:
        objects: Objects on this page
        next_cursor: Continuation cursor, None when the listing is exhausted
    """
    objects: List[StoredObject] = field(default_factory=list)
    next_cursor: Optional[str] = None


class DeleteOutcome(str, Enum):
    """Result of a single delete call."""
    DELETED = "deleted"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of deleting one object, with the failure reason if any."""
    outcome: DeleteOutcome
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is not DeleteOutcome.ERROR


class StoreError(Exception):
    """Base error raised by object store adapters."""


class StoreListError(StoreError):
    """A list call failed for a prefix.

    Listing failures are fatal for a retention run.
    """

    def __init__(self, prefix: str, message: str):
        self.prefix = prefix
        super().__init__(f"Failed to list objects under '{prefix}': {message}")


class ObjectStore(Protocol):
    """Protocol for object store adapters."""

    async def list(self, prefix: str, cursor: Optional[str] = None) -> ListPage:
        """List one page of objects under a prefix.

        Raises:
            StoreListError: If the listing call fails
        """
        ...

    async def delete(self, url: str) -> DeleteResult:
        """Delete one object by URL. Never raises for store-level failures."""
        ...
