"""Hosted blob store adapter.

This adapter talks to the Vercel Blob HTTP API with httpx:
- ``GET {api_url}?prefix=...&cursor=...&limit=...`` lists one page
- ``POST {api_url}/delete`` with ``{"urls": [...]}`` deletes objects
"""

from datetime import datetime
from typing import Any, Optional

import httpx

from blob_retention.config import BlobStoreSettings
from blob_retention.observability.logging import get_logger
from blob_retention.storage.base import (
    DeleteOutcome,
    DeleteResult,
    ListPage,
    StoredObject,
    StoreListError,
)

logger = get_logger(__name__)


def _parse_uploaded_at(value: Any) -> Optional[datetime]:
    """Parse the store's ISO-8601 upload time, tolerating absence."""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


class VercelBlobStore:
    """Object store backed by the Vercel Blob HTTP API.

    Example:
        >>> store = VercelBlobStore(settings.blob_store)
        >>> page = await store.list("damilola.tech/chats/production/")
        >>> await store.close()
    """

    def __init__(
        self,
        settings: BlobStoreSettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the adapter.

        Args:
            settings: Blob store settings
            client: Optional preconfigured HTTP client (used by tests)
        """
        self.settings = settings
        self._client = client

    def _headers(self) -> dict[str, str]:
        headers = {"x-api-version": self.settings.api_version}
        token = self.settings.read_write_token
        if token is not None:
            headers["authorization"] = f"Bearer {token.get_secret_value()}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.settings.timeout_seconds)
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def list(self, prefix: str, cursor: Optional[str] = None) -> ListPage:
        """List one page of blobs under a prefix.

        Args:
            prefix: Key prefix
            cursor: Continuation cursor from the previous page

        Returns:
            ListPage with objects and the next cursor

        Raises:
            StoreListError: On transport errors, error statuses or bad bodies
        """
        params: dict[str, Any] = {"prefix": prefix, "limit": self.settings.page_size}
        if cursor:
            params["cursor"] = cursor

        client = await self._get_client()
        try:
            response = await client.get(
                self.settings.api_url,
                params=params,
                headers=self._headers(),
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise StoreListError(prefix, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            raise StoreListError(prefix, f"request failed: {e}") from e
        except ValueError as e:
            raise StoreListError(prefix, "response body is not JSON") from e

        if not isinstance(body, dict):
            raise StoreListError(prefix, "unexpected response body")

        try:
            objects = [
                StoredObject(
                    key=blob["pathname"],
                    url=blob["url"],
                    size=int(blob.get("size") or 0),
                    uploaded_at=_parse_uploaded_at(blob.get("uploadedAt")),
                )
                for blob in body.get("blobs", [])
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise StoreListError(prefix, f"malformed listing: {e}") from e

        next_cursor = body.get("cursor") if body.get("hasMore", True) else None
        return ListPage(objects=objects, next_cursor=next_cursor or None)

    async def delete(self, url: str) -> DeleteResult:
        """Delete one blob by URL.

        Args:
            url: Blob URL

        Returns:
            DeleteResult; store failures are reported, not raised
        """
        client = await self._get_client()
        try:
            response = await client.post(
                f"{self.settings.api_url.rstrip('/')}/delete",
                json={"urls": [url]},
                headers=self._headers(),
            )
        except httpx.RequestError as e:
            return DeleteResult(DeleteOutcome.ERROR, f"request failed: {e}")

        if response.status_code == 404:
            return DeleteResult(DeleteOutcome.NOT_FOUND)
        if response.is_error:
            return DeleteResult(DeleteOutcome.ERROR, f"HTTP {response.status_code}")
        return DeleteResult(DeleteOutcome.DELETED)
