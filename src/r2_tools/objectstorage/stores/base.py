"""Protocols implemented by remote object stores."""

from typing import Any, Optional, Protocol

from r2_tools.objectstorage.models import ObjectDownload


class PageLister(Protocol):
    """Protocol for fetching one page of a cursor-paginated object listing."""

    def list_page(
        self,
        bucket: str,
        prefix: str = "",
        delimiter: str = "/",
        cursor: Optional[str] = None,
    ) -> Any:
        """Return the raw response for one page of the listing.

        The response is decoded by ``r2_tools.objectstorage.pages.decode_page``.
        """
        ...


class ObjectStore(PageLister, Protocol):
    """A page lister that also supports the bucket management operations."""

    def list_buckets(self) -> list[dict[str, Any]]:
        """Return the buckets visible to the configured credentials."""
        ...

    def delete_object(self, bucket: str, key: str) -> None:
        """Delete a single object."""
        ...

    def create_folder(self, bucket: str, path: str) -> str:
        """Create a folder placeholder object and return its key."""
        ...

    def get_object(self, bucket: str, key: str) -> ObjectDownload:
        """Fetch the content of a single object."""
        ...

    def upload_object(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str = "application/octet-stream",
    ) -> None:
        """Store ``body`` under ``key``, replacing any existing object."""
        ...

    def close(self) -> None:
        """Release network resources held by the store."""
        ...


def folder_placeholder_key(path: str) -> str:
    """Key of the empty object that makes a folder show up in listings."""
    folder = path if path.endswith("/") else f"{path}/"
    return f"{folder}.keep"
