"""Bucket operations that work across storage backends.

Each call builds its own object store from the given configuration and
closes it afterwards; no client outlives the operation.
"""

from contextlib import contextmanager
from typing import Any, Iterator

from r2_tools.core import get_logger
from r2_tools.core.exceptions import R2ToolsError, RemoteListingError, ValidationError
from r2_tools.objectstorage.factory import create_object_store
from r2_tools.objectstorage.listing import ListingAggregator, build_query
from r2_tools.objectstorage.models import ListingResult, ObjectDownload
from r2_tools.objectstorage.stores import ObjectStore
from r2_tools.schemas import StorageConfig

logger = get_logger(__name__)


@contextmanager
def open_store(config: StorageConfig) -> Iterator[ObjectStore]:
    """Create an object store for ``config`` and close it on exit."""
    store = create_object_store(config)
    try:
        yield store
    finally:
        store.close()


def list_bucket_objects(
    bucket: str,
    config: StorageConfig,
    prefix: str = "",
    delimiter: str = "/",
    page: int = 1,
    per_page: int = 10,
    order_by: str = "name",
    direction: str = "asc",
) -> ListingResult:
    """
    List one page of a bucket's merged, sorted files and folders.

    Args:
        bucket: Bucket name
        config: Storage configuration (CloudflareStorageConfig or S3StorageConfig)
        prefix: Key prefix to list under
        delimiter: Folder delimiter
        page: 1-based page number
        per_page: Items per page
        order_by: "name", "size" or "lastModified"
        direction: "asc" or "desc"

    Returns:
        ListingResult for the requested page

    Raises:
        ValidationError: If listing parameters are invalid
        ConfigurationError: If the storage configuration is incomplete
    """
    query = build_query(
        bucket=bucket,
        prefix=prefix,
        delimiter=delimiter,
        page=page,
        per_page=per_page,
        order_by=order_by,
        direction=direction,
    )
    logger.info("Listing bucket objects", bucket=bucket, storage_type=config.type)

    with open_store(config) as store:
        return ListingAggregator(store).list_objects(query)


def list_buckets(config: StorageConfig) -> list[dict[str, Any]]:
    """List the buckets visible to the configured credentials."""
    with open_store(config) as store:
        return call_store(store.list_buckets)


def delete_object(bucket: str, key: str, config: StorageConfig) -> None:
    """Delete a single object.

    Raises:
        ValidationError: If bucket or key is empty
    """
    if not bucket or not key:
        raise ValidationError("Both bucket and key are required to delete an object")
    with open_store(config) as store:
        call_store(store.delete_object, bucket, key)


def create_folder(bucket: str, path: str, config: StorageConfig) -> str:
    """Create a folder by writing an empty ``.keep`` object under it.

    Returns:
        Key of the placeholder object

    Raises:
        ValidationError: If bucket or path is empty
    """
    path = path.strip().lstrip("/")
    if not bucket or not path:
        raise ValidationError("Both bucket and folder path are required")
    with open_store(config) as store:
        return call_store(store.create_folder, bucket, path)


def download_object(bucket: str, key: str, config: StorageConfig) -> ObjectDownload:
    """Fetch one object's content.

    Raises:
        ValidationError: If bucket or key is empty
    """
    if not bucket or not key:
        raise ValidationError("Both bucket and key are required to download an object")
    with open_store(config) as store:
        return call_store(store.get_object, bucket, key)


def upload_object(
    bucket: str,
    key: str,
    body: bytes,
    config: StorageConfig,
    content_type: str = "application/octet-stream",
) -> str:
    """Upload ``body`` as a single object.

    Returns:
        Key the object was stored under

    Raises:
        ValidationError: If bucket or key is empty
    """
    key = key.strip().lstrip("/")
    if not bucket or not key:
        raise ValidationError("Both bucket and key are required to upload an object")
    with open_store(config) as store:
        call_store(store.upload_object, bucket, key, body, content_type)
    return key


def call_store(func: Any, *args: Any) -> Any:
    """Run a store operation, wrapping unexpected errors in RemoteListingError."""
    try:
        return func(*args)
    except R2ToolsError:
        raise
    except Exception as e:
        error_msg = f"Storage operation failed: {e}"
        logger.error(error_msg, error=str(e))
        raise RemoteListingError(error_msg)
