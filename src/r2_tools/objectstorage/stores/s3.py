"""Object store backed by an S3-compatible endpoint."""

from datetime import datetime
from typing import Any, Optional

from botocore.exceptions import BotoCoreError, ClientError

from r2_tools.core import get_logger
from r2_tools.core.exceptions import RemoteListingError
from r2_tools.objectstorage.clients import S3ClientConfig, S3ClientManager
from r2_tools.objectstorage.models import ObjectDownload

from .base import folder_placeholder_key

logger = get_logger(__name__)


def _format_timestamp(value: Any) -> Optional[str]:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        return value
    return None


def normalize_list_response(response: dict[str, Any]) -> dict[str, Any]:
    """Convert a ``list_objects_v2`` response into the standard page shape.

    Example:
        {"Contents": [{"Key": "a.txt", "Size": 3, ...}], "IsTruncated": False}
        becomes
        {"objects": [{"key": "a.txt", "size": 3, ...}], "truncated": False, ...}
    """
    objects = []
    for obj in response.get("Contents", []):
        entry: dict[str, Any] = {
            "key": obj["Key"],
            "size": obj.get("Size", 0),
        }
        if "ETag" in obj:
            entry["etag"] = obj["ETag"].strip('"')
        last_modified = _format_timestamp(obj.get("LastModified"))
        if last_modified:
            entry["last_modified"] = last_modified
        if "StorageClass" in obj:
            entry["storage_class"] = obj["StorageClass"]
        objects.append(entry)

    return {
        "objects": objects,
        "delimited_prefixes": [
            p["Prefix"] for p in response.get("CommonPrefixes", []) if "Prefix" in p
        ],
        "truncated": bool(response.get("IsTruncated", False)),
        "cursor": response.get("NextContinuationToken"),
    }


class S3ObjectStore:
    """Bucket operations through boto3 against S3 or R2's S3 endpoint."""

    def __init__(self, config: S3ClientConfig, max_keys: int = 1000):
        """Initialize the store.

        Args:
            config: S3 client configuration
            max_keys: Objects requested per remote page
        """
        self.client_manager = S3ClientManager(config)
        self.max_keys = max_keys

    def list_page(
        self,
        bucket: str,
        prefix: str = "",
        delimiter: str = "/",
        cursor: Optional[str] = None,
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"Bucket": bucket, "MaxKeys": self.max_keys}
        if prefix:
            kwargs["Prefix"] = prefix
        if delimiter:
            kwargs["Delimiter"] = delimiter
        if cursor:
            kwargs["ContinuationToken"] = cursor

        logger.debug("Listing S3 objects page", bucket=bucket, prefix=prefix, cursor=cursor)
        try:
            response = self.client_manager.client.list_objects_v2(**kwargs)
        except (BotoCoreError, ClientError) as e:
            raise RemoteListingError(f"Failed to list objects in '{bucket}': {e}")
        return normalize_list_response(response)

    def list_buckets(self) -> list[dict[str, Any]]:
        try:
            response = self.client_manager.client.list_buckets()
        except (BotoCoreError, ClientError) as e:
            raise RemoteListingError(f"Failed to list buckets: {e}")

        buckets = [
            {
                "name": b["Name"],
                "creation_date": _format_timestamp(b.get("CreationDate")),
            }
            for b in response.get("Buckets", [])
        ]
        logger.info("S3 buckets listed", bucket_count=len(buckets))
        return buckets

    def delete_object(self, bucket: str, key: str) -> None:
        try:
            self.client_manager.client.delete_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise RemoteListingError(f"Failed to delete '{bucket}/{key}': {e}")
        logger.info("S3 object deleted", bucket=bucket, key=key)

    def create_folder(self, bucket: str, path: str) -> str:
        key = folder_placeholder_key(path)
        try:
            self.client_manager.client.put_object(Bucket=bucket, Key=key, Body=b"")
        except (BotoCoreError, ClientError) as e:
            raise RemoteListingError(f"Failed to create folder '{bucket}/{path}': {e}")
        logger.info("S3 folder created", bucket=bucket, key=key)
        return key

    def get_object(self, bucket: str, key: str) -> ObjectDownload:
        try:
            response = self.client_manager.client.get_object(Bucket=bucket, Key=key)
            body = response["Body"].read()
        except (BotoCoreError, ClientError) as e:
            raise RemoteListingError(f"Failed to download '{bucket}/{key}': {e}")
        logger.info("S3 object downloaded", bucket=bucket, key=key, size=len(body))
        return ObjectDownload(
            key=key,
            body=body,
            content_type=response.get("ContentType") or "application/octet-stream",
        )

    def upload_object(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str = "application/octet-stream",
    ) -> None:
        try:
            self.client_manager.client.put_object(
                Bucket=bucket, Key=key, Body=body, ContentType=content_type
            )
        except (BotoCoreError, ClientError) as e:
            raise RemoteListingError(f"Failed to upload '{bucket}/{key}': {e}")
        logger.info("S3 object uploaded", bucket=bucket, key=key, size=len(body))

    def close(self) -> None:
        self.client_manager.close()
