"""Object store backed by the Cloudflare R2 REST API."""

from typing import Any, Optional

from r2_tools.core import get_logger
from r2_tools.objectstorage.clients import CloudflareClientConfig, CloudflareR2Client
from r2_tools.objectstorage.models import ObjectDownload

from .base import folder_placeholder_key

logger = get_logger(__name__)


class CloudflareR2Store:
    """R2 bucket operations through the Cloudflare API."""

    def __init__(self, config: CloudflareClientConfig, max_keys: int = 1000):
        """Initialize the store.

        Args:
            config: Cloudflare credentials
            max_keys: Objects requested per remote page
        """
        self.client = CloudflareR2Client(config)
        self.max_keys = max_keys

    def list_page(
        self,
        bucket: str,
        prefix: str = "",
        delimiter: str = "/",
        cursor: Optional[str] = None,
    ) -> Any:
        logger.debug(
            "Listing R2 objects page",
            bucket=bucket,
            prefix=prefix,
            delimiter=delimiter,
            cursor=cursor,
        )
        return self.client.list_objects(
            bucket,
            prefix=prefix,
            delimiter=delimiter,
            cursor=cursor,
            per_page=self.max_keys,
        )

    def list_buckets(self) -> list[dict[str, Any]]:
        buckets = self.client.list_buckets()
        logger.info("R2 buckets listed", bucket_count=len(buckets))
        return buckets

    def delete_object(self, bucket: str, key: str) -> None:
        self.client.delete_object(bucket, key)
        logger.info("R2 object deleted", bucket=bucket, key=key)

    def create_folder(self, bucket: str, path: str) -> str:
        key = folder_placeholder_key(path)
        self.client.put_object(bucket, key)
        logger.info("R2 folder created", bucket=bucket, key=key)
        return key

    def get_object(self, bucket: str, key: str) -> ObjectDownload:
        body, content_type = self.client.get_object(bucket, key)
        logger.info("R2 object downloaded", bucket=bucket, key=key, size=len(body))
        return ObjectDownload(key=key, body=body, content_type=content_type)

    def upload_object(
        self,
        bucket: str,
        key: str,
        body: bytes,
        content_type: str = "application/octet-stream",
    ) -> None:
        self.client.put_object(bucket, key, body, content_type=content_type)
        logger.info("R2 object uploaded", bucket=bucket, key=key, size=len(body))

    def close(self) -> None:
        self.client.close()
