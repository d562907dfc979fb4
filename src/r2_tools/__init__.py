"""Paginated bucket browsing for Cloudflare R2 and S3-compatible storage.

The remote listing APIs page with opaque cursors and cannot sort. This package
drains every remote page for a prefix, merges files and folders, sorts them by
name, size or modification time and hands back numbered pages.

Key Features:
    - Merged, sorted, numbered listings over cursor-paginated remote APIs
    - Cloudflare R2 REST API and S3-compatible backends
    - Bucket management (list buckets, download, upload and delete objects,
      create folders)
    - HTTP API and CLI interface

Recommended Usage:

    >>> from r2_tools import CloudflareStorageConfig, list_bucket_objects
    >>> config = CloudflareStorageConfig(api_token="...", account_id="...")
    >>> result = list_bucket_objects("media", config, prefix="images/", page=2)
    >>> result.result_info.total_count

Advanced Usage:
    Plug any PageLister into the aggregator directly:

    >>> from r2_tools.objectstorage import ListingAggregator, ListingQuery
    >>> ListingAggregator(my_lister).list_objects(ListingQuery(bucket="media"))
"""

__version__ = "0.1.0"

from .objectstorage import (
    ListingAggregator,
    ListingQuery,
    ListingResult,
    PageLister,
    RemoteEntry,
    ResultInfo,
)
from .operations import (
    create_folder,
    delete_object,
    download_object,
    list_bucket_objects,
    list_buckets,
    upload_object,
)
from .schemas import CloudflareStorageConfig, S3StorageConfig, StorageConfig

__all__ = [
    # Storage configurations
    "CloudflareStorageConfig",
    "S3StorageConfig",
    "StorageConfig",
    # Operations
    "create_folder",
    "delete_object",
    "download_object",
    "list_bucket_objects",
    "list_buckets",
    "upload_object",
    # Listing building blocks
    "ListingAggregator",
    "ListingQuery",
    "ListingResult",
    "PageLister",
    "RemoteEntry",
    "ResultInfo",
]
