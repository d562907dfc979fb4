"""Remote object stores usable as page listers."""

from .base import ObjectStore, PageLister, folder_placeholder_key
from .cloudflare import CloudflareR2Store
from .s3 import S3ObjectStore, normalize_list_response

__all__ = [
    "ObjectStore",
    "PageLister",
    "folder_placeholder_key",
    "CloudflareR2Store",
    "S3ObjectStore",
    "normalize_list_response",
]
