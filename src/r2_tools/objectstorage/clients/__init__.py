"""Remote API clients for object storage."""

from .cloudflare_client import CloudflareClientConfig, CloudflareR2Client
from .s3_client import S3ClientConfig, S3ClientManager

__all__ = [
    "CloudflareClientConfig",
    "CloudflareR2Client",
    "S3ClientConfig",
    "S3ClientManager",
]
