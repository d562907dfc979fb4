"""Construction of object stores from storage configurations.

Stores are built per request or per command; nothing here caches a client.
"""

from typing import Optional

from r2_tools.core import Settings, get_logger
from r2_tools.core.exceptions import ConfigurationError
from r2_tools.objectstorage.clients import CloudflareClientConfig, S3ClientConfig
from r2_tools.objectstorage.stores import CloudflareR2Store, ObjectStore, S3ObjectStore
from r2_tools.schemas import CloudflareStorageConfig, S3StorageConfig, StorageConfig

logger = get_logger(__name__)


def create_object_store(config: StorageConfig) -> ObjectStore:
    """Create the object store described by ``config``.

    Args:
        config: CloudflareStorageConfig or S3StorageConfig

    Returns:
        An object store implementing the PageLister protocol

    Raises:
        ConfigurationError: If required credentials are missing
    """
    logger.debug("Creating object store", storage_type=config.type)

    if isinstance(config, CloudflareStorageConfig):
        if not config.api_token:
            raise ConfigurationError("Cloudflare API token is not configured")
        if not config.account_id:
            raise ConfigurationError("Cloudflare account ID is not configured")
        return CloudflareR2Store(
            CloudflareClientConfig(
                api_token=config.api_token,
                account_id=config.account_id,
                email=config.email,
                api_base_url=config.api_base_url,
                timeout=config.timeout,
            ),
            max_keys=config.max_keys,
        )

    elif isinstance(config, S3StorageConfig):
        return S3ObjectStore(
            S3ClientConfig(
                access_key_id=config.access_key_id,
                secret_access_key=config.secret_access_key,
                session_token=config.session_token,
                region_name=config.region_name or "auto",
                endpoint_url=config.endpoint_url,
                aws_profile=config.aws_profile,
            ),
            max_keys=config.max_keys,
        )

    else:
        raise ConfigurationError(f"Unsupported storage configuration: {config!r}")


def config_from_settings(
    settings: Settings, backend: Optional[str] = None
) -> StorageConfig:
    """Build a storage configuration from environment settings.

    Args:
        settings: Application settings
        backend: Override for ``settings.backend`` ("cloudflare" or "s3")
    """
    backend = backend or settings.backend

    if backend == "cloudflare":
        return CloudflareStorageConfig(
            api_token=settings.cloudflare_api_token,
            account_id=settings.cloudflare_account_id,
            email=settings.cloudflare_email,
            api_base_url=settings.cloudflare_api_base_url,
            max_keys=settings.max_keys,
            timeout=settings.http_timeout,
        )

    elif backend == "s3":
        endpoint_url = settings.s3_endpoint_url
        if not endpoint_url and settings.cloudflare_account_id:
            endpoint_url = (
                f"https://{settings.cloudflare_account_id}.r2.cloudflarestorage.com"
            )
        return S3StorageConfig(
            access_key_id=settings.s3_access_key_id,
            secret_access_key=settings.s3_secret_access_key,
            session_token=settings.s3_session_token,
            region_name=settings.s3_region_name,
            endpoint_url=endpoint_url,
            aws_profile=settings.aws_profile,
            max_keys=settings.max_keys,
        )

    else:
        raise ConfigurationError(
            f"Invalid backend: {backend}. Must be 'cloudflare' or 's3'"
        )
