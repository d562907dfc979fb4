"""boto3 client construction for S3-compatible endpoints.

R2 exposes an S3 API per account at
``https://<account_id>.r2.cloudflarestorage.com`` with region ``auto``. AWS
S3, MinIO and other compatible services work the same way with their own
endpoint URL.

Credentials are resolved in this order:
    1. A named AWS profile
    2. An explicit access key pair, optionally with a session token
    3. The default boto3 chain (environment variables, instance roles)
"""

from typing import Any, Optional

import boto3
from pydantic import BaseModel, ConfigDict

from r2_tools.core import get_logger
from r2_tools.core.exceptions import ConfigurationError

logger = get_logger(__name__)


class S3ClientConfig(BaseModel):
    """Connection settings for one S3-compatible endpoint.

    Example:
        config = S3ClientConfig(
            endpoint_url="https://<account_id>.r2.cloudflarestorage.com",
            access_key_id="...",
            secret_access_key="...",
            region_name="auto",
        )
    """

    model_config = ConfigDict(extra="forbid")

    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    session_token: Optional[str] = None
    region_name: str = "us-east-1"
    endpoint_url: Optional[str] = None
    aws_profile: Optional[str] = None

    @property
    def credential_source(self) -> str:
        if self.aws_profile:
            return "profile"
        if self.access_key_id:
            return "explicit"
        return "default_chain"


class S3ClientManager:
    """Owns a boto3 S3 client that is created on first use."""

    def __init__(self, config: S3ClientConfig):
        """
        Raises:
            ConfigurationError: If only one half of an access key pair is set
        """
        if bool(config.access_key_id) != bool(config.secret_access_key):
            raise ConfigurationError(
                "access_key_id and secret_access_key must be given together"
            )
        self.config = config
        self._client: Any = None

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._build_client()
        return self._client

    def _session(self) -> boto3.Session:
        if self.config.credential_source == "profile":
            return boto3.Session(profile_name=self.config.aws_profile)
        return boto3.Session(
            aws_access_key_id=self.config.access_key_id,
            aws_secret_access_key=self.config.secret_access_key,
            aws_session_token=self.config.session_token,
        )

    def _build_client(self) -> Any:
        logger.info(
            "Creating S3 client",
            credentials=self.config.credential_source,
            region=self.config.region_name,
            endpoint_url=self.config.endpoint_url,
        )
        return self._session().client(
            "s3",
            region_name=self.config.region_name,
            endpoint_url=self.config.endpoint_url,
        )

    def close(self) -> None:
        """Close the boto3 client, if one was created, and its connection pool."""
        if self._client is not None:
            self._client.close()
            self._client = None
