"""Storage backend configuration schemas for r2-tools."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class CloudflareStorageConfig(BaseModel):
    """Configuration for the Cloudflare R2 REST API."""
    type: Literal["cloudflare"] = "cloudflare"
    api_token: str | None = Field(
        default=None, description="Cloudflare API token or global API key"
    )
    account_id: str | None = Field(default=None, description="Cloudflare account ID")
    email: str | None = Field(
        default=None, description="Account email, required with a global API key"
    )
    api_base_url: str = Field(
        default="https://api.cloudflare.com/client/v4",
        description="Cloudflare API base URL",
    )
    max_keys: int = Field(
        default=1000, ge=1, description="Objects requested per remote page"
    )
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")


class S3StorageConfig(BaseModel):
    """Configuration for S3-compatible object storage (including R2)."""
    type: Literal["s3"] = "s3"
    access_key_id: str | None = Field(default=None, description="Access key ID")
    secret_access_key: str | None = Field(
        default=None, description="Secret access key"
    )
    session_token: str | None = Field(default=None, description="Session token")
    region_name: str | None = Field(default=None, description="Region name")
    endpoint_url: str | None = Field(default=None, description="Custom S3 endpoint URL")
    aws_profile: str | None = Field(default=None, description="AWS profile name")
    max_keys: int = Field(
        default=1000, ge=1, description="Objects requested per remote page"
    )


# Discriminated union for storage configurations
StorageConfig = Annotated[
    Union[CloudflareStorageConfig, S3StorageConfig], Field(discriminator="type")
]
