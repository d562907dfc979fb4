"""Configuration management for r2-tools."""

from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"
    otel_enabled: bool = False
    otel_service_name: str = "r2-tools"
    otel_exporter_endpoint: str = "http://localhost:4317"

    # Which remote listing backend the HTTP API and CLI talk to
    backend: Literal["cloudflare", "s3"] = "cloudflare"

    # Cloudflare REST API
    cloudflare_api_token: Optional[str] = None
    cloudflare_account_id: Optional[str] = None
    cloudflare_email: Optional[str] = None
    cloudflare_api_base_url: str = "https://api.cloudflare.com/client/v4"

    # S3-compatible endpoint (R2 exposes one per account)
    s3_endpoint_url: Optional[str] = None
    s3_access_key_id: Optional[str] = None
    s3_secret_access_key: Optional[str] = None
    s3_session_token: Optional[str] = None
    s3_region_name: str = "auto"
    aws_profile: Optional[str] = None

    max_keys: int = 1000
    http_timeout: float = 30.0
    default_per_page: int = 10

    model_config = {
        "env_prefix": "R2_TOOLS_",
        "case_sensitive": False,
    }


settings = Settings()
