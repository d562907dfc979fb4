"""Cloudflare API v4 client for R2 buckets.

Authentication Methods Supported:
    1. API tokens, sent as ``Authorization: Bearer <token>``
    2. Global API keys, sent as ``X-Auth-Email`` / ``X-Auth-Key``. A credential
       without ``-`` or ``_`` is treated as a global key and needs an email.

Every response is wrapped in the Cloudflare envelope
``{"success": bool, "errors": [...], "result": ..., "result_info": ...}``;
the client unwraps it and raises RemoteListingError for failed calls.
"""

from typing import Any, Optional
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ConfigDict, Field

from r2_tools.core import get_logger
from r2_tools.core.exceptions import ConfigurationError, RemoteListingError

logger = get_logger(__name__)


class CloudflareClientConfig(BaseModel):
    """Credentials and connection settings for the Cloudflare API."""

    model_config = ConfigDict(extra="forbid")

    api_token: str = Field(..., description="API token or global API key")
    account_id: str = Field(..., description="Cloudflare account ID")
    email: Optional[str] = Field(
        None, description="Account email, required with a global API key"
    )
    api_base_url: str = Field(
        "https://api.cloudflare.com/client/v4", description="API base URL"
    )
    timeout: float = Field(30.0, description="Request timeout in seconds")


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.lower() in ("true", "false"):
        return value.lower() == "true"
    return None


class CloudflareR2Client:
    """Thin synchronous wrapper over the R2 endpoints of the Cloudflare API."""

    def __init__(self, config: CloudflareClientConfig):
        """Initialize the client.

        Args:
            config: Cloudflare credentials

        Raises:
            ConfigurationError: If credentials are missing or incomplete
        """
        if not config.api_token.strip():
            raise ConfigurationError("Cloudflare API token is required")
        if not config.account_id.strip():
            raise ConfigurationError("Cloudflare account ID is required")
        if self._is_global_api_key(config.api_token) and not config.email:
            raise ConfigurationError("Email is required when using a global API key")

        self.config = config
        self._http = httpx.Client(
            base_url=config.api_base_url.rstrip("/"),
            headers=self._auth_headers(),
            timeout=config.timeout,
        )

    @staticmethod
    def _is_global_api_key(token: str) -> bool:
        return "-" not in token and "_" not in token

    def _auth_headers(self) -> dict[str, str]:
        token = self.config.api_token.strip()
        if self._is_global_api_key(token):
            logger.debug("Using global API key authentication")
            return {"X-Auth-Email": self.config.email or "", "X-Auth-Key": token}
        logger.debug("Using API token authentication")
        return {"Authorization": f"Bearer {token}"}

    def _bucket_path(self, bucket: str) -> str:
        return f"/accounts/{self.config.account_id}/r2/buckets/{quote(bucket, safe='')}"

    def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("Cloudflare API request", method=method, path=path)
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise RemoteListingError(f"Cloudflare API request failed: {e}")

        if response.is_error:
            raise RemoteListingError(
                f"Cloudflare API error: {response.status_code} "
                f"{response.reason_phrase} - {response.text}"
            )
        return response

    def request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        """Send a request and return the decoded response envelope.

        Raises:
            RemoteListingError: On transport errors, non-2xx statuses or
                envelopes with ``success: false``
        """
        response = self._send(method, path, **kwargs)

        if not response.content:
            return {}

        try:
            body = response.json()
        except ValueError as e:
            raise RemoteListingError(f"Cloudflare API returned invalid JSON: {e}")

        if isinstance(body, dict) and body.get("success") is False:
            errors = body.get("errors") or []
            message = errors[0].get("message") if errors else None
            raise RemoteListingError(f"Cloudflare API error: {message or 'Unknown error'}")

        if not isinstance(body, dict):
            return {"result": body}
        return body

    def list_buckets(self) -> list[dict[str, Any]]:
        """List R2 buckets in the account."""
        body = self.request("GET", f"/accounts/{self.config.account_id}/r2/buckets")
        result = body.get("result", body)
        if isinstance(result, dict):
            result = result.get("buckets", [])
        return result if isinstance(result, list) else []

    def list_objects(
        self,
        bucket: str,
        prefix: str = "",
        delimiter: str = "/",
        cursor: Optional[str] = None,
        per_page: int = 1000,
    ) -> Any:
        """Fetch one page of a bucket listing.

        Returns:
            The ``result`` of the envelope. A bare list result is folded
            together with ``result_info`` into the standard page shape when
            ``result_info`` carries truncation data; otherwise it is returned
            as-is.
        """
        params: dict[str, Any] = {"per_page": per_page}
        if prefix:
            params["prefix"] = prefix
        if delimiter:
            params["delimiter"] = delimiter
        if cursor:
            params["cursor"] = cursor

        body = self.request("GET", f"{self._bucket_path(bucket)}/objects", params=params)
        result = body.get("result", body)
        info = body.get("result_info")

        if isinstance(result, list) and isinstance(info, dict):
            truncated = _as_bool(info.get("is_truncated"))
            if truncated is not None:
                return {
                    "objects": result,
                    "delimited_prefixes": info.get("delimited") or [],
                    "truncated": truncated,
                    "cursor": info.get("cursor") or None,
                }
        return result

    def delete_object(self, bucket: str, key: str) -> None:
        """Delete one object."""
        self.request("DELETE", f"{self._bucket_path(bucket)}/objects/{quote(key, safe='')}")

    def get_object(self, bucket: str, key: str) -> tuple[bytes, str]:
        """Download one object.

        Returns:
            Tuple of (content, content type)
        """
        response = self._send(
            "GET", f"{self._bucket_path(bucket)}/objects/{quote(key, safe='')}"
        )
        content_type = response.headers.get("content-type", "application/octet-stream")
        return response.content, content_type

    def put_object(
        self,
        bucket: str,
        key: str,
        body: bytes = b"",
        content_type: str = "application/octet-stream",
    ) -> None:
        """Upload a small object in a single request."""
        self.request(
            "PUT",
            f"{self._bucket_path(bucket)}/objects/{quote(key, safe='')}",
            content=body,
            headers={"Content-Type": content_type},
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "CloudflareR2Client":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
