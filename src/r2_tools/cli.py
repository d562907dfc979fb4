"""Command-line interface for r2-tools.

Commands:
    - list: List one page of a bucket's files and folders, merged and sorted
    - buckets: List buckets visible to the configured credentials
    - download: Save one object to a local file
    - upload: Store a local file as one object
    - serve: Run the HTTP API

Credentials come from command options or, when an option is omitted, from
R2_TOOLS_* environment variables.
"""

import json
import math
import mimetypes
from pathlib import Path
from typing import Annotated, Any, Optional

import typer
import uvicorn

from . import __version__
from .cli_params import (
    AccessKeyIdOption,
    AccountIdOption,
    ApiTokenOption,
    AwsProfileOption,
    BackendOption,
    DelimiterOption,
    Direction,
    DirectionOption,
    EmailOption,
    EndpointUrlOption,
    JsonOption,
    OrderOption,
    PageOption,
    PerPageOption,
    PrefixOption,
    RegionOption,
    SecretAccessKeyOption,
)
from .core import settings
from .objectstorage.factory import config_from_settings
from .operations import download_object, list_bucket_objects, list_buckets, upload_object
from .schemas import StorageConfig

app = typer.Typer(
    name="r2-tools",
    help="Browse R2 and S3-compatible buckets with merged, sorted pages.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"r2-tools {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    R2-Tools: paginated bucket listings for R2 and S3-compatible storage.
    """
    pass


def format_size(num_bytes: int) -> str:
    """Human-readable size in binary units, e.g. ``1.5 KB``."""
    if num_bytes <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB", "TB"]
    size = float(num_bytes)
    unit = 0
    while size >= 1024 and unit < len(units) - 1:
        size /= 1024
        unit += 1
    return f"{round(size, 2):g} {units[unit]}"


def _create_storage_config(
    backend: Optional[str] = None,
    api_token: Optional[str] = None,
    account_id: Optional[str] = None,
    email: Optional[str] = None,
    access_key_id: Optional[str] = None,
    secret_access_key: Optional[str] = None,
    endpoint_url: Optional[str] = None,
    region_name: Optional[str] = None,
    aws_profile: Optional[str] = None,
) -> StorageConfig:
    """Create a storage configuration from options layered over settings."""
    overrides = {
        "cloudflare_api_token": api_token,
        "cloudflare_account_id": account_id,
        "cloudflare_email": email,
        "s3_access_key_id": access_key_id,
        "s3_secret_access_key": secret_access_key,
        "s3_endpoint_url": endpoint_url,
        "s3_region_name": region_name,
        "aws_profile": aws_profile,
    }
    effective = settings.model_copy(
        update={k: v for k, v in overrides.items() if v is not None}
    )
    return config_from_settings(effective, backend=backend)


def _print_listing(result: dict[str, Any]) -> None:
    info = result["result_info"]
    for folder in result["common_prefixes"]:
        typer.echo(f"  [DIR]  {folder}")
    for obj in result["objects"]:
        size = format_size(obj.get("size", 0))
        modified = obj.get("last_modified") or obj.get("lastModified") or "-"
        typer.echo(f"  {obj['key']}  {size}  {modified}")

    pages = max(1, math.ceil(info["total_count"] / info["per_page"]))
    typer.echo(
        f"Page {info['page']} of {pages} "
        f"({info['count']} of {info['total_count']} items)"
    )


@app.command("list")
def list_cmd(
    bucket: Annotated[str, typer.Argument(help="Bucket to list")],
    prefix: PrefixOption = "",
    delimiter: DelimiterOption = "/",
    page: PageOption = 1,
    per_page: PerPageOption = None,
    order: OrderOption = "name",
    direction: DirectionOption = Direction.asc,
    output_json: JsonOption = False,
    backend: BackendOption = None,
    api_token: ApiTokenOption = None,
    account_id: AccountIdOption = None,
    email: EmailOption = None,
    access_key_id: AccessKeyIdOption = None,
    secret_access_key: SecretAccessKeyOption = None,
    endpoint_url: EndpointUrlOption = None,
    region_name: RegionOption = None,
    aws_profile: AwsProfileOption = None,
) -> None:
    """
    List one page of a bucket's files and folders.

    Examples:
        r2-tools list media --prefix images/ --order size --direction desc
        r2-tools list media --backend s3 --endpoint-url http://localhost:9000
    """
    try:
        config = _create_storage_config(
            backend=backend.value if backend else None,
            api_token=api_token,
            account_id=account_id,
            email=email,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            endpoint_url=endpoint_url,
            region_name=region_name,
            aws_profile=aws_profile,
        )

        result = list_bucket_objects(
            bucket,
            config,
            prefix=prefix,
            delimiter=delimiter,
            page=page,
            per_page=per_page or settings.default_per_page,
            order_by=order,
            direction=direction.value,
        ).to_dict()

        if output_json:
            typer.echo(json.dumps(result, indent=2))
        elif result["result_info"]["count"]:
            _print_listing(result)
        else:
            typer.echo(f"No items found in {bucket}/{prefix} on page {page}.")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("buckets")
def buckets_cmd(
    output_json: JsonOption = False,
    backend: BackendOption = None,
    api_token: ApiTokenOption = None,
    account_id: AccountIdOption = None,
    email: EmailOption = None,
    access_key_id: AccessKeyIdOption = None,
    secret_access_key: SecretAccessKeyOption = None,
    endpoint_url: EndpointUrlOption = None,
    region_name: RegionOption = None,
    aws_profile: AwsProfileOption = None,
) -> None:
    """List buckets visible to the configured credentials."""
    try:
        config = _create_storage_config(
            backend=backend.value if backend else None,
            api_token=api_token,
            account_id=account_id,
            email=email,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            endpoint_url=endpoint_url,
            region_name=region_name,
            aws_profile=aws_profile,
        )
        buckets = list_buckets(config)

        if output_json:
            typer.echo(json.dumps(buckets, indent=2))
        elif buckets:
            typer.echo(f"Found {len(buckets)} buckets:")
            for bucket in buckets:
                typer.echo(f"  {bucket.get('name')}")
        else:
            typer.echo("No buckets found.")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("download")
def download_cmd(
    bucket: Annotated[str, typer.Argument(help="Bucket holding the object")],
    key: Annotated[str, typer.Argument(help="Key of the object to download")],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Destination file [default: object name]"),
    ] = None,
    backend: BackendOption = None,
    api_token: ApiTokenOption = None,
    account_id: AccountIdOption = None,
    email: EmailOption = None,
    access_key_id: AccessKeyIdOption = None,
    secret_access_key: SecretAccessKeyOption = None,
    endpoint_url: EndpointUrlOption = None,
    region_name: RegionOption = None,
    aws_profile: AwsProfileOption = None,
) -> None:
    """Save one object to a local file."""
    try:
        config = _create_storage_config(
            backend=backend.value if backend else None,
            api_token=api_token,
            account_id=account_id,
            email=email,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            endpoint_url=endpoint_url,
            region_name=region_name,
            aws_profile=aws_profile,
        )
        download = download_object(bucket, key, config)
        destination = output or Path(download.filename)
        destination.write_bytes(download.body)
        typer.echo(
            f"Downloaded {bucket}/{key} to {destination} ({format_size(len(download.body))})"
        )

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("upload")
def upload_cmd(
    bucket: Annotated[str, typer.Argument(help="Bucket to upload into")],
    source: Annotated[
        Path,
        typer.Argument(exists=True, dir_okay=False, readable=True, help="Local file"),
    ],
    key: Annotated[
        Optional[str],
        typer.Option("--key", "-k", help="Object key [default: file name]"),
    ] = None,
    backend: BackendOption = None,
    api_token: ApiTokenOption = None,
    account_id: AccountIdOption = None,
    email: EmailOption = None,
    access_key_id: AccessKeyIdOption = None,
    secret_access_key: SecretAccessKeyOption = None,
    endpoint_url: EndpointUrlOption = None,
    region_name: RegionOption = None,
    aws_profile: AwsProfileOption = None,
) -> None:
    """
    Store a local file as one object.

    Examples:
        r2-tools upload media ./cat.jpg --key images/cat.jpg
    """
    try:
        config = _create_storage_config(
            backend=backend.value if backend else None,
            api_token=api_token,
            account_id=account_id,
            email=email,
            access_key_id=access_key_id,
            secret_access_key=secret_access_key,
            endpoint_url=endpoint_url,
            region_name=region_name,
            aws_profile=aws_profile,
        )
        content_type = mimetypes.guess_type(source.name)[0] or "application/octet-stream"
        stored_key = upload_object(
            bucket, key or source.name, source.read_bytes(), config, content_type
        )
        typer.echo(f"Uploaded {source} to {bucket}/{stored_key}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("serve")
def serve_cmd(
    host: Annotated[str, typer.Option("--host", help="Interface to bind")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", help="Port to listen on")] = 8000,
) -> None:
    """Run the HTTP API with uvicorn."""
    uvicorn.run("r2_tools.api:app", host=host, port=port, log_config=None)


if __name__ == "__main__":
    app()
