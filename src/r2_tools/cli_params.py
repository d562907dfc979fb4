"""Shared CLI parameter definitions.

Backend and credential options repeat across every command. They are defined
once here as ``Annotated`` aliases and used directly in command signatures:

    @app.command()
    def my_command(
        backend: BackendOption = None,
        api_token: ApiTokenOption = None,
    ):
        pass

Every credential option defaults to None, which means "take the value from
the R2_TOOLS_* environment settings".

Parameter Categories:
    - Backend selection
    - Cloudflare API parameters
    - S3-compatible endpoint parameters
    - Listing parameters
"""

from enum import Enum
from typing import Annotated, Optional

import typer


class Backend(str, Enum):
    cloudflare = "cloudflare"
    s3 = "s3"


class Direction(str, Enum):
    asc = "asc"
    desc = "desc"


BackendOption = Annotated[
    Optional[Backend],
    typer.Option(
        "--backend",
        "-b",
        help="Storage backend: cloudflare (REST API) or s3 (S3-compatible endpoint)",
        case_sensitive=False,
    ),
]

# Cloudflare API parameters
ApiTokenOption = Annotated[
    Optional[str],
    typer.Option("--api-token", help="Cloudflare API token or global API key"),
]
AccountIdOption = Annotated[
    Optional[str], typer.Option("--account-id", help="Cloudflare account ID")
]
EmailOption = Annotated[
    Optional[str],
    typer.Option("--email", help="Cloudflare account email (global API key only)"),
]

# S3 parameters
AccessKeyIdOption = Annotated[
    Optional[str], typer.Option("--access-key-id", help="S3 access key ID")
]
SecretAccessKeyOption = Annotated[
    Optional[str], typer.Option("--secret-access-key", help="S3 secret access key")
]
EndpointUrlOption = Annotated[
    Optional[str], typer.Option("--endpoint-url", help="Custom S3 endpoint URL")
]
RegionOption = Annotated[
    Optional[str], typer.Option("--region", help="S3 region name")
]
AwsProfileOption = Annotated[
    Optional[str], typer.Option("--aws-profile", help="AWS CLI profile name")
]

# Listing parameters
PrefixOption = Annotated[
    str, typer.Option("--prefix", "-p", help="Key prefix (folder path) to list")
]
DelimiterOption = Annotated[
    str, typer.Option("--delimiter", help="Delimiter used to group folders")
]
PageOption = Annotated[
    int, typer.Option("--page", min=1, help="Page number, starting at 1")
]
PerPageOption = Annotated[
    Optional[int],
    typer.Option(
        "--per-page", min=1, help="Items per page [default: R2_TOOLS_DEFAULT_PER_PAGE]"
    ),
]
OrderOption = Annotated[
    str, typer.Option("--order", help="Sort key: name, size or lastModified")
]
DirectionOption = Annotated[
    Direction,
    typer.Option("--direction", help="Sort direction", case_sensitive=False),
]
JsonOption = Annotated[
    bool, typer.Option("--json", help="Print the raw JSON result")
]
