"""Data types shared by the listing pipeline."""

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

SortDirection = Literal["asc", "desc"]


@dataclass(frozen=True)
class RemoteEntry:
    """One object returned by the remote listing API.

    Only ``key``, ``size`` and ``last_modified`` are interpreted. Everything
    else (etag, content type, metadata) rides along in ``raw`` and is emitted
    unchanged in listing results.

    Attributes:
        key: Full object key, unique within a bucket
        size: Object size in bytes
        last_modified: Timestamp string as sent by the remote API, if any
        raw: The original mapping received from the remote API
    """

    key: str
    size: int = 0
    last_modified: Optional[str] = None
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def to_dict(self) -> dict[str, Any]:
        if self.raw:
            return dict(self.raw)
        data: dict[str, Any] = {"key": self.key, "size": self.size}
        if self.last_modified is not None:
            data["last_modified"] = self.last_modified
        return data


@dataclass(frozen=True)
class CombinedItem:
    """A file or folder in the merged, sortable view of a listing."""

    key: str
    name: str
    type: Literal["file", "folder"]
    size: int
    last_modified_timestamp: int
    full_key: str


class ListingQuery(BaseModel):
    """Caller-supplied paging and sorting parameters for one listing."""

    model_config = ConfigDict(extra="forbid")

    bucket: str = Field(..., min_length=1, description="Bucket name")
    prefix: str = Field("", description="Key prefix to list under")
    delimiter: str = Field("/", description="Delimiter for folder grouping")
    page: int = Field(1, ge=1, description="1-based page number")
    per_page: int = Field(10, ge=1, description="Items per page")
    order_by: str = Field(
        "name", description="Sort key: name, size or lastModified"
    )
    direction: SortDirection = Field("asc", description="Sort direction")


class ResultInfo(BaseModel):
    """Pagination metadata computed after aggregation."""

    page: int
    per_page: int
    count: int
    total_count: int


@dataclass
class ListingResult:
    """One page of a merged listing, split back into files and folders."""

    objects: list[RemoteEntry]
    common_prefixes: list[str]
    result_info: ResultInfo

    def to_dict(self) -> dict[str, Any]:
        return {
            "objects": [entry.to_dict() for entry in self.objects],
            "common_prefixes": list(self.common_prefixes),
            "result_info": self.result_info.model_dump(),
        }


@dataclass(frozen=True)
class ObjectDownload:
    """Content of one object fetched from a bucket."""

    key: str
    body: bytes
    content_type: str = "application/octet-stream"

    @property
    def filename(self) -> str:
        return self.key.rsplit("/", 1)[-1]
