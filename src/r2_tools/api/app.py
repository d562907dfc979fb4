"""FastAPI application exposing bucket listings.

Endpoints:
    GET    /health
    GET    /buckets
    GET    /buckets/{bucket}/objects
    GET    /buckets/{bucket}/objects/{key}/download
    DELETE /buckets/{bucket}/objects/{key}
    POST   /buckets/{bucket}/upload
    POST   /buckets/{bucket}/folders

Errors raised by r2-tools are returned as ``{"error": ..., "success": false}``.
Authentication is handled in front of this service.
"""

from io import BytesIO
from typing import Any, Iterator, Literal, Optional
from urllib.parse import quote

from fastapi import Depends, FastAPI, File, Form, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field

from r2_tools import __version__
from r2_tools.core import Settings, get_logger, settings
from r2_tools.core.exceptions import R2ToolsError, ValidationError
from r2_tools.objectstorage.factory import config_from_settings, create_object_store
from r2_tools.objectstorage.listing import ListingAggregator, build_query
from r2_tools.objectstorage.stores import ObjectStore
from r2_tools.operations import call_store

logger = get_logger(__name__)


class FolderRequest(BaseModel):
    """Body of a create-folder request."""

    path: str = Field(..., min_length=1, description="Folder path inside the bucket")


def get_settings() -> Settings:
    return settings


def get_object_store(
    app_settings: Settings = Depends(get_settings),
) -> Iterator[ObjectStore]:
    """Build an object store for the duration of one request."""
    store = create_object_store(config_from_settings(app_settings))
    try:
        yield store
    finally:
        store.close()


def _content_disposition(filename: str) -> str:
    if filename.isascii():
        escaped = filename.replace("\\", "\\\\").replace('"', '\\"')
        return f'attachment; filename="{escaped}"'
    return f"attachment; filename*=utf-8''{quote(filename)}"


async def _handle_r2_tools_error(request: Request, exc: Exception) -> JSONResponse:
    status_code = 400 if isinstance(exc, ValidationError) else 500
    logger.error(
        "Request failed",
        path=request.url.path,
        error_type=type(exc).__name__,
        error=str(exc),
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": str(exc), "success": False},
    )


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    api = FastAPI(
        title="r2-tools",
        version=__version__,
        description="Merged, sorted and paginated R2 bucket listings.",
    )
    api.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    api.add_exception_handler(R2ToolsError, _handle_r2_tools_error)

    @api.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @api.get("/buckets")
    def list_buckets(store: ObjectStore = Depends(get_object_store)) -> dict[str, Any]:
        return {"buckets": call_store(store.list_buckets)}

    @api.get("/buckets/{bucket}/objects")
    def list_objects(
        bucket: str,
        prefix: str = "",
        delimiter: str = "/",
        page: int = Query(1, ge=1),
        per_page: Optional[int] = Query(None, ge=1),
        order: str = Query("name", description="name, size or lastModified"),
        direction: Literal["asc", "desc"] = "asc",
        app_settings: Settings = Depends(get_settings),
        store: ObjectStore = Depends(get_object_store),
    ) -> dict[str, Any]:
        query = build_query(
            bucket=bucket,
            prefix=prefix,
            delimiter=delimiter or "/",
            page=page,
            per_page=per_page or app_settings.default_per_page,
            order_by=order,
            direction=direction,
        )
        return ListingAggregator(store).list_objects(query).to_dict()

    @api.get("/buckets/{bucket}/objects/{key:path}/download")
    def download_object(
        bucket: str, key: str, store: ObjectStore = Depends(get_object_store)
    ) -> StreamingResponse:
        download = call_store(store.get_object, bucket, key)
        return StreamingResponse(
            BytesIO(download.body),
            media_type=download.content_type,
            headers={"Content-Disposition": _content_disposition(download.filename)},
        )

    @api.delete("/buckets/{bucket}/objects/{key:path}")
    def delete_object(
        bucket: str, key: str, store: ObjectStore = Depends(get_object_store)
    ) -> dict[str, bool]:
        call_store(store.delete_object, bucket, key)
        return {"success": True}

    @api.post("/buckets/{bucket}/upload")
    def upload_object(
        bucket: str,
        file: UploadFile = File(..., description="File content"),
        key: str = Form(..., description="Object key to store the file under"),
        store: ObjectStore = Depends(get_object_store),
    ) -> dict[str, Any]:
        key = key.strip().lstrip("/")
        if not key:
            raise ValidationError("Object key must not be empty")
        content_type = file.content_type or "application/octet-stream"
        call_store(store.upload_object, bucket, key, file.file.read(), content_type)
        return {"success": True, "key": key}

    @api.post("/buckets/{bucket}/folders")
    def create_folder(
        bucket: str,
        body: FolderRequest,
        store: ObjectStore = Depends(get_object_store),
    ) -> dict[str, Any]:
        path = body.path.strip().lstrip("/")
        if not path:
            raise ValidationError("Folder path must not be empty")
        key = call_store(store.create_folder, bucket, path)
        return {"success": True, "key": key}

    return api


app = create_app()
