"""Merged, sorted and paginated bucket listings.

The remote listing API pages with an opaque cursor and groups keys into
folders with a delimiter. Dashboards want numbered pages sorted by name, size
or date across files and folders together, which the remote API cannot do.
The aggregator therefore drains every remote page for a prefix, merges files
and folders into one collection, sorts it, and only then slices out the
requested page.

Failure Policy:
    A remote page that fails to load ends the fetch loop. Whatever was
    accumulated up to that point is sorted and paginated as if it were the
    complete listing and no error reaches the caller. Configuration errors
    (missing credentials, unknown backend) are raised.
"""

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Iterable, Optional

from pydantic import TypeAdapter
from pyuca import Collator

from r2_tools.core import get_logger, get_tracer
from r2_tools.core.exceptions import ConfigurationError, ValidationError
from r2_tools.objectstorage.models import (
    CombinedItem,
    ListingQuery,
    ListingResult,
    RemoteEntry,
    ResultInfo,
)
from r2_tools.objectstorage.pages import (
    BareArrayFallback,
    StandardPage,
    Unrecognized,
    decode_page,
)
from r2_tools.objectstorage.stores import PageLister

logger = get_logger(__name__)
tracer = get_tracer(__name__)

SORT_KEYS = ("name", "size", "lastModified")

_datetime_adapter = TypeAdapter(datetime)
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _timestamp_millis(value: Optional[str]) -> int:
    """Epoch milliseconds for an ISO-8601 timestamp, 0 if missing or invalid."""
    if not value:
        return 0
    try:
        parsed = _datetime_adapter.validate_python(value)
    except ValueError:
        return 0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return (parsed - _EPOCH) // timedelta(milliseconds=1)


def combine_items(
    objects: Iterable[RemoteEntry], prefixes: Iterable[str], prefix: str
) -> list[CombinedItem]:
    """Merge remote objects and common prefixes into one list of items.

    Names are relative to ``prefix``; folder names lose their trailing slash.
    """
    items = [
        CombinedItem(
            key=obj.key,
            name=obj.key[len(prefix):],
            type="file",
            size=obj.size,
            last_modified_timestamp=_timestamp_millis(obj.last_modified),
            full_key=obj.key,
        )
        for obj in objects
    ]

    for folder in prefixes:
        relative = folder[len(prefix):] if folder.startswith(prefix) else folder
        if relative.endswith("/"):
            relative = relative[:-1]
        items.append(
            CombinedItem(
                key=folder,
                name=relative,
                type="folder",
                size=0,
                last_modified_timestamp=0,
                full_key=folder,
            )
        )

    return items


@lru_cache(maxsize=1)
def _collator() -> Collator:
    return Collator()


def _name_key(item: CombinedItem) -> tuple[int, ...]:
    # Unicode Collation Algorithm with the default (root) table
    return _collator().sort_key(item.name)


def sort_items(
    items: list[CombinedItem], order_by: str = "name", direction: str = "asc"
) -> list[CombinedItem]:
    """Return ``items`` sorted by ``order_by``; unknown keys sort by name.

    The sort is stable, so items with equal keys keep accumulation order in
    both directions.
    """
    if order_by == "size":
        key = lambda item: item.size  # noqa: E731
    elif order_by == "lastModified":
        key = lambda item: item.last_modified_timestamp  # noqa: E731
    else:
        key = _name_key

    return sorted(items, key=key, reverse=direction == "desc")


def paginate(items: list[CombinedItem], page: int, per_page: int) -> list[CombinedItem]:
    """Slice one 1-based page out of ``items``; pages past the end are empty."""
    start = (page - 1) * per_page
    return items[start:start + per_page]


def partition(
    page_items: Iterable[CombinedItem], objects: Iterable[RemoteEntry]
) -> tuple[list[RemoteEntry], list[str]]:
    """Split a page of items back into original remote objects and folder prefixes."""
    originals: dict[str, RemoteEntry] = {}
    for obj in objects:
        originals.setdefault(obj.key, obj)

    files: list[RemoteEntry] = []
    folders: list[str] = []
    for item in page_items:
        if item.type == "folder":
            folders.append(item.full_key)
        else:
            original = originals.get(item.full_key)
            if original is not None:
                files.append(original)
    return files, folders


class ListingAggregator:
    """Builds numbered, sorted pages over a cursor-paginated remote listing."""

    def __init__(self, lister: PageLister):
        """Initialize the aggregator.

        Args:
            lister: Remote listing backend, called once per remote page
        """
        self.lister = lister

    def fetch_all(
        self, bucket: str, prefix: str = "", delimiter: str = "/"
    ) -> tuple[list[RemoteEntry], list[str]]:
        """Fetch every remote page for a prefix.

        Returns:
            Tuple of (objects, common_prefixes) accumulated across pages

        Raises:
            ConfigurationError: If the lister reports a configuration problem
        """
        objects: list[RemoteEntry] = []
        prefixes: list[str] = []
        cursor: Optional[str] = None
        pages = 0
        truncated = True

        while truncated:
            try:
                payload = self.lister.list_page(bucket, prefix, delimiter, cursor)
            except ConfigurationError:
                raise
            except Exception as e:
                logger.error(
                    "Remote listing failed, returning partial results",
                    bucket=bucket,
                    prefix=prefix,
                    cursor=cursor,
                    pages_fetched=pages,
                    error=str(e),
                )
                break

            pages += 1
            page = decode_page(payload)

            if isinstance(page, StandardPage):
                objects.extend(page.objects)
                prefixes.extend(page.prefixes)
                cursor = page.cursor
                truncated = page.truncated
            elif isinstance(page, BareArrayFallback):
                logger.warning(
                    "Remote listing returned a bare array, stopping",
                    bucket=bucket,
                    prefix=prefix,
                    object_count=len(page.objects),
                )
                objects.extend(page.objects)
                truncated = False
            elif isinstance(page, Unrecognized):
                logger.warning(
                    "Unrecognized remote listing response, stopping",
                    bucket=bucket,
                    prefix=prefix,
                    payload_type=page.payload_type,
                )
                truncated = False

            if truncated and not cursor:
                logger.warning(
                    "Remote listing truncated without a cursor, stopping",
                    bucket=bucket,
                    prefix=prefix,
                    pages_fetched=pages,
                )
                truncated = False

        logger.info(
            "Remote listing fetched",
            bucket=bucket,
            prefix=prefix,
            pages_fetched=pages,
            object_count=len(objects),
            prefix_count=len(prefixes),
        )
        return objects, prefixes

    def list_objects(self, query: ListingQuery) -> ListingResult:
        """Return one page of the merged, sorted listing described by ``query``."""
        with tracer.start_as_current_span("r2_tools.list_objects") as span:
            span.set_attribute("r2.bucket", query.bucket)
            span.set_attribute("r2.prefix", query.prefix)

            objects, prefixes = self.fetch_all(
                query.bucket, query.prefix, query.delimiter
            )
            items = combine_items(objects, prefixes, query.prefix)
            items = sort_items(items, query.order_by, query.direction)
            page_items = paginate(items, query.page, query.per_page)
            files, folders = partition(page_items, objects)

            span.set_attribute("r2.total_count", len(items))

        logger.info(
            "Listing page built",
            bucket=query.bucket,
            prefix=query.prefix,
            page=query.page,
            per_page=query.per_page,
            order_by=query.order_by,
            direction=query.direction,
            object_count=len(files),
            prefix_count=len(folders),
            total_count=len(items),
        )
        return ListingResult(
            objects=files,
            common_prefixes=folders,
            result_info=ResultInfo(
                page=query.page,
                per_page=query.per_page,
                count=len(page_items),
                total_count=len(items),
            ),
        )


def build_query(
    bucket: str,
    prefix: str = "",
    delimiter: str = "/",
    page: int = 1,
    per_page: int = 10,
    order_by: str = "name",
    direction: str = "asc",
) -> ListingQuery:
    """Validate listing parameters.

    Raises:
        ValidationError: If any parameter is out of range
    """
    try:
        return ListingQuery(
            bucket=bucket,
            prefix=prefix,
            delimiter=delimiter,
            page=page,
            per_page=per_page,
            order_by=order_by,
            direction=direction,
        )
    except ValueError as e:
        raise ValidationError(f"Invalid listing parameters: {e}")


def aggregate_listing(
    lister: PageLister,
    bucket: str,
    prefix: str = "",
    delimiter: str = "/",
    page: int = 1,
    per_page: int = 10,
    order_by: str = "name",
    direction: str = "asc",
) -> ListingResult:
    """Convenience function to list one page of a bucket through ``lister``."""
    query = build_query(
        bucket=bucket,
        prefix=prefix,
        delimiter=delimiter,
        page=page,
        per_page=per_page,
        order_by=order_by,
        direction=direction,
    )
    return ListingAggregator(lister).list_objects(query)
