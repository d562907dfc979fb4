"""Object storage listing for R2 and S3-compatible services."""

from .factory import config_from_settings, create_object_store
from .listing import ListingAggregator, aggregate_listing
from .models import (
    CombinedItem,
    ListingQuery,
    ListingResult,
    RemoteEntry,
    ResultInfo,
)
from .pages import BareArrayFallback, StandardPage, Unrecognized, decode_page
from .stores import CloudflareR2Store, ObjectStore, PageLister, S3ObjectStore

__all__ = [
    "config_from_settings",
    "create_object_store",
    "ListingAggregator",
    "aggregate_listing",
    "CombinedItem",
    "ListingQuery",
    "ListingResult",
    "RemoteEntry",
    "ResultInfo",
    "BareArrayFallback",
    "StandardPage",
    "Unrecognized",
    "decode_page",
    "CloudflareR2Store",
    "ObjectStore",
    "PageLister",
    "S3ObjectStore",
]
