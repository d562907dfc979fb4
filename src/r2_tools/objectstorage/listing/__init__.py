"""Object storage listing operations."""

from .aggregator import (
    ListingAggregator,
    aggregate_listing,
    build_query,
    combine_items,
    paginate,
    partition,
    sort_items,
)

__all__ = [
    "ListingAggregator",
    "aggregate_listing",
    "build_query",
    "combine_items",
    "paginate",
    "partition",
    "sort_items",
]
