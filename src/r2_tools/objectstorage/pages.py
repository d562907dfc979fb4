"""Decoding of raw remote listing responses.

The remote "list objects" call is expected to return a mapping shaped like::

    {"objects": [...], "delimited_prefixes": [...], "truncated": bool, "cursor": str}

Some deployments answer with a bare list of objects instead, and a broken
upstream can answer with anything at all. Each response is decoded exactly
once into one of three variants so the aggregation loop never has to inspect
raw payloads:

    StandardPage       -> accumulate, continue while truncated with a cursor
    BareArrayFallback  -> accumulate the objects, stop
    Unrecognized       -> stop
"""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Union

from r2_tools.core import get_logger

from .models import RemoteEntry

logger = get_logger(__name__)


@dataclass(frozen=True)
class StandardPage:
    """A well-formed page of a cursor-paginated listing."""

    objects: list[RemoteEntry] = field(default_factory=list)
    prefixes: list[str] = field(default_factory=list)
    truncated: bool = False
    cursor: Optional[str] = None


@dataclass(frozen=True)
class BareArrayFallback:
    """A bare array of objects with no pagination or folder data."""

    objects: list[RemoteEntry] = field(default_factory=list)


@dataclass(frozen=True)
class Unrecognized:
    """A response of unknown shape."""

    payload_type: str


ListPage = Union[StandardPage, BareArrayFallback, Unrecognized]


def decode_entry(raw: Any) -> Optional[RemoteEntry]:
    """Decode one remote object, or return None if it has no usable key."""
    if not isinstance(raw, Mapping):
        return None

    key = raw.get("key")
    if not isinstance(key, str) or not key:
        return None

    size = raw.get("size", 0)
    if isinstance(size, bool) or not isinstance(size, int) or size < 0:
        size = 0

    last_modified = raw.get("last_modified", raw.get("lastModified"))
    if not isinstance(last_modified, str) or not last_modified:
        last_modified = None

    return RemoteEntry(key=key, size=size, last_modified=last_modified, raw=dict(raw))


def _decode_entries(items: Any) -> list[RemoteEntry]:
    if not isinstance(items, list):
        return []

    entries = []
    for item in items:
        entry = decode_entry(item)
        if entry is None:
            logger.warning("Skipping malformed remote object", item=repr(item)[:200])
            continue
        entries.append(entry)
    return entries


def _decode_prefixes(items: Any) -> list[str]:
    if not isinstance(items, list):
        return []
    return [p for p in items if isinstance(p, str) and p != ""]


def decode_page(payload: Any) -> ListPage:
    """Decode one raw listing response into a page variant.

    Args:
        payload: Parsed JSON (or equivalent) returned by a page lister

    Returns:
        StandardPage, BareArrayFallback or Unrecognized
    """
    if isinstance(payload, list):
        return BareArrayFallback(objects=_decode_entries(payload))

    if (
        isinstance(payload, Mapping)
        and ("objects" in payload or "delimited_prefixes" in payload)
        and isinstance(payload.get("truncated"), bool)
    ):
        cursor = payload.get("cursor")
        return StandardPage(
            objects=_decode_entries(payload.get("objects")),
            prefixes=_decode_prefixes(payload.get("delimited_prefixes")),
            truncated=payload["truncated"],
            cursor=cursor if isinstance(cursor, str) and cursor else None,
        )

    return Unrecognized(payload_type=type(payload).__name__)
