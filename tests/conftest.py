"""Test configuration and fixtures for r2-tools."""

import pytest

from r2_tools.core.exceptions import RemoteListingError
from r2_tools.objectstorage.models import ObjectDownload


class FakePageLister:
    """In-memory page lister driven by a list of canned responses.

    Page N is served when the cursor is ``page-N`` (page 0 for no cursor).
    A response that is an exception instance is raised instead of returned.
    """

    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def list_page(self, bucket, prefix="", delimiter="/", cursor=None):
        self.calls.append(
            {"bucket": bucket, "prefix": prefix, "delimiter": delimiter, "cursor": cursor}
        )
        index = 0 if cursor is None else int(cursor.split("-")[1])
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        return response


class FakeObjectStore(FakePageLister):
    """Fake page lister that also records bucket management calls."""

    def __init__(self, responses=(), buckets=()):
        super().__init__(responses)
        self.buckets = list(buckets)
        self.deleted = []
        self.folders = []
        self.objects = {}
        self.closed = False

    def list_buckets(self):
        return list(self.buckets)

    def delete_object(self, bucket, key):
        if key == "missing.txt":
            raise RemoteListingError("Cloudflare API error: 404 Not Found - no such key")
        self.deleted.append((bucket, key))

    def create_folder(self, bucket, path):
        key = f"{path.rstrip('/')}/.keep"
        self.folders.append((bucket, key))
        return key

    def get_object(self, bucket, key):
        if key not in self.objects:
            raise RemoteListingError("Cloudflare API error: 404 Not Found - no such key")
        body, content_type = self.objects[key]
        return ObjectDownload(key=key, body=body, content_type=content_type)

    def upload_object(self, bucket, key, body, content_type="application/octet-stream"):
        self.objects[key] = (body, content_type)

    def close(self):
        self.closed = True


def make_object(key, size, last_modified=None, **extra):
    obj = {"key": key, "size": size, "etag": f"etag-{key}"}
    if last_modified is not None:
        obj["last_modified"] = last_modified
    obj.update(extra)
    return obj


def paged(items_per_page, prefixes_per_page=None):
    """Build standard paginated responses chained by ``page-N`` cursors."""
    prefixes_per_page = prefixes_per_page or [[] for _ in items_per_page]
    responses = []
    last = len(items_per_page) - 1
    for index, (objects, prefixes) in enumerate(zip(items_per_page, prefixes_per_page)):
        responses.append(
            {
                "objects": objects,
                "delimited_prefixes": prefixes,
                "truncated": index < last,
                "cursor": f"page-{index + 1}" if index < last else None,
            }
        )
    return responses


@pytest.fixture
def dashboard_bucket_pages():
    """12 files (f1.txt..f12.txt, 100..1200 bytes) and 2 folders over 2 remote pages."""
    files = [
        make_object(f"f{i}.txt", i * 100, f"2024-01-{i:02d}T00:00:00.000Z")
        for i in range(1, 13)
    ]
    return paged([files[:8], files[8:]], [[], ["docs/", "images/"]])


@pytest.fixture
def dashboard_lister(dashboard_bucket_pages):
    return FakePageLister(dashboard_bucket_pages)


@pytest.fixture
def fake_store(dashboard_bucket_pages):
    return FakeObjectStore(
        dashboard_bucket_pages,
        buckets=[
            {"name": "media", "creation_date": "2024-01-01T00:00:00Z"},
            {"name": "backups", "creation_date": "2024-02-01T00:00:00Z"},
        ],
    )
