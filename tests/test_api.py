"""Tests for the HTTP API."""

import pytest
from fastapi.testclient import TestClient

from r2_tools.api import create_app, get_object_store
from r2_tools.api.app import get_settings
from r2_tools.core import Settings


@pytest.fixture
def api_app():
    return create_app()


@pytest.fixture
def client(api_app, fake_store):
    """Test client whose requests are served by the fake object store."""
    api_app.dependency_overrides[get_object_store] = lambda: fake_store
    with TestClient(api_app) as test_client:
        yield test_client
    api_app.dependency_overrides.clear()


class TestListObjects:
    """Test GET /buckets/{bucket}/objects."""

    def test_second_page_sorted_by_name(self, client, fake_store):
        """Test the requested page of the merged listing is returned."""
        response = client.get(
            "/buckets/media/objects", params={"page": 2, "per_page": 5}
        )

        assert response.status_code == 200
        body = response.json()
        assert [o["key"] for o in body["objects"]] == [
            "f2.txt",
            "f3.txt",
            "f4.txt",
            "f5.txt",
            "f6.txt",
        ]
        assert body["common_prefixes"] == []
        assert body["result_info"] == {
            "page": 2,
            "per_page": 5,
            "count": 5,
            "total_count": 14,
        }
        assert len(fake_store.calls) == 2

    def test_default_page(self, client):
        """Test defaults list the first ten items with folders split out."""
        body = client.get("/buckets/media/objects").json()

        assert body["common_prefixes"] == ["docs/"]
        assert len(body["objects"]) == 9
        assert body["result_info"]["per_page"] == 10
        assert body["result_info"]["count"] == 10

    def test_objects_pass_through_unchanged(self, client):
        """Test remote object fields are returned as received."""
        body = client.get(
            "/buckets/media/objects",
            params={"order": "size", "direction": "desc", "per_page": 1},
        ).json()

        assert body["objects"] == [
            {
                "key": "f12.txt",
                "size": 1200,
                "etag": "etag-f12.txt",
                "last_modified": "2024-01-12T00:00:00.000Z",
            }
        ]

    def test_query_params_reach_the_lister(self, client, fake_store):
        """Test prefix and delimiter are forwarded to the remote listing."""
        client.get("/buckets/media/objects", params={"prefix": "docs/", "delimiter": ""})

        assert fake_store.calls[0]["prefix"] == "docs/"
        assert fake_store.calls[0]["delimiter"] == "/"
        assert fake_store.calls[0]["bucket"] == "media"

    def test_page_past_the_end(self, client):
        """Test a page beyond the listing is empty but reports the total."""
        body = client.get("/buckets/media/objects", params={"page": 9}).json()

        assert body["objects"] == []
        assert body["common_prefixes"] == []
        assert body["result_info"]["count"] == 0
        assert body["result_info"]["total_count"] == 14

    @pytest.mark.parametrize(
        "params", [{"page": 0}, {"per_page": 0}, {"direction": "sideways"}]
    )
    def test_invalid_parameters(self, client, params):
        """Test out-of-range paging and unknown directions are rejected."""
        response = client.get("/buckets/media/objects", params=params)
        assert response.status_code == 422

    def test_missing_configuration(self, api_app):
        """Test missing credentials are reported as a JSON error."""
        api_app.dependency_overrides[get_settings] = lambda: Settings(
            backend="cloudflare", cloudflare_api_token=None, cloudflare_account_id=None
        )
        with TestClient(api_app) as test_client:
            response = test_client.get("/buckets/media/objects")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Cloudflare API token is not configured",
            "success": False,
        }


class TestBucketManagement:
    """Test bucket, delete and folder endpoints."""

    def test_health(self, client):
        """Test the health endpoint."""
        assert client.get("/health").json() == {"status": "ok"}

    def test_list_buckets(self, client):
        """Test buckets are returned under a buckets key."""
        body = client.get("/buckets").json()
        assert [b["name"] for b in body["buckets"]] == ["media", "backups"]

    def test_delete_nested_key(self, client, fake_store):
        """Test keys containing slashes are deleted as one key."""
        response = client.delete("/buckets/media/objects/docs/report.pdf")

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert fake_store.deleted == [("media", "docs/report.pdf")]

    def test_delete_failure(self, client):
        """Test remote failures become JSON errors."""
        response = client.delete("/buckets/media/objects/missing.txt")

        assert response.status_code == 500
        assert response.json()["success"] is False
        assert "no such key" in response.json()["error"]

    def test_create_folder(self, client, fake_store):
        """Test a folder placeholder is created."""
        response = client.post("/buckets/media/folders", json={"path": "/reports/2024"})

        assert response.status_code == 200
        assert response.json() == {"success": True, "key": "reports/2024/.keep"}
        assert fake_store.folders == [("media", "reports/2024/.keep")]

    def test_create_folder_blank_path(self, client, fake_store):
        """Test a whitespace-only path is rejected."""
        response = client.post("/buckets/media/folders", json={"path": "   "})

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert fake_store.folders == []

    def test_create_folder_missing_path(self, client):
        """Test the request body is validated."""
        response = client.post("/buckets/media/folders", json={})
        assert response.status_code == 422


class TestObjectTransfer:
    """Test object download and upload endpoints."""

    def test_download(self, client, fake_store):
        """Test object content is returned as an attachment."""
        fake_store.objects["docs/report.pdf"] = (b"%PDF-1.7", "application/pdf")

        response = client.get("/buckets/media/objects/docs/report.pdf/download")

        assert response.status_code == 200
        assert response.content == b"%PDF-1.7"
        assert response.headers["content-type"] == "application/pdf"
        assert (
            response.headers["content-disposition"]
            == 'attachment; filename="report.pdf"'
        )

    def test_download_non_ascii_name(self, client, fake_store):
        """Test non-ASCII file names are sent in the extended header form."""
        fake_store.objects["photos/été.jpg"] = (b"jpeg", "image/jpeg")

        response = client.get("/buckets/media/objects/photos/été.jpg/download")

        assert response.status_code == 200
        assert (
            response.headers["content-disposition"]
            == "attachment; filename*=utf-8''%C3%A9t%C3%A9.jpg"
        )

    def test_download_missing_object(self, client):
        """Test remote failures become JSON errors."""
        response = client.get("/buckets/media/objects/nope.txt/download")

        assert response.status_code == 500
        assert response.json()["success"] is False

    def test_upload(self, client, fake_store):
        """Test a multipart upload is stored under the given key."""
        response = client.post(
            "/buckets/media/upload",
            files={"file": ("notes.txt", b"hello", "text/plain")},
            data={"key": "/docs/notes.txt"},
        )

        assert response.status_code == 200
        assert response.json() == {"success": True, "key": "docs/notes.txt"}
        assert fake_store.objects["docs/notes.txt"] == (b"hello", "text/plain")

    def test_upload_requires_file_and_key(self, client, fake_store):
        """Test missing form fields are rejected."""
        no_key = client.post(
            "/buckets/media/upload", files={"file": ("a.txt", b"x", "text/plain")}
        )
        no_file = client.post("/buckets/media/upload", data={"key": "a.txt"})

        assert no_key.status_code == 422
        assert no_file.status_code == 422
        assert fake_store.objects == {}

    def test_upload_blank_key(self, client, fake_store):
        """Test a whitespace-only key is rejected."""
        response = client.post(
            "/buckets/media/upload",
            files={"file": ("a.txt", b"x", "text/plain")},
            data={"key": "  "},
        )

        assert response.status_code == 400
        assert fake_store.objects == {}
