"""Integration tests for the upload API."""

import pytest
from fastapi.testclient import TestClient
from starlette.datastructures import UploadFile

from imgconv.main import app
from imgconv.services.upload_service import upload_service


@pytest.fixture
def client(tmp_path, monkeypatch):
    """Test client writing uploads to a temporary directory."""
    monkeypatch.setattr(upload_service, "upload_dir", tmp_path)
    return TestClient(app)


class TestUploadEndpoint:
    def test_reports_each_file(self, client, tmp_path, png_bytes):
        response = client.post(
            "/upload",
            files=[
                ("image1", ("holiday-1.png", png_bytes, "image/png")),
                ("image2", ("notes.txt", b"hello there", "text/plain")),
            ],
        )

        assert response.status_code == 200
        assert response.json() == [
            {"success": "holiday-1.png uploaded successfully!"},
            {"error": "notes.txt is not a supported image type."},
        ]
        assert (tmp_path / "holiday-1.png").read_bytes() == png_bytes

    def test_mounted_under_api_prefix(self, client, webp_bytes):
        response = client.post(
            "/api/upload", files=[("image1", ("a.webp", webp_bytes, "image/webp"))]
        )

        assert response.status_code == 200
        assert response.json() == [{"success": "a.webp uploaded successfully!"}]

    def test_declared_type_is_not_trusted(self, client, jpeg_bytes):
        response = client.post(
            "/upload", files=[("image1", ("photo.png", jpeg_bytes, "image/png"))]
        )

        assert "error" in response.json()[0]

    def test_multipart_form_without_files(self, client):
        response = client.post(
            "/upload", files=[("comment", (None, b"nothing attached"))]
        )

        assert response.status_code == 200
        assert response.json() == []

    def test_non_multipart_body_is_rejected(self, client):
        response = client.post("/upload", data={"comment": "nothing attached"})

        assert response.status_code == 400
        body = response.json()
        assert body["error_code"] == "CONV002"
        assert body["message"] == "Uploads must be sent as multipart/form-data"
        assert body["details"]["field_name"] == "content-type"
        assert response.headers["x-correlation-id"] == body["correlation_id"]

    def test_oversized_file_is_refused_unread(self, client, tmp_path, png_bytes, monkeypatch):
        async def unexpected_read(self, size=-1):
            raise AssertionError("oversized upload was read")

        monkeypatch.setattr(upload_service, "max_file_size", 10)
        monkeypatch.setattr(UploadFile, "read", unexpected_read)

        response = client.post(
            "/upload", files=[("image1", ("big.png", png_bytes, "image/png"))]
        )

        assert response.status_code == 200
        assert response.json() == [{"error": "big.png is too large (0 MB or less)."}]
        assert not (tmp_path / "big.png").exists()


class TestHealthEndpoint:
    def test_health(self, client):
        response = client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert isinstance(body["avif_supported"], bool)
        assert response.headers["x-correlation-id"]

    def test_health_only_allows_get(self, client):
        assert client.post("/api/health").status_code == 405


def test_unknown_route_uses_error_format(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    body = response.json()
    assert body["error_code"] == "HTTP404"
    assert body["correlation_id"]
