"""HTTP surface: both addressing modes, error envelopes, download headers."""
from urllib.parse import quote

import pytest
from httpx import AsyncClient

from file_storage.core.config import get_settings

from conftest import PDF_BYTES, TEST_KEY


async def _upload_uuid(client: AsyncClient, name="test.pdf", data=PDF_BYTES, **form):
    form.setdefault("bucketName", "contracts")
    return await client.post(
        "/api/v1/files/uuid/upload",
        files={"file": (name, data, "application/pdf")},
        data=form,
    )


async def _upload_url(client: AsyncClient, name="test.pdf", data=PDF_BYTES, **form):
    form.setdefault("bucketName", "contracts")
    return await client.post(
        "/api/v1/files/upload-by-url",
        files={"file": (name, data, "application/pdf")},
        data=form,
    )


# ----- UUID mode -----


async def test_uuid_upload_query_download_delete(client: AsyncClient):
    r = await _upload_uuid(client)
    assert r.status_code == 200
    body = r.json()
    assert body["success"] is True
    data = body["data"]
    uuid = data["uuid"]
    assert data["accessPath"] == uuid
    assert data["fileSize"] == 12
    assert data["contentType"] == "application/pdf"
    assert data["encrypted"] is False

    r = await client.get("/api/v1/files/uuid/query", params={"fileUuid": uuid})
    assert r.status_code == 200
    info = r.json()["data"]
    assert info["uuid"] == uuid
    assert info["fileName"] == "test.pdf"
    assert info["bucketName"] == "contracts"
    assert info["fileUrl"].startswith("/contracts/")
    assert info["isEncrypted"] is False
    assert "createdTime" in info and "updatedTime" in info

    r = await client.get("/api/v1/files/uuid/download", params={"fileUuid": uuid})
    assert r.status_code == 200
    assert r.content == PDF_BYTES
    assert r.headers["content-type"].startswith("application/pdf")
    assert "filename*=UTF-8''test.pdf" in r.headers["content-disposition"]

    r = await client.delete("/api/v1/files/uuid/delete", params={"fileUuid": uuid})
    assert r.status_code == 200
    assert r.json()["success"] is True

    r = await client.get("/api/v1/files/uuid/query", params={"fileUuid": uuid})
    assert r.status_code == 404
    assert r.json() == {"success": False, "code": "FS001", "message": f"File not found: {uuid}"}


async def test_uuid_encrypted_download_needs_key(client: AsyncClient):
    r = await _upload_uuid(client, privateKey=TEST_KEY, needPreview="true")
    data = r.json()["data"]
    assert data["encrypted"] is True
    # No presigned URL for encrypted content
    assert data["accessPath"] == data["uuid"]

    r = await client.get("/api/v1/files/uuid/download", params={"fileUuid": data["uuid"]})
    assert r.status_code == 400
    assert r.json()["code"] == "FS006"

    r = await client.get("/api/v1/files/uuid/download", params={"fileUuid": data["uuid"], "privateKey": "bad"})
    assert r.status_code == 400
    assert r.json()["code"] == "FS005"

    r = await client.get("/api/v1/files/uuid/download", params={"fileUuid": data["uuid"], "privateKey": TEST_KEY})
    assert r.status_code == 200
    assert r.content == PDF_BYTES

    r = await client.get("/api/v1/files/uuid/preview-url", params={"fileUuid": data["uuid"]})
    assert r.status_code == 409
    assert r.json()["code"] == "FS007"


async def test_uuid_preview(client: AsyncClient):
    uuid = (await _upload_uuid(client)).json()["data"]["uuid"]
    r = await client.get("/api/v1/files/uuid/preview-url", params={"fileUuid": uuid, "expiryMinutes": 5})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["expiryMinutes"] == 5
    assert data["previewUrl"].endswith("expires=300")


async def test_uuid_upload_with_preview(client: AsyncClient):
    r = await _upload_uuid(client, needPreview="true")
    assert r.json()["data"]["accessPath"].startswith("memory://contracts/")


@pytest.mark.parametrize(
    "name,data,form,code",
    [
        ("empty.pdf", b"", {}, "FS004"),
        ("tool.exe", b"MZ", {}, "FS004"),
        ("test.pdf", PDF_BYTES, {"bucketName": "Bad_Bucket"}, "FS004"),
        ("test.pdf", PDF_BYTES, {"privateKey": "short"}, "FS005"),
    ],
)
async def test_uuid_upload_rejections(client: AsyncClient, name, data, form, code):
    r = await _upload_uuid(client, name=name, data=data, **form)
    assert r.status_code == 400
    assert r.json()["success"] is False
    assert r.json()["code"] == code


async def test_uuid_malformed_identifier_is_400(client: AsyncClient):
    r = await client.get("/api/v1/files/uuid/query", params={"fileUuid": "nope"})
    assert r.status_code == 400
    assert r.json()["code"] == "FS002"


async def test_missing_parameter_is_400(client: AsyncClient):
    r = await client.get("/api/v1/files/uuid/query")
    assert r.status_code == 400
    assert r.json()["code"] == "FS004"
    assert "fileUuid" in r.json()["message"]


async def test_upload_falls_back_to_default_bucket(client: AsyncClient, monkeypatch):
    monkeypatch.setenv("DEFAULT_BUCKET_NAME", "fallback-bucket")
    get_settings.cache_clear()
    try:
        r = await client.post(
            "/api/v1/files/uuid/upload",
            files={"file": ("test.pdf", PDF_BYTES, "application/pdf")},
        )
    finally:
        get_settings.cache_clear()
    assert r.status_code == 200
    uuid = r.json()["data"]["uuid"]
    info = (await client.get("/api/v1/files/uuid/query", params={"fileUuid": uuid})).json()["data"]
    assert info["bucketName"] == "fallback-bucket"


# ----- URL mode -----


async def test_url_upload_query_download_delete(client: AsyncClient):
    r = await _upload_url(client)
    assert r.status_code == 200
    file_url = r.json()["data"]["accessPath"]
    assert file_url.startswith("/contracts/") and file_url.endswith("/test.pdf")

    r = await client.get("/api/v1/files/query-by-url", params={"fileUrl": file_url})
    assert r.status_code == 200
    assert r.json()["data"]["fileUrl"] == file_url

    r = await client.get("/api/v1/files/download-by-url", params={"fileUrl": file_url})
    assert r.status_code == 200
    assert r.content == PDF_BYTES

    r = await client.delete("/api/v1/files/delete-by-url", params={"fileUrl": file_url})
    assert r.status_code == 200

    r = await client.get("/api/v1/files/download-by-url", params={"fileUrl": file_url})
    assert r.status_code == 404


async def test_url_encrypted_roundtrip(client: AsyncClient):
    file_url = (await _upload_url(client, publicKey=TEST_KEY)).json()["data"]["accessPath"]
    r = await client.get("/api/v1/files/download-by-url", params={"fileUrl": file_url, "publicKey": TEST_KEY})
    assert r.status_code == 200
    assert r.content == PDF_BYTES
    r = await client.post(
        "/api/v1/files/preview-url",
        params={"expiryMinutes": 10, "publicKey": TEST_KEY},
        content=file_url,
        headers={"Content-Type": "text/plain"},
    )
    assert r.status_code == 409


@pytest.mark.parametrize("as_json", [False, True])
async def test_url_preview_body(client: AsyncClient, as_json):
    file_url = (await _upload_url(client)).json()["data"]["accessPath"]
    body = f'"{file_url}"' if as_json else file_url
    r = await client.post(
        "/api/v1/files/preview-url",
        params={"expiryMinutes": 10},
        content=body,
        headers={"Content-Type": "application/json" if as_json else "text/plain"},
    )
    assert r.status_code == 200
    assert r.json()["data"]["previewUrl"].endswith("expires=600")


async def test_url_preview_empty_body(client: AsyncClient):
    r = await client.post("/api/v1/files/preview-url", content=b"")
    assert r.status_code == 400


async def test_non_ascii_file_name_download_header(client: AsyncClient):
    name = "合同 v1.pdf"
    file_url = (await _upload_url(client, name=name)).json()["data"]["accessPath"]
    r = await client.get("/api/v1/files/download-by-url", params={"fileUrl": file_url})
    assert r.status_code == 200
    encoded = quote(name, safe="")
    assert r.headers["content-disposition"] == f"attachment; filename=\"{encoded}\"; filename*=UTF-8''{encoded}"


# ----- health / metrics -----


async def test_health(client: AsyncClient):
    assert (await client.get("/health")).json() == {"status": "ok"}
    assert (await client.get("/healthz")).json() == {"status": "ok"}


async def test_metrics_guarded_by_secret(client: AsyncClient, monkeypatch):
    monkeypatch.setenv("METRICS_SECRET", "s3cret")
    get_settings.cache_clear()
    try:
        assert (await client.get("/metrics")).status_code == 401
        r = await client.get("/metrics", headers={"X-Metrics-Secret": "s3cret"})
        assert r.status_code == 200
        assert "file_operations_total" in r.text
    finally:
        get_settings.cache_clear()


async def test_request_id_header(client: AsyncClient):
    r = await client.get("/health")
    assert r.headers.get("X-Request-ID")
