import io

import pytest
from PIL import Image


def test_config_missing_until_written(client, super_admin):
    assert client.get("/system/config", headers=super_admin.headers).status_code == 404


def test_update_merges_features_and_settings(client, super_admin, make_user):
    r = client.patch("/system/config", json={"features": {"analytics": False}, "settings": {"scan_timeout": 45}},
                     headers=super_admin.headers)
    assert r.status_code == 200, r.text
    config = r.json()
    assert config["features"] == {"ar_scanning": True, "book_search": True, "corrections": True, "analytics": False}
    assert config["settings"] == {"max_books_per_scan": 100, "scan_timeout": 45, "correction_timeout": 300}
    assert config["updated_by"] == super_admin.uid

    r = client.patch("/system/config", json={"settings": {"max_books_per_scan": 20}}, headers=super_admin.headers)
    assert r.json()["settings"]["scan_timeout"] == 45
    assert r.json()["features"]["analytics"] is False

    # Any signed-in account can read it
    mobile = make_user(None)
    r = client.get("/system/config", headers=mobile.headers)
    assert r.status_code == 200
    assert r.json()["maintenance_mode"] is False


def test_update_requires_manage_system(client, admin):
    assert client.patch("/system/config", json={"maintenance_mode": True}, headers=admin.headers).status_code == 403


def _jpeg_source(width, height):
    buf = io.BytesIO()
    Image.new("RGBA", (width, height), (0, 128, 255, 255)).save(buf, format="PNG")
    return buf.getvalue()


def test_upload_download_delete(client, super_admin, storage):
    r = client.post(
        "/storage/images",
        data={"path": "misc/banner.jpg", "max_width": "400", "max_height": "300", "quality": "0.7"},
        files={"file": ("banner.png", _jpeg_source(800, 200), "image/png")},
        headers=super_admin.headers,
    )
    assert r.status_code == 201, r.text
    assert r.json()["url"] == "/files/misc/banner.jpg"
    with Image.open(storage.root / "misc" / "banner.jpg") as img:
        assert img.size == (400, 100)
        assert img.mode == "RGB"

    r = client.get("/storage/url", params={"path": "misc/banner.jpg"}, headers=super_admin.headers)
    assert r.status_code == 200
    assert r.json()["url"] == "/files/misc/banner.jpg"

    assert client.delete("/storage/files", params={"path": "misc/banner.jpg"}, headers=super_admin.headers).status_code == 204
    assert client.get("/storage/url", params={"path": "misc/banner.jpg"}, headers=super_admin.headers).status_code == 404
    assert client.delete("/storage/files", params={"path": "misc/banner.jpg"}, headers=super_admin.headers).status_code == 404


def test_storage_rejects_escaping_paths(client, super_admin, storage):
    r = client.get("/storage/url", params={"path": "../etc/passwd"}, headers=super_admin.headers)
    assert r.status_code == 422
    r = client.post(
        "/storage/images",
        data={"path": "/abs.jpg"},
        files={"file": ("a.png", _jpeg_source(10, 10), "image/png")},
        headers=super_admin.headers,
    )
    assert r.status_code == 422


def test_upload_size_limit(client, super_admin, storage):
    too_big = b"\x00" * (2 * 1024 * 1024 + 1)
    r = client.post(
        "/storage/images",
        data={"path": "big.jpg"},
        files={"file": ("big.bin", too_big, "application/octet-stream")},
        headers=super_admin.headers,
    )
    assert r.status_code == 413


def test_audit_log_listing_requires_manage_system(client, super_admin, admin, library):
    assert client.get("/audits/", headers=admin.headers).status_code == 403
    logs = client.get("/audits/?action_type=library_create", headers=super_admin.headers).json()
    assert len(logs) == 1
    assert logs[0]["actor_uid"] == super_admin.uid
    assert logs[0]["status"] == "success"
    assert logs[0]["metadata"] == {"name": "Bibliotheque Centrale"}


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "service": "libadmin-service", "database": "ok"}


def test_oversized_dimensions_rejected_as_invalid_image(client, super_admin, storage, monkeypatch):
    # Pillow refuses images above twice this pixel count
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    r = client.post(
        "/storage/images",
        data={"path": "huge.jpg"},
        files={"file": ("huge.png", _jpeg_source(100, 100), "image/png")},
        headers=super_admin.headers,
    )
    assert r.status_code == 422
    assert not (storage.root / "huge.jpg").exists()


def test_storage_root_and_directories_are_not_file_paths(client, super_admin, storage):
    storage.upload_file(b"data", "misc/a.bin")
    for path in (".", "misc", "misc/.."):
        with pytest.raises(ValueError):
            storage.upload_file(b"data", path)
    r = client.get("/storage/url", params={"path": "."}, headers=super_admin.headers)
    assert r.status_code == 422
