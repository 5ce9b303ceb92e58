"""
Tests for object storage backends and upload validation.
"""
import io
import re
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from starlette.datastructures import Headers, UploadFile

import menuboard.config as config_mod
from menuboard.errors import ApiError
from menuboard.storage import LocalStorage, S3Storage, build_key, discard_objects, upload_image

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def make_upload(data=PNG_BYTES, filename="photo.png", content_type="image/png"):
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


class TestBuildKey:
    def test_extension_from_content_type(self):
        key = build_key("items", 7, "photo.jpeg", "image/png")
        assert re.fullmatch(r"items/7/[0-9a-f]{32}\.png", key)

    def test_extension_from_filename(self):
        assert build_key("menus", 1, "logo.SVG", "image/svg+xml").endswith(".svg")
        assert build_key("menus", 1, None, "application/x-unknown").endswith(".bin")


class TestLocalStorage:
    def test_save_and_delete(self, tmp_path):
        backend = LocalStorage(str(tmp_path), "/uploads/")
        stored = backend.save(b"abc", "image/png", "items/1/a.png")
        assert stored.url == "/uploads/items/1/a.png"
        assert (tmp_path / "items/1/a.png").read_bytes() == b"abc"

        backend.delete("items/1/a.png")
        assert not (tmp_path / "items/1/a.png").exists()
        backend.delete("items/1/a.png")  # missing files are ignored

    def test_rejects_path_traversal(self, tmp_path):
        backend = LocalStorage(str(tmp_path / "root"))
        with pytest.raises(ApiError):
            backend.save(b"abc", "image/png", "../escape.png")


class TestS3Storage:
    def test_put_object(self):
        client = MagicMock()
        backend = S3Storage("menus-bucket", "sa-east-1", public_read=True, client=client)
        stored = backend.save(b"abc", "image/png", "items/1/a.png")

        client.put_object.assert_called_once_with(
            Bucket="menus-bucket",
            Key="items/1/a.png",
            Body=b"abc",
            ContentType="image/png",
            ACL="public-read",
        )
        assert stored.url == "https://menus-bucket.s3.sa-east-1.amazonaws.com/items/1/a.png"

    def test_public_base_url(self):
        backend = S3Storage("b", "us-east-1", public_base_url="https://cdn.example.com/", client=MagicMock())
        assert backend.url_for("k.png") == "https://cdn.example.com/k.png"

    def test_endpoint_url(self):
        backend = S3Storage("b", "us-east-1", endpoint_url="http://minio:9000", client=MagicMock())
        assert backend.url_for("k.png") == "http://minio:9000/b/k.png"

    def test_upload_failure_is_502(self):
        client = MagicMock()
        client.put_object.side_effect = ClientError({"Error": {"Code": "AccessDenied"}}, "PutObject")
        backend = S3Storage("b", "us-east-1", client=client)
        with pytest.raises(ApiError) as exc:
            backend.save(b"abc", "image/png", "k.png")
        assert exc.value.status_code == 502

    def test_delete_failure_is_logged_only(self):
        client = MagicMock()
        client.delete_object.side_effect = ClientError({"Error": {"Code": "NoSuchKey"}}, "DeleteObject")
        S3Storage("b", "us-east-1", client=client).delete("k.png")

    def test_bucket_required(self):
        with pytest.raises(ValueError):
            S3Storage("", "us-east-1", client=MagicMock())


class TestUploadImage:
    def test_valid_upload(self, storage):
        stored = upload_image(make_upload(), prefix="items", owner_id=3)
        assert stored.key.startswith("items/3/")
        assert stored.url == f"/uploads/{stored.key}"

    def test_unsupported_type(self, storage):
        with pytest.raises(ApiError) as exc:
            upload_image(make_upload(content_type="application/pdf"), prefix="items", owner_id=3)
        assert exc.value.status_code == 400
        assert exc.value.message.startswith("Unsupported image type")

    def test_empty_file(self, storage):
        with pytest.raises(ApiError) as exc:
            upload_image(make_upload(data=b""), prefix="items", owner_id=3)
        assert exc.value.message == "Uploaded file is empty"

    def test_too_large(self, storage, monkeypatch):
        monkeypatch.setattr(config_mod, "MAX_UPLOAD_BYTES", 16)
        with pytest.raises(ApiError) as exc:
            upload_image(make_upload(), prefix="items", owner_id=3)
        assert exc.value.status_code == 413

    def test_discard_objects(self, storage):
        stored = upload_image(make_upload(), prefix="items", owner_id=3)
        discard_objects([stored.key])
        assert not (storage.root / stored.key).exists()
