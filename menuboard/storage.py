"""
Object Storage for Menuboard
============================

Uploaded images (menu logos, menu backgrounds, item photos) are written to an
object store and referenced by URL from the database.

Backends:
---------
- **LocalStorage**: Files under LOCAL_UPLOAD_DIR, served by the app at
  /uploads. Used for development and tests.
- **S3Storage**: Amazon S3 or any S3-compatible endpoint (MinIO, R2) through
  boto3. URLs are built from S3_PUBLIC_BASE_URL when set (e.g. a CDN).

Object Keys:
------------
Keys look like ``<prefix>/<owner_id>/<uuid><ext>``, e.g.
``items/7/3f2a...c1.png``. The owner id keeps each tenant's files together.

Usage:
------
    from menuboard.storage import get_storage, upload_image

    stored = upload_image(upload_file, prefix="items", owner_id=user.id)
    image.url = stored.url
    image.storage_key = stored.key
"""

import logging
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import UploadFile

from . import config
from .errors import ApiError

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/webp": ".webp",
    "image/gif": ".gif",
}


@dataclass(frozen=True)
class StoredObject:
    key: str
    url: str


class StorageBackend:
    """Interface shared by the storage backends."""

    def save(self, data: bytes, content_type: str, key: str) -> StoredObject:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class LocalStorage(StorageBackend):
    def __init__(self, root: str, url_prefix: str = "/uploads"):
        self.root = Path(root)
        self.url_prefix = url_prefix.rstrip("/")

    def _path(self, key: str) -> Path:
        path = (self.root / key).resolve()
        if self.root.resolve() not in path.parents:
            raise ApiError("Invalid storage key", 400)
        return path

    def save(self, data: bytes, content_type: str, key: str) -> StoredObject:
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info("Stored %d bytes at %s", len(data), path)
        return StoredObject(key=key, url=f"{self.url_prefix}/{key}")

    def delete(self, key: str) -> None:
        path = self._path(key)
        if path.exists():
            path.unlink()
            logger.info("Deleted stored object %s", key)


class S3Storage(StorageBackend):
    def __init__(
        self,
        bucket: str,
        region: str,
        endpoint_url: Optional[str] = None,
        public_base_url: Optional[str] = None,
        public_read: bool = False,
        client=None,
    ):
        if not bucket:
            raise ValueError("S3_BUCKET is required for the s3 storage backend")
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url or None
        self.public_base_url = (public_base_url or "").rstrip("/")
        self.public_read = public_read
        self.client = client or boto3.client(
            "s3",
            region_name=region,
            endpoint_url=self.endpoint_url,
        )

    def url_for(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        if self.endpoint_url:
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket}/{key}"
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{key}"

    def save(self, data: bytes, content_type: str, key: str) -> StoredObject:
        extra = {"ACL": "public-read"} if self.public_read else {}
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=data,
                ContentType=content_type,
                **extra,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 upload of %s failed: %s", key, e)
            raise ApiError("Image upload failed", 502) from e
        logger.info("Uploaded %d bytes to s3://%s/%s", len(data), self.bucket, key)
        return StoredObject(key=key, url=self.url_for(key))

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            # The row is already deactivated; an orphaned object is only logged
            logger.warning("S3 delete of %s failed: %s", key, e)
            return
        logger.info("Deleted s3://%s/%s", self.bucket, key)


# Process-wide backend (initialized on first use)
_storage: Optional[StorageBackend] = None


def build_storage() -> StorageBackend:
    """Build the backend named by STORAGE_BACKEND."""
    if config.STORAGE_BACKEND == "s3":
        return S3Storage(
            bucket=config.S3_BUCKET,
            region=config.S3_REGION,
            endpoint_url=config.S3_ENDPOINT_URL,
            public_base_url=config.S3_PUBLIC_BASE_URL,
            public_read=config.S3_PUBLIC_READ,
        )
    if config.STORAGE_BACKEND == "local":
        return LocalStorage(config.LOCAL_UPLOAD_DIR, config.LOCAL_UPLOAD_URL_PREFIX)
    raise ValueError(f"Unknown STORAGE_BACKEND: {config.STORAGE_BACKEND}")


def get_storage() -> StorageBackend:
    global _storage
    if _storage is None:
        _storage = build_storage()
        logger.info("Using %s storage backend", type(_storage).__name__)
    return _storage


def set_storage(storage: Optional[StorageBackend]) -> None:
    """Set the process-wide storage backend (for testing)."""
    global _storage
    _storage = storage


def build_key(prefix: str, owner_id: int, filename: Optional[str], content_type: str) -> str:
    ext = _EXTENSIONS.get(content_type)
    if not ext:
        ext = os.path.splitext(filename or "")[1].lower() or ".bin"
    return f"{prefix}/{owner_id}/{uuid.uuid4().hex}{ext}"


def upload_image(upload: UploadFile, prefix: str, owner_id: int) -> StoredObject:
    """
    Validate an uploaded image and write it to the configured backend.

    Raises:
        ApiError (400): Unsupported content type or empty file.
        ApiError (413): File larger than MAX_UPLOAD_BYTES.
        ApiError (502): The object store rejected the upload.
    """
    content_type = (upload.content_type or "").lower()
    if content_type not in config.ALLOWED_IMAGE_TYPES:
        raise ApiError(
            f"Unsupported image type. Allowed: {', '.join(config.ALLOWED_IMAGE_TYPES)}",
            400,
        )

    # Read one byte past the cap so oversize files are detected without
    # loading them whole
    upload.file.seek(0)
    data = upload.file.read(config.MAX_UPLOAD_BYTES + 1)
    if not data:
        raise ApiError("Uploaded file is empty", 400)
    if len(data) > config.MAX_UPLOAD_BYTES:
        raise ApiError(
            f"File too large. Max size: {config.MAX_UPLOAD_BYTES // (1024 * 1024)}MB",
            413,
        )

    key = build_key(prefix, owner_id, upload.filename, content_type)
    return get_storage().save(data, content_type, key)


def discard_objects(keys: Iterable[str]) -> None:
    """Remove objects written for a request whose transaction did not commit."""
    storage = get_storage()
    for key in keys:
        try:
            storage.delete(key)
        except (ApiError, OSError) as e:
            logger.warning("Could not discard stored object %s: %s", key, e)
