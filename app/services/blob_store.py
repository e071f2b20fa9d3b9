from __future__ import annotations

import logging
import os
import uuid

from app.core.config import settings

logger = logging.getLogger(__name__)


class BlobNotFound(KeyError):
    pass


class LocalBlobStore:
    """Bytes on the local filesystem under `base_dir`; keys are relative paths."""

    backend = "local"

    def __init__(self, base_dir: str):
        self.base_dir = base_dir

    def _path(self, key: str) -> str:
        base = os.path.abspath(self.base_dir)
        path = os.path.abspath(os.path.join(base, key))
        if os.path.commonpath([base, path]) != base:
            raise ValueError(f"invalid blob key: {key}")
        return path

    def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        path = self._path(key)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
        return key

    def get(self, key: str) -> bytes:
        path = self._path(key)
        if not os.path.isfile(path):
            raise BlobNotFound(key)
        with open(path, "rb") as f:
            return f.read()

    def delete(self, key: str) -> None:
        path = self._path(key)
        if os.path.isfile(path):
            os.remove(path)


class GcsBlobStore:
    backend = "gcs"

    def __init__(self, bucket_name: str):
        try:
            from google.cloud import storage  # type: ignore
        except Exception as e:
            raise RuntimeError("google-cloud-storage is not installed. Install the gcs extra and retry") from e
        self._bucket = storage.Client().bucket(bucket_name)

    def put(self, key: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        self._bucket.blob(key).upload_from_string(data, content_type=content_type)
        return key

    def get(self, key: str) -> bytes:
        blob = self._bucket.blob(key)
        if not blob.exists():
            raise BlobNotFound(key)
        return blob.download_as_bytes()

    def delete(self, key: str) -> None:
        blob = self._bucket.blob(key)
        if blob.exists():
            blob.delete()


def build_blob_store():
    if settings.GCS_BUCKET_NAME and settings.GOOGLE_APPLICATION_CREDENTIALS:
        logger.info("profile images stored in gcs bucket %s", settings.GCS_BUCKET_NAME)
        return GcsBlobStore(settings.GCS_BUCKET_NAME)
    return LocalBlobStore(settings.BLOB_LOCAL_DIR or "./data/blobs")


def profile_image_key(rescuer_id: int) -> str:
    # a fresh key per upload, so a failed update never clobbers the current image
    return f"rescuers/{rescuer_id}/{uuid.uuid4().hex}.jpg"
