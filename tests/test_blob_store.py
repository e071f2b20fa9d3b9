import pytest

from app.services.blob_store import BlobNotFound, GcsBlobStore, LocalBlobStore, profile_image_key


class FakeBucket:
    def __init__(self):
        self.objects = {}

    def blob(self, key):
        return FakeBlob(self, key)


class FakeBlob:
    def __init__(self, bucket, name):
        self.bucket = bucket
        self.name = name

    def exists(self):
        return self.name in self.bucket.objects

    def upload_from_string(self, data, content_type=None):
        self.bucket.objects[self.name] = (data, content_type)

    def download_as_bytes(self):
        return self.bucket.objects[self.name][0]

    def delete(self):
        del self.bucket.objects[self.name]


@pytest.fixture
def gcs_store():
    # skip __init__ so no storage client is built
    store = object.__new__(GcsBlobStore)
    store._bucket = FakeBucket()
    return store


def test_bytes_come_back_unmodified(tmp_path):
    store = LocalBlobStore(str(tmp_path))
    payload = bytes(range(256))
    key = store.put(profile_image_key(3), payload, "image/jpeg")
    assert key.startswith("rescuers/3/")
    assert key.endswith(".jpg")
    assert store.get(key) == payload


def test_each_upload_gets_its_own_key():
    assert profile_image_key(3) != profile_image_key(3)


def test_missing_key(tmp_path):
    store = LocalBlobStore(str(tmp_path))
    with pytest.raises(BlobNotFound):
        store.get("rescuers/1/none.jpg")


def test_delete(tmp_path):
    store = LocalBlobStore(str(tmp_path))
    store.put("a/b.bin", b"x")
    store.delete("a/b.bin")
    store.delete("a/b.bin")
    with pytest.raises(BlobNotFound):
        store.get("a/b.bin")


def test_keys_cannot_escape_base_dir(tmp_path):
    store = LocalBlobStore(str(tmp_path / "blobs"))
    with pytest.raises(ValueError):
        store.put("../outside.bin", b"x")


def test_gcs_put_and_get(gcs_store):
    payload = b"\xff\xd8\xff\xe0jpeg"
    key = gcs_store.put(profile_image_key(5), payload, "image/jpeg")
    assert gcs_store.get(key) == payload
    assert gcs_store._bucket.objects[key][1] == "image/jpeg"


def test_gcs_missing_key(gcs_store):
    with pytest.raises(BlobNotFound):
        gcs_store.get("rescuers/5/none.jpg")


def test_gcs_delete(gcs_store):
    gcs_store.put("rescuers/5/a.jpg", b"x")
    gcs_store.delete("rescuers/5/a.jpg")
    gcs_store.delete("rescuers/5/a.jpg")
    with pytest.raises(BlobNotFound):
        gcs_store.get("rescuers/5/a.jpg")
    assert gcs_store._bucket.objects == {}
