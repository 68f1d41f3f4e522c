import base64

import pytest

from app.repositories.supabase_client import StorageError
from app.services.image_ingestion import (
    encode_base64_chunked,
    encode_photo_reference,
    extract_storage_path,
    ingest,
)
from conftest import BASE, FakeStorage

BUCKET = "article-photos"


def test_extract_storage_path():
    assert extract_storage_path(f"{BASE}/user-1/photo.jpg", BUCKET) == "user-1/photo.jpg"
    assert extract_storage_path(f"{BASE}/user-1/ma%20photo.jpg", BUCKET) == "user-1/ma photo.jpg"


@pytest.mark.parametrize("url", [
    "not a url",
    "https://demo.supabase.co/storage/v1/object/public/other-bucket/a.jpg",
    "https://demo.supabase.co/storage/v1/object/sign/article-photos/a.jpg",
    "https://example.com/a.jpg",
])
def test_extract_storage_path_rejects_foreign_urls(url):
    with pytest.raises(ValueError):
        extract_storage_path(url, BUCKET)


@pytest.mark.parametrize("size", [0, 1, 2, 5, 32768, 32769, 3 * 32768])
@pytest.mark.parametrize("chunk_size", [1, 4, 0x8000])
def test_chunked_encoding_matches_whole_buffer(size, chunk_size):
    data = bytes(i % 251 for i in range(size))
    encoded = encode_base64_chunked(data, chunk_size)
    assert encoded == base64.b64encode(data).decode("ascii")
    assert base64.b64decode(encoded) == data


def test_chunked_encoding_empty_and_invalid_chunk():
    assert encode_base64_chunked(b"") == ""
    with pytest.raises(ValueError):
        encode_base64_chunked(b"abc", 0)


def test_ingest_all_successes_keep_order():
    storage = FakeStorage({"a.jpg": b"AAA", "b.png": b"BBBB"}, content_types={"b.png": "image/png"})
    batch = ingest([f"{BASE}/b.png", f"{BASE}/a.jpg", f"{BASE}/b.png"], storage, BUCKET)

    assert batch.failures == []
    assert [p.content_type for p in batch.successes] == ["image/png", "image/jpeg", "image/png"]
    assert [base64.b64decode(p.data) for p in batch.successes] == [b"BBBB", b"AAA", b"BBBB"]


def test_ingest_malformed_url_does_not_abort_batch():
    storage = FakeStorage({"a.jpg": b"one", "c.jpg": b"three"})
    urls = [f"{BASE}/a.jpg", "https://evil.example.com/x.jpg", f"{BASE}/c.jpg"]

    batch = ingest(urls, storage, BUCKET)

    assert [base64.b64decode(p.data) for p in batch.successes] == [b"one", b"three"]
    assert len(batch.failures) == 1
    assert batch.failures[0].reference == urls[1]
    assert "invalid storage URL format" in batch.failures[0].reason
    assert storage.calls == ["a.jpg", "c.jpg"]


def test_ingest_download_failures_are_collected():
    storage = FakeStorage({
        "a.jpg": StorageError("Bucket not found"),
        "b.jpg": b"",
        "c.jpg": StorageError(""),
    })
    urls = [f"{BASE}/a.jpg", f"{BASE}/b.jpg", f"{BASE}/c.jpg", f"{BASE}/missing.jpg"]

    batch = ingest(urls, storage, BUCKET)

    assert batch.successes == []
    assert [f.reference for f in batch.failures] == urls
    assert batch.failures[0].reason == "Failed to download a.jpg: Bucket not found"
    assert batch.failures[1].reason == "Failed to download b.jpg: unknown error"
    assert batch.failures[2].reason == "Failed to download c.jpg: unknown error"
    assert "Object not found" in batch.failures[3].reason


@pytest.mark.parametrize("good", [0, 1, 3, 5])
def test_ingest_partitions_every_reference(good):
    storage = FakeStorage({f"{i}.jpg": bytes([i]) * 10 for i in range(good)})
    urls = [f"{BASE}/{i}.jpg" for i in range(good)] + ["bad"] * (5 - good)

    batch = ingest(urls, storage, BUCKET)

    assert len(batch.successes) == good
    assert len(batch.failures) == 5 - good
    assert [base64.b64decode(p.data) for p in batch.successes] == [bytes([i]) * 10 for i in range(good)]


def test_encode_photo_reference_variants():
    storage = FakeStorage({"a.jpg": b"img"})

    from_url = encode_photo_reference(f"{BASE}/a.jpg", storage, BUCKET)
    assert base64.b64decode(from_url.data) == b"img"

    from_data_uri = encode_photo_reference("data:image/webp;base64,aW1n", storage, BUCKET)
    assert from_data_uri.content_type == "image/webp"
    assert from_data_uri.data == "aW1n"

    raw = encode_photo_reference("aW1n", storage, BUCKET)
    assert raw.content_type == "image/jpeg"

    assert encode_photo_reference(f"{BASE}/missing.jpg", storage, BUCKET) is None
    assert encode_photo_reference("", storage, BUCKET) is None


def test_ingest_unexpected_fetch_error_is_collected():
    storage = FakeStorage({"a.jpg": b"one", "b.jpg": OSError("socket reset"), "c.jpg": b"three"})
    urls = [f"{BASE}/a.jpg", f"{BASE}/b.jpg", f"{BASE}/c.jpg"]

    batch = ingest(urls, storage, BUCKET)

    assert [base64.b64decode(p.data) for p in batch.successes] == [b"one", b"three"]
    assert len(batch.failures) == 1
    assert batch.failures[0].reference == urls[1]
    assert batch.failures[0].reason == f"Error processing image {urls[1]}: socket reset"
