"""
Image ingestion: resolves public storage URLs to base64 image parts for the
vision model. A bad image never fails the batch; each reference ends up either
in `successes` or in `failures`, in input order.
"""
from __future__ import annotations

import base64
import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional, Sequence
from urllib.parse import unquote, urlparse

from app.config.storage_config import (
    BASE64_CHUNK_SIZE,
    DEFAULT_IMAGE_CONTENT_TYPE,
    PUBLIC_OBJECT_PREFIX,
)
from app.repositories.supabase_client import StorageError

logger = logging.getLogger(__name__)


@dataclass
class EncodedImagePart:
    content_type: str
    data: str  # standard base64


@dataclass
class IngestionFailure:
    reference: str
    reason: str


@dataclass
class BatchResult:
    successes: List[EncodedImagePart] = field(default_factory=list)
    failures: List[IngestionFailure] = field(default_factory=list)

    @property
    def reasons(self) -> List[str]:
        return [f.reason for f in self.failures]


def extract_storage_path(reference: str, bucket: str) -> str:
    """Return the object path of a public storage URL in `bucket`.

    Raises ValueError when the URL does not point into the bucket.
    """
    parsed = urlparse(reference)
    if not parsed.scheme or not parsed.netloc:
        raise ValueError(f"Not an absolute URL: {reference}")

    pattern = re.compile(rf"{re.escape(PUBLIC_OBJECT_PREFIX)}{re.escape(bucket)}/(.+)$")
    match = pattern.search(parsed.path)
    if not match:
        raise ValueError(f"URL is outside the {bucket} bucket: {reference}")
    return unquote(match.group(1))


def encode_base64_chunked(data: bytes, chunk_size: int = BASE64_CHUNK_SIZE) -> str:
    """Base64 encode `data` chunk by chunk.

    The chunk size is rounded down to a multiple of 3 so the concatenated
    chunk encodings carry no padding and equal the encoding of the whole buffer.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")

    step = max(3, chunk_size - chunk_size % 3)
    view = memoryview(data)
    encoded = [
        base64.b64encode(view[start:start + step]).decode("ascii")
        for start in range(0, len(view), step)
    ]
    return "".join(encoded)


def ingest(
    references: Sequence[str],
    storage,
    bucket: str,
    chunk_size: int = BASE64_CHUNK_SIZE,
) -> BatchResult:
    """
    Fetch and encode every referenced image.

    Args:
        references: Public storage URLs (may repeat)
        storage: Object with `download(path) -> StoredObject`, raising StorageError
        bucket: Bucket the URLs must point into
        chunk_size: Bytes per base64 chunk

    Returns:
        BatchResult; the caller decides whether enough images succeeded
    """
    result = BatchResult()

    for reference in references:
        logger.info(f"Processing image URL: {reference}")

        try:
            path = extract_storage_path(reference, bucket)
        except ValueError:
            reason = f"invalid storage URL format: {reference}"
            logger.error(reason)
            result.failures.append(IngestionFailure(reference=reference, reason=reason))
            continue

        try:
            part = _load_part(storage, path, chunk_size)
        except StorageError as e:
            reason = f"Failed to download {path}: {str(e) or 'unknown error'}"
        except Exception as e:
            reason = f"Error processing image {reference}: {e}"
        else:
            logger.info(f"Converted {path} to base64 ({len(part.data) / 1024:.2f} KB, {part.content_type})")
            result.successes.append(part)
            continue

        logger.error(reason)
        result.failures.append(IngestionFailure(reference=reference, reason=reason))

    logger.info(f"Successfully processed {len(result.successes)}/{len(references)} images")
    return result


def _load_part(storage, path: str, chunk_size: int) -> EncodedImagePart:
    stored = storage.download(path)
    if not stored.data:
        raise StorageError("")
    return EncodedImagePart(
        content_type=stored.content_type or DEFAULT_IMAGE_CONTENT_TYPE,
        data=encode_base64_chunked(stored.data, chunk_size),
    )


def encode_photo_reference(value: str, storage, bucket: str) -> Optional[EncodedImagePart]:
    """Turn a storage URL, data URI or raw base64 string into an image part."""
    value = (value or "").strip()
    if not value:
        return None

    if value.startswith("http://") or value.startswith("https://"):
        batch = ingest([value], storage, bucket)
        return batch.successes[0] if batch.successes else None

    if value.startswith("data:"):
        header, _, payload = value.partition(",")
        content_type = header[len("data:"):].split(";")[0] or DEFAULT_IMAGE_CONTENT_TYPE
        return EncodedImagePart(content_type=content_type, data=payload) if payload else None

    return EncodedImagePart(content_type=DEFAULT_IMAGE_CONTENT_TYPE, data=value)
