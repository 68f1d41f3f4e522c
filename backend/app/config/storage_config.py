"""
Supabase (auth, storage, data store) and HTTP surface configuration
"""
import os
from typing import List

# Supabase project
SUPABASE_URL = os.getenv("SUPABASE_URL", "")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")

# Storage bucket holding the article photos
PHOTO_BUCKET = os.getenv("PHOTO_BUCKET", "article-photos")

# Public object URLs look like <SUPABASE_URL>/storage/v1/object/public/<bucket>/<path>
PUBLIC_OBJECT_PREFIX = "/storage/v1/object/public/"

# Content type assumed when storage does not report one
DEFAULT_IMAGE_CONTENT_TYPE = "image/jpeg"

# Images are base64 encoded in chunks of this many bytes
BASE64_CHUNK_SIZE = 0x8000

# Timeout (seconds) for calls to Supabase
HTTP_TIMEOUT = int(os.getenv("SUPABASE_HTTP_TIMEOUT", "30"))

# At most this many per-image diagnostics are returned to the client
MAX_ERROR_DETAILS = 3

# CORS
CORS_ALLOW_ORIGINS: List[str] = ["*"]
CORS_ALLOW_METHODS: List[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
CORS_ALLOW_HEADERS: List[str] = ["Content-Type", "Authorization", "X-Client-Info", "Apikey"]


def get_supabase_url() -> str:
    return os.getenv("SUPABASE_URL", SUPABASE_URL).rstrip("/")


def get_supabase_anon_key() -> str:
    return os.getenv("SUPABASE_ANON_KEY", SUPABASE_ANON_KEY)


def get_photo_bucket() -> str:
    return os.getenv("PHOTO_BUCKET", PHOTO_BUCKET)
