import json
import os

os.environ.setdefault("LOG_DIR", os.path.join(os.path.dirname(__file__), ".logs"))

import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.dependencies import get_supabase_client, get_vision_client
from app.repositories.supabase_client import AuthError, StorageError, StoredObject

BASE = "https://demo.supabase.co/storage/v1/object/public/article-photos"

VALID_ANALYSIS = {
    "title": "Zara Robe d'ete fleurie",
    "description": "Jolie robe fleurie portee deux fois.",
    "brand": "Zara",
    "category": "dresses",
    "color": "Bleu",
    "condition": "very_good",
    "season": "summer",
    "material": "Coton",
    "size": "M",
    "estimatedPrice": 18,
    "hashtags": ["#zara", "#robe"],
}


class FakeStorage:
    """In-memory bucket: path -> bytes, or path -> StorageError to simulate failures."""

    def __init__(self, objects=None, content_types=None):
        self.objects = objects or {}
        self.content_types = content_types or {}
        self.calls = []

    def download(self, path):
        self.calls.append(path)
        value = self.objects.get(path)
        if isinstance(value, Exception):
            raise value
        if value is None:
            raise StorageError("Object not found")
        return StoredObject(data=value, content_type=self.content_types.get(path))


class FakeSupabase:
    def __init__(self, storage=None, user=None, members=None):
        self.storage = storage or FakeStorage()
        self.user = user if user is not None else {"id": "user-1", "email": "seller@example.com"}
        self.members = members or {}
        self.downloads = []

    def get_user(self):
        if not self.user:
            raise AuthError("invalid JWT")
        return self.user

    def download(self, bucket, path):
        self.downloads.append((bucket, path))
        return self.storage.download(path)

    def get_family_member(self, member_id, user_id):
        return self.members.get((member_id, user_id))


class FakeVisionClient:
    provider = "gemini"
    model_name = "fake-model"

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = []

    def generate(self, prompt, images, response_schema=None):
        self.calls.append({"prompt": prompt, "images": list(images), "schema": response_schema})
        if self.error is not None:
            raise self.error
        return self.text


@pytest.fixture
def supabase():
    storage = FakeStorage({
        "a.jpg": b"\xff\xd8\xff\xe0first",
        "b.png": b"\x89PNGsecond",
    }, content_types={"b.png": "image/png"})
    return FakeSupabase(storage=storage)


@pytest.fixture
def vision():
    return FakeVisionClient(text=json.dumps(VALID_ANALYSIS))


@pytest.fixture
def client(supabase, vision):
    app.dependency_overrides[get_supabase_client] = lambda: supabase
    app.dependency_overrides[get_vision_client] = lambda: vision
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer test-token"}
