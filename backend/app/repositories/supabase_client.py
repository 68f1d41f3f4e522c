"""
Thin Supabase REST client (auth, storage, family members).
Created per request with the caller's Authorization header so row-level
access rules apply to every read.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import quote

import requests

from app.config.storage_config import HTTP_TIMEOUT

logger = logging.getLogger(__name__)


class SupabaseError(Exception):
    """Base error for Supabase calls."""


class AuthError(SupabaseError):
    pass


class StorageError(SupabaseError):
    pass


@dataclass
class StoredObject:
    data: bytes
    content_type: Optional[str] = None


def _error_message(response: requests.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        for key in ("message", "error_description", "error", "msg"):
            if payload.get(key):
                return str(payload[key])
    return f"HTTP {response.status_code}"


class SupabaseClient:
    def __init__(self, base_url: str, anon_key: str, authorization: str, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.authorization = authorization
        self.session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.anon_key,
            "Authorization": self.authorization,
        }

    def get_user(self) -> Dict[str, Any]:
        """Return the user owning the access token."""
        url = f"{self.base_url}/auth/v1/user"
        try:
            response = self.session.get(url, headers=self._headers(), timeout=HTTP_TIMEOUT)
        except requests.RequestException as e:
            raise AuthError(f"Auth request failed: {e}") from e

        if response.status_code != 200:
            raise AuthError(_error_message(response))

        try:
            user = response.json()
        except ValueError:
            raise AuthError("Invalid auth response") from None
        if not isinstance(user, dict) or not user.get("id"):
            raise AuthError("No user for this token")
        return user

    def download(self, bucket: str, path: str) -> StoredObject:
        """Download an object's raw bytes from storage."""
        url = f"{self.base_url}/storage/v1/object/{quote(bucket)}/{quote(path)}"
        try:
            response = self.session.get(url, headers=self._headers(), timeout=HTTP_TIMEOUT)
        except requests.RequestException as e:
            raise StorageError(str(e)) from e

        if response.status_code != 200:
            raise StorageError(_error_message(response))

        content_type = response.headers.get("Content-Type")
        if content_type:
            content_type = content_type.split(";")[0].strip()
        return StoredObject(data=response.content, content_type=content_type or None)

    def get_family_member(self, member_id: str, user_id: str) -> Optional[Dict[str, Any]]:
        """Fetch the persona and writing style of one of the user's family members."""
        url = f"{self.base_url}/rest/v1/family_members"
        params = {
            "select": "persona_id,writing_style",
            "id": f"eq.{member_id}",
            "user_id": f"eq.{user_id}",
            "limit": "1",
        }
        try:
            response = self.session.get(url, headers=self._headers(), params=params, timeout=HTTP_TIMEOUT)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Family member lookup failed for {member_id}: {e}")
            return None

        try:
            rows = response.json()
        except ValueError:
            logger.warning(f"Family member lookup for {member_id} returned a non-JSON body")
            return None
        if isinstance(rows, list) and rows and isinstance(rows[0], dict):
            return rows[0]
        return None


class BucketStorage:
    """Exposes `download(path)` on a single bucket for the image ingestor."""

    def __init__(self, client: SupabaseClient, bucket: str):
        self.client = client
        self.bucket = bucket

    def download(self, path: str) -> StoredObject:
        return self.client.download(self.bucket, path)
