"""
Request-scoped collaborators for the API routes.

Every request gets its own Supabase client (bound to the caller's token) and
its own vision client; tests swap them through `app.dependency_overrides`.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Header

from app.config import ai_config
from app.config.storage_config import get_photo_bucket, get_supabase_anon_key, get_supabase_url
from app.repositories.supabase_client import AuthError, BucketStorage, SupabaseClient
from app.services.api_errors import ApiError
from app.services.error_classifier import ErrorClassifier, get_error_classifier
from app.services.vision_client import VisionClient, create_vision_client

logger = logging.getLogger(__name__)


def get_classifier() -> ErrorClassifier:
    return get_error_classifier(ai_config.get_provider())


def get_vision_client(classifier: ErrorClassifier = Depends(get_classifier)) -> VisionClient:
    provider = ai_config.get_provider()
    api_key = ai_config.get_provider_api_key(provider)
    if not api_key:
        raise ApiError(500, classifier.missing_key_message())
    return create_vision_client(provider, api_key)


def require_authorization(authorization: Optional[str] = Header(None)) -> str:
    if not authorization:
        raise ApiError(401, "Authorization header manquant")
    return authorization


def get_supabase_client(authorization: str = Depends(require_authorization)) -> SupabaseClient:
    return SupabaseClient(get_supabase_url(), get_supabase_anon_key(), authorization)


def get_current_user(
    authorization: str = Depends(require_authorization),  # header checked before any Supabase call
    supabase: SupabaseClient = Depends(get_supabase_client),
) -> Dict[str, Any]:
    try:
        return supabase.get_user()
    except AuthError as e:
        logger.warning(f"Authentication failed: {e}")
        raise ApiError(401, "Utilisateur non authentifie") from None


def get_photo_storage(supabase: SupabaseClient = Depends(get_supabase_client)) -> BucketStorage:
    return BucketStorage(supabase, get_photo_bucket())
