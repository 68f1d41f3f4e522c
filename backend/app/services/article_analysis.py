"""
Article photo analysis: ingest stored photos, ask the vision model for a
listing, and normalize its answer into an AnalysisResult.
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from app.config import ai_config
from app.config.storage_config import MAX_ERROR_DETAILS
from app.models.analysis import AnalysisResult, AnalyzeImageRequest
from app.services.api_errors import ApiError
from app.services.error_classifier import ErrorClassifier, status_code_for
from app.services.image_ingestion import ingest
from app.services.listing_prompts import build_prompt, resolve_prompt_mode, resolve_writing_style
from app.services.response_normalizer import Normalized, normalize, vocabulary_issues
from app.services.vision_client import VisionClient

logger = logging.getLogger(__name__)


def resolve_seller_style(supabase, seller_id, user: Dict[str, Any]) -> str:
    """Writing style of the selected family member, or the default style."""
    if not seller_id:
        return ai_config.DEFAULT_WRITING_STYLE
    member = supabase.get_family_member(seller_id, user["id"])
    if member is None:
        logger.info(f"No family member {seller_id} for user {user['id']}, using default style")
    return resolve_writing_style(member)


def analyze_article(
    request: AnalyzeImageRequest,
    user: Dict[str, Any],
    supabase,
    storage,
    bucket: str,
    vision: VisionClient,
    classifier: ErrorClassifier,
) -> AnalysisResult:
    """
    Run the full analysis pipeline for one request.

    Raises:
        ApiError: with the HTTP status and French message for the client
    """
    image_urls = request.image_urls
    logger.info(f"Received imageUrls: {image_urls}")
    if not image_urls or not isinstance(image_urls, list):
        raise ApiError(400, "Au moins une URL d'image est requise")

    writing_style = resolve_seller_style(supabase, request.seller_id, user)

    batch = ingest(image_urls, storage, bucket)
    if not batch.successes:
        logger.error(f"All image processing failed: {batch.reasons}")
        raise ApiError(
            400,
            "Impossible de charger les images depuis le stockage.",
            details=batch.reasons[:MAX_ERROR_DETAILS],
        )

    mode = resolve_prompt_mode(request.is_lot, request.lot_articles)
    prompt = build_prompt(mode, writing_style, request.lot_articles, image_count=len(image_urls))
    logger.info(f"Analyzing {len(batch.successes)} image(s) in {mode.value} mode")

    try:
        raw_text = vision.generate(prompt, batch.successes, ai_config.ANALYSIS_RESPONSE_SCHEMA)
    except Exception as e:
        classified = classifier.classify(e)
        logger.error(f"{classifier.label} API error ({classified.category.value}): {classified.message}")
        raise ApiError(status_code_for(classified.category), classifier.user_message(classified)) from e

    if not raw_text:
        logger.error(f"Empty response from {classifier.label}")
        raise ApiError(500, "L'IA n'a pas pu analyser les images. Veuillez reessayer.")

    outcome = normalize(raw_text, mode)
    if not isinstance(outcome, Normalized):
        logger.error(f"Invalid analysis response: {outcome.message}")
        raise ApiError(500, "Reponse de l'IA invalide. Veuillez reessayer.")

    result = outcome.value
    for issue in vocabulary_issues(result):
        logger.warning(f"Analysis value outside vocabulary: {issue}")

    logger.info(f"Analysis completed successfully: {result.title}")
    return result
