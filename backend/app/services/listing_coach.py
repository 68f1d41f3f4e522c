"""Listing coach: advice on an existing listing, as structured edits or as free text."""
from __future__ import annotations

import logging
from typing import Optional

from app.config import ai_config
from app.models.coach import CoachAdvice, CoachArticle
from app.services.api_errors import ApiError
from app.services.error_classifier import ErrorCategory, ErrorClassifier, status_code_for
from app.services.image_ingestion import EncodedImagePart
from app.services.listing_prompts import build_coach_prompt, build_listing_coach_prompt
from app.services.response_normalizer import Normalized, normalize_coach_advice
from app.services.vision_client import VisionClient

logger = logging.getLogger(__name__)

COACH_FAILURE_MESSAGE = "Impossible d'analyser l'annonce pour le moment."
EMPTY_ADVICE_MESSAGE = "Désolé, je n'ai pas pu analyser votre annonce pour le moment."


def _ask_coach(
    prompt: str,
    photo: Optional[EncodedImagePart],
    vision: VisionClient,
    classifier: ErrorClassifier,
    response_schema=None,
) -> str:
    images = [photo] if photo is not None else []
    try:
        return vision.generate(prompt, images, response_schema)
    except Exception as e:
        classified = classifier.classify(e)
        logger.error(f"Coach analysis failed ({classified.category.value}): {classified.message}")
        # unknown upstream failures get the generic coach message
        message = (
            COACH_FAILURE_MESSAGE
            if classified.category == ErrorCategory.UNKNOWN
            else classifier.user_message(classified)
        )
        raise ApiError(status_code_for(classified.category), message) from e


def get_structured_coach_advice(
    article: CoachArticle,
    photo: Optional[EncodedImagePart],
    vision: VisionClient,
    classifier: ErrorClassifier,
) -> CoachAdvice:
    prompt = build_coach_prompt(article, has_photo=photo is not None)
    raw_text = _ask_coach(prompt, photo, vision, classifier, ai_config.COACH_RESPONSE_SCHEMA)

    outcome = normalize_coach_advice(raw_text)
    if not isinstance(outcome, Normalized):
        logger.error(f"Invalid coach response: {outcome.message if raw_text else 'empty response'}")
        raise ApiError(500, COACH_FAILURE_MESSAGE)

    advice = outcome.value
    logger.info(f"Coach returned {len(advice.suggestions)} suggestion(s)")
    return advice


def get_listing_coach_advice(
    article: CoachArticle,
    photo: Optional[EncodedImagePart],
    vision: VisionClient,
    classifier: ErrorClassifier,
) -> str:
    """Markdown advice in French; an empty model answer yields an apology text."""
    prompt = build_listing_coach_prompt(article, has_photo=photo is not None)
    raw_text = (_ask_coach(prompt, photo, vision, classifier) or "").strip()
    if not raw_text:
        logger.warning("Listing coach returned an empty answer")
        return EMPTY_ADVICE_MESSAGE
    return raw_text
