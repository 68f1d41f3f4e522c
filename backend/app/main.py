from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from dotenv import load_dotenv
import logging

load_dotenv()

from app.config.logging_config import setup_logging

setup_logging()

from app.config import ai_config
from app.config.storage_config import (
    CORS_ALLOW_HEADERS,
    CORS_ALLOW_METHODS,
    CORS_ALLOW_ORIGINS,
    MAX_ERROR_DETAILS,
    get_photo_bucket,
)
from app.dependencies import (
    get_classifier,
    get_current_user,
    get_photo_storage,
    get_supabase_client,
    get_vision_client,
)

# Import services
from app.services.api_errors import ApiError
from app.services.article_analysis import analyze_article
from app.services.image_ingestion import encode_photo_reference
from app.services.listing_coach import get_listing_coach_advice, get_structured_coach_advice
from app.services.listing_prompts import PromptMode, build_prompt

# Import models
from app.models.analysis import AIConfigResponse, AnalysisResult, AnalyzeImageRequest, ErrorResponse
from app.models.coach import CoachAdvice, CoachAdviceRequest, ListingCoachAdvice

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": ", ".join(CORS_ALLOW_ORIGINS),
    "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
    "Access-Control-Allow-Headers": ", ".join(CORS_ALLOW_HEADERS),
}

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    429: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}

# Create FastAPI app
app = FastAPI(title="Listing Assistant API", version="1.0")

# Setup CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=CORS_ALLOW_METHODS,
    allow_headers=["*"],
)


# ============================================================
# Error handlers
# ============================================================

@app.exception_handler(ApiError)
def handle_api_error(request: Request, exc: ApiError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=CORS_HEADERS)


@app.exception_handler(RequestValidationError)
def handle_validation_error(request: Request, exc: RequestValidationError):
    details = [
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    ]
    logger.warning(f"Invalid request on {request.url.path}: {details}")
    body = ErrorResponse(error="Requete invalide", details=details[:MAX_ERROR_DETAILS])
    return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True), headers=CORS_HEADERS)


@app.exception_handler(Exception)
def handle_unexpected_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Erreur serveur"}, headers=CORS_HEADERS)


@app.options("/{path:path}", include_in_schema=False)
def preflight(path: str):
    """Answer preflight requests on every route."""
    return Response(status_code=200, headers=CORS_HEADERS)


@app.get("/health")
def health():
    """Health check endpoint"""
    return {"status": "ok"}


# ============================================================
# Article analysis
# ============================================================

@app.post("/api/analyze-article-image", response_model=AnalysisResult, responses=ERROR_RESPONSES)
def analyze_article_image(
    request: AnalyzeImageRequest,
    vision=Depends(get_vision_client),
    classifier=Depends(get_classifier),
    user=Depends(get_current_user),
    supabase=Depends(get_supabase_client),
    storage=Depends(get_photo_storage),
):
    """
    Analyze stored article photos and return a structured listing.
    With isLot and lotArticles, the photos are described as a bundle.
    """
    result = analyze_article(request, user, supabase, storage, get_photo_bucket(), vision, classifier)
    # optional fields are passed through untouched, so skip response re-validation
    return JSONResponse(content=result.model_dump(by_alias=True, mode="json"), headers=CORS_HEADERS)


# ============================================================
# Listing coach
# ============================================================

def _load_coach_photo(active_photo, storage, user):
    if not active_photo:
        return None
    photo = encode_photo_reference(active_photo, storage, get_photo_bucket())
    if photo is None:
        logger.warning(f"Could not load coach photo for user {user.get('id')}, continuing without it")
    return photo


@app.post("/api/coach/advice", response_model=CoachAdvice, responses=ERROR_RESPONSES)
def coach_advice(
    request: CoachAdviceRequest,
    vision=Depends(get_vision_client),
    classifier=Depends(get_classifier),
    user=Depends(get_current_user),
    storage=Depends(get_photo_storage),
):
    """Suggest concrete, ready-to-apply edits for an existing listing."""
    photo = _load_coach_photo(request.active_photo, storage, user)
    return get_structured_coach_advice(request.article, photo, vision, classifier)


@app.post("/api/coach/listing-advice", response_model=ListingCoachAdvice, responses=ERROR_RESPONSES)
def listing_coach_advice(
    request: CoachAdviceRequest,
    vision=Depends(get_vision_client),
    classifier=Depends(get_classifier),
    user=Depends(get_current_user),
    storage=Depends(get_photo_storage),
):
    """Free-form coaching text for an existing listing."""
    photo = _load_coach_photo(request.active_photo, storage, user)
    advice = get_listing_coach_advice(request.article, photo, vision, classifier)
    return ListingCoachAdvice(advice=advice)


@app.get("/api/ai/config", response_model=AIConfigResponse)
def get_ai_config():
    """Current AI provider, model and shared vocabularies."""
    provider = ai_config.get_provider()
    prompt = build_prompt(PromptMode.SINGLE, ai_config.DEFAULT_WRITING_STYLE)
    return AIConfigResponse(
        provider=provider,
        model=ai_config.get_model_name(provider),
        colors=ai_config.COLORS,
        materials=ai_config.MATERIALS,
        conditions=ai_config.CONDITIONS,
        seasons=ai_config.SEASONS,
        categories=ai_config.CATEGORIES,
        personas=sorted(ai_config.PERSONA_STYLES),
        prompt_preview=prompt[:200],
    )
