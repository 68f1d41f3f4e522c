"""
Pydantic models for the article image analysis endpoint.
Field names are snake_case in Python and camelCase on the wire.
"""

from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LotArticle(CamelModel):
    """Summary of an item already entered, used to describe a lot."""
    title: Optional[str] = None
    brand: Optional[str] = None
    size: Optional[str] = None
    price: Optional[Union[float, str]] = None


class AnalyzeImageRequest(CamelModel):
    """Request to analyze one or more stored article photos."""
    image_urls: Optional[List[str]] = Field(None, description="Public storage URLs of the photos")
    seller_id: Optional[str] = Field(None, description="Family member whose writing style is used")
    is_lot: bool = False
    lot_articles: List[LotArticle] = Field(default_factory=list)


class AnalysisResult(CamelModel):
    """Normalized listing attributes extracted from the photos."""
    title: str
    description: str
    brand: str
    category: str
    color: str
    condition: str
    season: str
    subcategory: Optional[str] = None
    material: Optional[str] = None
    size: Optional[str] = None
    suggested_period: Optional[str] = None
    estimated_price: Optional[float] = None
    seo_keywords: Optional[List[str]] = None
    hashtags: Optional[List[str]] = None
    search_terms: Optional[List[str]] = None
    confidence_score: Optional[float] = None


class ErrorResponse(BaseModel):
    """Error body returned on every failure path."""
    error: str
    details: Optional[List[str]] = None


class AIConfigResponse(BaseModel):
    """Response with current AI configuration."""
    provider: str
    model: str
    colors: List[str]
    materials: List[str]
    conditions: List[str]
    seasons: List[str]
    categories: List[str]
    personas: List[str]
    prompt_preview: str  # First 200 chars of the single-item prompt
