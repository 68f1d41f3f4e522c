"""Pydantic models for the listing coach endpoint."""

from typing import List, Optional, Union
from pydantic import Field

from app.models.analysis import CamelModel


class CoachArticle(CamelModel):
    """Current state of the listing being coached."""
    title: Optional[str] = None
    description: Optional[str] = None
    brand: Optional[str] = None
    price: Optional[float] = None
    size: Optional[str] = None
    condition: Optional[str] = None
    color: Optional[str] = None
    material: Optional[str] = None
    main_category: Optional[str] = None
    photos: List[str] = Field(default_factory=list)


class CoachAdviceRequest(CamelModel):
    article: CoachArticle
    active_photo: Optional[str] = Field(
        None, description="Storage URL, data URI or raw base64 of the photo to look at"
    )


class Suggestion(CamelModel):
    """A ready-to-apply edit of one listing field."""
    field: str
    current_value: Union[str, float]
    suggested_value: Union[str, float]
    reason: str


class CoachAdvice(CamelModel):
    general_advice: str
    suggestions: List[Suggestion] = Field(default_factory=list)


class ListingCoachAdvice(CamelModel):
    """Free-form coach answer (markdown, French)."""
    advice: str
