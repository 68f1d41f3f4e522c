"""
Normalization of raw model output into application records.

Results are tagged: `Normalized` on success, `ParseError` when the text is not
a JSON object, `SchemaError` when a required field is missing or empty.
"""
from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Union

from app.config import ai_config
from app.models.analysis import AnalysisResult
from app.models.coach import CoachAdvice, Suggestion
from app.services.listing_prompts import PromptMode

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?```", re.DOTALL)

# wire name -> model attribute
_OPTIONAL_ATTRS = {
    "subcategory": "subcategory",
    "material": "material",
    "size": "size",
    "suggestedPeriod": "suggested_period",
    "estimatedPrice": "estimated_price",
    "seoKeywords": "seo_keywords",
    "hashtags": "hashtags",
    "searchTerms": "search_terms",
    "confidenceScore": "confidence_score",
}


@dataclass
class Normalized:
    value: Any


@dataclass
class ParseError:
    message: str


@dataclass
class SchemaError:
    missing_field: str

    @property
    def message(self) -> str:
        return f"Missing or empty required field: {self.missing_field}"


NormalizeResult = Union[Normalized, ParseError, SchemaError]


def _load_object(raw_text: str) -> Union[Dict[str, Any], ParseError]:
    text = (raw_text or "").strip()
    fenced = _FENCE_RE.search(text)
    if fenced:
        text = fenced.group(1).strip()

    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        return ParseError(f"Invalid JSON: {e}")

    if not isinstance(parsed, dict):
        return ParseError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


def _is_filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def normalize(raw_text: str, mode: PromptMode = PromptMode.SINGLE) -> NormalizeResult:
    """Validate the analysis output and build an AnalysisResult.

    Optional fields are copied as-is; out-of-vocabulary values are left to the caller.
    """
    parsed = _load_object(raw_text)
    if isinstance(parsed, ParseError):
        return parsed

    for name in ai_config.REQUIRED_FIELDS:
        if not _is_filled(parsed.get(name)):
            return SchemaError(name)

    values = {name: parsed[name] for name in ai_config.REQUIRED_FIELDS}
    for wire_name, attr in _OPTIONAL_ATTRS.items():
        values[attr] = parsed.get(wire_name)

    logger.debug(f"Normalized {PromptMode(mode).value} analysis: {values['title']}")
    return Normalized(AnalysisResult.model_construct(**values))


def vocabulary_issues(result: AnalysisResult) -> List[str]:
    """List values outside the shared vocabularies (the result is not modified)."""
    checks = [
        ("color", result.color, ai_config.COLORS),
        ("material", result.material, ai_config.MATERIALS),
        ("condition", result.condition, ai_config.CONDITIONS),
        ("season", result.season, ai_config.SEASONS),
    ]
    issues = []
    for name, value, allowed in checks:
        if value is None:
            continue
        if value not in allowed:
            issues.append(f"{name}={value!r} is not an allowed value")
    return issues


def normalize_coach_advice(raw_text: str) -> NormalizeResult:
    """Validate the coach output and build a CoachAdvice."""
    parsed = _load_object(raw_text)
    if isinstance(parsed, ParseError):
        return parsed

    if not _is_filled(parsed.get("generalAdvice")):
        return SchemaError("generalAdvice")

    raw_suggestions = parsed.get("suggestions")
    if not isinstance(raw_suggestions, list):
        return SchemaError("suggestions")

    suggestions = []
    for item in raw_suggestions:
        if not isinstance(item, dict):
            continue
        field = item.get("field")
        if field not in ai_config.COACH_SUGGESTION_FIELDS:
            logger.warning(f"Dropping coach suggestion for unknown field: {field!r}")
            continue
        suggestions.append(
            Suggestion(
                field=field,
                current_value=_as_text(item.get("currentValue")),
                suggested_value=parse_suggestion_value(field, _as_text(item.get("suggestedValue"))),
                reason=_as_text(item.get("reason")),
            )
        )

    return Normalized(CoachAdvice(general_advice=parsed["generalAdvice"], suggestions=suggestions))


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def parse_suggestion_value(field: str, value: Union[str, float, int]) -> Union[str, float, int]:
    """Clean a suggested value; prices become a plain numeric string ("" if none)."""
    if field != "price":
        return value

    cleaned = re.sub(r"[^0-9.,]", "", str(value)).replace(",", ".", 1)
    match = re.match(r"\d*\.?\d+|\d+", cleaned)
    if not match:
        return ""
    number = float(match.group(0))
    return str(int(number)) if number.is_integer() else str(number)

