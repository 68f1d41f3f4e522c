"""Prompt construction for listing analysis and the listing coach."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from app.config import ai_config


class PromptMode(str, Enum):
    SINGLE = "single"
    LOT = "lot"


def resolve_prompt_mode(is_lot: bool, lot_articles: Optional[Sequence[Any]]) -> PromptMode:
    """Lot mode needs both the flag and at least one article."""
    if is_lot and lot_articles:
        return PromptMode.LOT
    return PromptMode.SINGLE


def resolve_writing_style(member: Optional[Dict[str, Any]]) -> str:
    """Pick the writing style of a family member.

    An explicit style wins over the persona's style; unknown personas
    (including "custom" without a style) fall back to the default.
    """
    if not member:
        return ai_config.DEFAULT_WRITING_STYLE

    style = (member.get("writing_style") or "").strip()
    if style:
        return style

    persona_id = member.get("persona_id")
    if persona_id:
        return ai_config.PERSONA_STYLES.get(persona_id, ai_config.DEFAULT_WRITING_STYLE)
    return ai_config.DEFAULT_WRITING_STYLE


def _get(article: Any, key: str) -> Any:
    if isinstance(article, dict):
        return article.get(key)
    return getattr(article, key, None)


def _format_price(price: Any) -> str:
    if isinstance(price, str):
        price = price.strip().rstrip("€").strip()
    if price is None or price == "":
        return "N/A€"
    if isinstance(price, float) and price.is_integer():
        price = int(price)
    return f"{price}€"


def render_lot_articles(articles: Iterable[Any]) -> str:
    lines: List[str] = []
    for idx, article in enumerate(articles, start=1):
        brand = _get(article, "brand") or "Sans marque"
        size = _get(article, "size") or "N/A"
        price = _format_price(_get(article, "price"))
        lines.append(f"{idx}. {_get(article, 'title') or ''} - {brand} - Taille {size} - {price}")
    return "\n".join(lines)


def build_prompt(
    mode: PromptMode,
    writing_style: str,
    context: Optional[Sequence[Any]] = None,
    image_count: int = 1,
) -> str:
    """Build the analysis instruction for a single item or a lot.

    `context` is the list of lot articles, only used in lot mode.
    """
    common = {
        "intro": ai_config.COACH_INTRO,
        "algorithm_rules": ai_config.MARKETPLACE_ALGORITHM_RULES,
        "image_count": image_count,
        "writing_style": writing_style,
        "categories": ", ".join(ai_config.CATEGORIES),
        "colors": ", ".join(ai_config.COLORS),
        "materials": ", ".join(ai_config.MATERIALS),
        "conditions": ", ".join(ai_config.CONDITIONS),
        "seasons": ", ".join(ai_config.SEASONS),
    }

    if mode == PromptMode.LOT:
        return ai_config.LOT_PROMPT.format(
            lot_rules=ai_config.LOT_RULES,
            articles=render_lot_articles(context or []),
            **common,
        )

    return ai_config.SINGLE_ITEM_PROMPT.format(item_rules=ai_config.SINGLE_ITEM_RULES, **common)


def _listing_values(article: Any, unset_m: str, unset_f: str) -> Dict[str, Any]:
    price = _get(article, "price")
    photos = _get(article, "photos") or []
    if isinstance(price, float) and price.is_integer():
        price = int(price)

    return {
        "title": _get(article, "title") or unset_m,
        "description": _get(article, "description") or unset_f,
        "brand": _get(article, "brand") or unset_f,
        "price": f"{price}€" if price else unset_m,
        "size": _get(article, "size") or unset_f,
        "condition": _get(article, "condition") or unset_m,
        "color": _get(article, "color") or unset_f,
        "material": _get(article, "material") or unset_f,
        "category": _get(article, "main_category") or unset_f,
        "photo_count": len(photos),
    }


def _photo_note(has_photo: bool) -> str:
    return "\n\nPhoto attached for visual analysis." if has_photo else ""


def build_coach_prompt(article: Any, has_photo: bool = False) -> str:
    """Build the structured coach prompt from the current listing data."""
    return ai_config.COACH_PROMPT.format(
        intro=ai_config.COACH_INTRO,
        photo_note=_photo_note(has_photo),
        coach_rules=ai_config.COACH_RULES,
        fields=", ".join(ai_config.COACH_SUGGESTION_FIELDS),
        **_listing_values(article, "Non défini", "Non définie"),
    )


def build_listing_coach_prompt(article: Any, has_photo: bool = False) -> str:
    """Build the free-form coach prompt (answer is plain text, not JSON)."""
    return ai_config.LISTING_COACH_PROMPT.format(
        photo_note=_photo_note(has_photo),
        **_listing_values(article, "Not set", "Not set"),
    )
