from app.config import ai_config
from app.models.analysis import LotArticle
from app.models.coach import CoachArticle
from app.services.listing_prompts import (
    PromptMode,
    build_coach_prompt,
    build_listing_coach_prompt,
    build_prompt,
    resolve_prompt_mode,
    resolve_writing_style,
)


def test_single_prompt_embeds_vocabularies_and_style():
    prompt = build_prompt(PromptMode.SINGLE, "Ton tres chic", image_count=4)

    assert ", ".join(ai_config.COLORS) in prompt
    assert ", ".join(ai_config.MATERIALS) in prompt
    assert ", ".join(ai_config.CATEGORIES) in prompt
    assert ", ".join(ai_config.SEASONS) in prompt
    for condition in ai_config.CONDITIONS:
        assert condition in prompt
    assert 'STYLE DE REDACTION OBLIGATOIRE: "Ton tres chic"' in prompt
    assert "Ne mentionne JAMAIS le style" in prompt
    assert "(4 photo(s))" in prompt
    assert "CONTEXTE DU LOT" not in prompt


def test_lot_prompt_lists_articles_in_order():
    articles = [
        LotArticle(title="Robe fleurie", brand="Zara", size="M", price=12),
        LotArticle(title="Short jean", price=8.5),
        {"title": "T-shirt", "brand": "H&M", "size": "S", "price": None},
    ]
    prompt = build_prompt(PromptMode.LOT, "Ton amical", articles, image_count=2)

    assert "1. Robe fleurie - Zara - Taille M - 12€" in prompt
    assert "2. Short jean - Sans marque - Taille N/A - 8.5€" in prompt
    assert "3. T-shirt - H&M - Taille S - N/A€" in prompt
    assert prompt.index("1. Robe") < prompt.index("2. Short") < prompt.index("3. T-shirt")
    assert ", ".join(ai_config.COLORS) in prompt
    assert "estimatedPrice: null" in prompt


def test_prompt_is_deterministic():
    assert build_prompt(PromptMode.SINGLE, "x") == build_prompt(PromptMode.SINGLE, "x")


def test_resolve_prompt_mode():
    assert resolve_prompt_mode(True, [LotArticle(title="a")]) == PromptMode.LOT
    assert resolve_prompt_mode(True, []) == PromptMode.SINGLE
    assert resolve_prompt_mode(False, [LotArticle(title="a")]) == PromptMode.SINGLE


def test_resolve_writing_style_precedence():
    assert resolve_writing_style(None) == ai_config.DEFAULT_WRITING_STYLE
    assert resolve_writing_style({"persona_id": "minimalist", "writing_style": "Mon style"}) == "Mon style"
    assert resolve_writing_style({"persona_id": "elegant", "writing_style": None}) == ai_config.PERSONA_STYLES["elegant"]
    assert resolve_writing_style({"persona_id": "custom", "writing_style": ""}) == ai_config.DEFAULT_WRITING_STYLE
    assert resolve_writing_style({"persona_id": None}) == ai_config.DEFAULT_WRITING_STYLE


def test_coach_prompt_uses_listing_data():
    article = CoachArticle(title="Robe Zara", price=20.0, photos=["a", "b"])
    prompt = build_coach_prompt(article, has_photo=True)

    assert "- Titre: Robe Zara" in prompt
    assert "- Prix: 20€" in prompt
    assert "- Marque: Non définie" in prompt
    assert "Photos: 2 photo(s)" in prompt
    assert "Photo attached for visual analysis." in prompt


def _schema_keys(schema):
    keys = []
    for name, prop in schema.get("properties", {}).items():
        keys.append(name)
        keys.extend(_schema_keys(prop.get("items", {})))
    return keys


def test_coach_prompt_states_the_json_contract():
    prompt = build_coach_prompt(CoachArticle(title="Robe"))

    assert "JSON" in prompt
    for key in _schema_keys(ai_config.COACH_RESPONSE_SCHEMA):
        assert f'"{key}"' in prompt


def test_analysis_prompts_name_every_output_field():
    for mode in (PromptMode.SINGLE, PromptMode.LOT):
        prompt = build_prompt(mode, "x", [LotArticle(title="a")])
        assert "JSON" in prompt
        for key in _schema_keys(ai_config.ANALYSIS_RESPONSE_SCHEMA):
            assert f"- {key}:" in prompt


def test_coach_prompt_uses_accented_rules():
    prompt = build_coach_prompt(CoachArticle())

    assert "La première photo doit être parfaite" in prompt
    assert "4. STRATÉGIE PRIX:" in prompt
    assert "STRATEGIE PRIX" not in prompt


def test_lot_price_text_is_rendered_once_with_euro_sign():
    prompt = build_prompt(PromptMode.LOT, "x", [LotArticle(title=None, price="12 €")])
    assert "1.  - Sans marque - Taille N/A - 12€" in prompt


def test_listing_coach_prompt():
    prompt = build_listing_coach_prompt(CoachArticle(brand="Zara", price=15.5), has_photo=False)

    assert "- Brand: Zara" in prompt
    assert "- Price: 15.5€" in prompt
    assert "- Title: Not set" in prompt
    assert "Photos: 0 photos" in prompt
    assert "Photo attached" not in prompt
