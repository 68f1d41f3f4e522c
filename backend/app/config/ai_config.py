"""
AI configuration for listing analysis and the listing coach.
Centralized location for prompts, models, vocabularies and business rules.
"""
import os
from typing import Dict, List, Optional

# Provider selection ("gemini" or "openai")
AI_PROVIDER = os.getenv("AI_PROVIDER", "gemini").strip().lower()

# AI Models
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-pro")  # Vision-capable model for listing analysis
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

# Temperature for AI calls (lower = more consistent)
AI_TEMPERATURE = 0.2
OPENAI_MAX_TOKENS = 1500

# Environment variable holding each provider's key
API_KEY_ENV_VARS = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
}

PROVIDER_LABELS = {
    "gemini": "Gemini",
    "openai": "OpenAI",
}


def get_provider() -> str:
    provider = os.getenv("AI_PROVIDER", AI_PROVIDER).strip().lower()
    return provider if provider in API_KEY_ENV_VARS else "gemini"


def get_provider_api_key(provider: Optional[str] = None) -> str:
    """Read the API key of the configured provider (empty string if unset)."""
    provider = provider or get_provider()
    return os.getenv(API_KEY_ENV_VARS[provider], "").strip()


def get_model_name(provider: Optional[str] = None) -> str:
    provider = provider or get_provider()
    return OPENAI_MODEL if provider == "openai" else GEMINI_MODEL


# Closed vocabularies shared by prompt construction and result validation
COLORS: List[str] = [
    "Noir", "Marron", "Gris", "Beige", "Fuchsia", "Violet", "Rouge", "Jaune",
    "Bleu", "Vert", "Orange", "Blanc", "Argente", "Dore", "Multicolore", "Kaki",
    "Turquoise", "Creme", "Abricot", "Corail", "Bordeaux", "Rose", "Lila",
    "Bleu clair", "Marine", "Vert fonce", "Moutarde", "Menthe",
]

MATERIALS: List[str] = [
    "Coton", "Polyester", "Laine", "Lin", "Soie", "Cuir", "Cuir synthetique",
    "Denim", "Viscose", "Velours", "Satin", "Maille", "Cachemire", "Acrylique",
    "Nylon", "Elasthanne",
]

CONDITIONS: List[str] = ["new_with_tags", "new_without_tags", "very_good", "good", "satisfactory"]

SEASONS: List[str] = ["spring", "summer", "autumn", "winter", "all-seasons"]

CATEGORIES: List[str] = ["tops", "bottoms", "dresses", "outerwear", "shoes", "accessories", "bags"]

# Writing styles
DEFAULT_WRITING_STYLE = "Description detaillee et attractive"

PERSONA_STYLES: Dict[str, str] = {
    "minimalist": "Descriptions courtes, claires et efficaces. Style minimaliste avec uniquement l'essentiel.",
    "enthusiast": "Dynamique, positive et pleine d'energie ! Utilise des points d'exclamation et un ton enthousiaste.",
    "professional": "Experte, technique et detaillee. Descriptions precises et professionnelles.",
    "friendly": "Chaleureuse, accessible et decontractee. Ton amical comme entre amis.",
    "elegant": "Raffinee, sophistiquee et chic. Vocabulaire elegant et noble.",
    "eco_conscious": "Responsable avec focus sur la durabilite. Met en avant l'eco-responsabilite et la seconde vie des vetements.",
    "trendy": "Tendance et a la pointe de la mode. Utilise un vocabulaire fashion et actuel.",
    "storyteller": "Raconte une histoire autour de l'article. Cree une connexion emotionnelle avec le vetement.",
}

# Result fields
REQUIRED_FIELDS: List[str] = ["title", "description", "brand", "category", "color", "condition", "season"]

OPTIONAL_FIELDS: List[str] = [
    "subcategory", "material", "size", "suggestedPeriod", "estimatedPrice",
    "seoKeywords", "hashtags", "searchTerms", "confidenceScore",
]

_STRING_LIST = {"type": "ARRAY", "items": {"type": "STRING"}}

# Output schema sent with the analysis request (Gemini schema dialect)
ANALYSIS_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "title": {"type": "STRING"},
        "description": {"type": "STRING"},
        "brand": {"type": "STRING"},
        "category": {"type": "STRING"},
        "subcategory": {"type": "STRING"},
        "color": {"type": "STRING"},
        "material": {"type": "STRING"},
        "size": {"type": "STRING"},
        "condition": {"type": "STRING"},
        "season": {"type": "STRING"},
        "suggestedPeriod": {"type": "STRING"},
        "estimatedPrice": {"type": "NUMBER"},
        "seoKeywords": _STRING_LIST,
        "hashtags": _STRING_LIST,
        "searchTerms": _STRING_LIST,
        "confidenceScore": {"type": "NUMBER"},
    },
    "required": REQUIRED_FIELDS,
}

COACH_SUGGESTION_FIELDS: List[str] = [
    "title", "description", "price", "brand", "size", "color", "material", "condition",
]

COACH_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "generalAdvice": {"type": "STRING"},
        "suggestions": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "field": {"type": "STRING"},
                    "currentValue": {"type": "STRING"},
                    "suggestedValue": {"type": "STRING"},
                    "reason": {"type": "STRING"},
                },
                "required": ["field", "currentValue", "suggestedValue", "reason"],
            },
        },
    },
    "required": ["generalAdvice", "suggestions"],
}

# Shared coach persona and marketplace heuristics
COACH_INTRO = (
    "Tu es KELLY, une coach de vente EXPERTE sur Vinted avec 8 ans d'experience et plus de 50 000 ventes reussies.\n"
    "Tu connais PARFAITEMENT l'algorithme Vinted et les meilleures pratiques SEO marketplace."
)

MARKETPLACE_ALGORITHM_RULES = (
    "1. ALGORITHME VINTED:\n"
    "   - Les articles avec 5+ photos ont 3x plus de vues\n"
    "   - La premiere photo doit etre parfaite (c'est la miniature)\n"
    "   - Les titres avec marque + type + detail accrocheur performent mieux\n"
    "   - Les descriptions de 80-150 mots sont optimales\n"
    "   - Remplir TOUS les champs booste le referencement"
)

SINGLE_ITEM_RULES = (
    "2. BONNES PRATIQUES TITRE (max 60 caracteres):\n"
    "   - Format gagnant: \"[Marque] [Type] [Detail accrocheur]\"\n"
    "   - Inclure: marque, type, couleur ou detail distinctif\n"
    "   - Eviter: mots vagues, majuscules excessives, prix dans le titre\n"
    "\n"
    "3. BONNES PRATIQUES DESCRIPTION:\n"
    "   - Commencer par une accroche emotionnelle\n"
    "   - Mentionner: etat, taille, matiere, occasion d'achat\n"
    "   - Ajouter des mots-cles naturellement (style, saison, occasion)\n"
    "   - Terminer par un call-to-action subtil\n"
    "\n"
    "4. STRATEGIE PRIX:\n"
    "   - Prix trop bas = mefiance, prix trop haut = pas de vues\n"
    "   - Prevoir marge pour negociation (-10 a -20%)\n"
    "   - Regarder les prix de vente recents (pas les annonces en cours)\n"
    "\n"
    "5. PHOTOS QUI VENDENT:\n"
    "   - Photo 1: article entier sur fond neutre\n"
    "   - Photo 2-3: details (etiquettes, textures, finitions)\n"
    "   - Photo 4-5: article porte ou mise en situation\n"
    "   - Lumiere naturelle, pas de flash"
)

LOT_RULES = (
    "2. BONNES PRATIQUES TITRE (max 60 caracteres):\n"
    "   - Format gagnant: \"[Theme] [Type] [Detail accrocheur]\"\n"
    "   - Inclure: nombre d'articles, type, taille ou theme distinctif\n"
    "   - Eviter: mots vagues, majuscules excessives\n"
    "\n"
    "3. BONNES PRATIQUES DESCRIPTION LOT:\n"
    "   - Commencer par la valeur du lot et l'economie realisee\n"
    "   - Mentionner: liste des articles, coherence, etat general\n"
    "   - Ajouter des mots-cles naturellement (saison, taille, theme)\n"
    "   - Terminer par un appel a l'action subtil\n"
    "\n"
    "4. STRATEGIE PRIX LOT:\n"
    "   - Prix lot doit etre attractif vs prix individuels\n"
    "   - Mettre en avant l'economie (ex: \"valeur 60€, vendu 30€\")\n"
    "\n"
    "5. PHOTOS QUI VENDENT:\n"
    "   - Photo 1: tous les articles disposes ensemble\n"
    "   - Photos suivantes: details de chaque piece\n"
    "   - Lumiere naturelle, fond neutre"
)

SINGLE_ITEM_PROMPT = """{intro}

**TES CONNAISSANCES VINTED (utilise-les dans ton analyse):**

{algorithm_rules}

{item_rules}

**ANALYSE MINUTIEUSE DES PHOTOS:**
1. Examine TOUTES les photos fournies ({image_count} photo(s))
2. Cherche les ETIQUETTES visibles pour marque et taille
3. Evalue l'etat reel du vetement (usure, defauts, qualite)
4. Identifie les details vendeurs (coupes, finitions, motifs)

STYLE DE REDACTION OBLIGATOIRE: "{writing_style}"
- Applique CE STYLE exactement pour la description
- Ne mentionne JAMAIS le style dans ta reponse

RETOURNE UN JSON AVEC CES CHAMPS:

INFORMATIONS PRODUIT:
- title: Titre SEO optimise Vinted (max 60 car). Format: "[Marque] [Type] [Detail accrocheur]" Ex: "Zara Robe d'ete fleurie boheme" ou "Nike Air Max 90 blanc etat neuf"
- description: 80-120 mots. Structure: 1) Accroche emotionnelle 2) Description detaillee 3) Points forts 4) Etat 5) Call-to-action subtil. Utilise le style "{writing_style}".
- brand: Marque exacte si visible (sinon "Sans marque")
- category: {categories}
- subcategory: Type precis (t-shirt, jean slim, robe midi, sneakers, etc.)

ATTRIBUTS VINTED:
- color: Une couleur parmi: {colors}
- material: Matiere parmi: {materials} (null si incertain)
- size: Taille exacte de l'etiquette (S/M/L/XL ou 34/36/38/40/42, null si non visible)
- condition: new_with_tags (etiquettes visibles), new_without_tags (neuf sans etiquette), very_good (excellent), good (bon), satisfactory (correct)

OPTIMISATION VENTE:
- season: {seasons}
- suggestedPeriod: Meilleure periode de vente (ex: "Septembre - Novembre" pour manteaux)
- estimatedPrice: Prix marche en euros (considere: marque, etat, tendance, prix Vinted similaires)

SEO & MARKETING VINTED:
- seoKeywords: 8 mots-cles recherches sur Vinted (ex: ["robe ete", "zara femme", "boheme", "fleurie", "taille M", "occasion", "tendance 2024", "maxi dress"])
- hashtags: 10 hashtags tendance (ex: ["#zara", "#robeete", "#boheme", "#vintage", "#secondemain", "#modeethique", "#frenchstyle", "#ootd", "#vinted", "#bonplan"])
- searchTerms: 5 termes de recherche que les acheteurs utilisent (ex: ["robe zara ete", "robe fleurie femme", "robe boheme M", "robe longue occasion", "zara robe"])

QUALITE:
- confidenceScore: Score de confiance 0-100 sur la precision de ton analyse (100 = etiquettes visibles et article identifie avec certitude)

IMPORTANT: Analyse toutes les images fournies pour extraire le maximum d'informations."""

LOT_PROMPT = """{intro}

**TES CONNAISSANCES VINTED (utilise-les dans ton analyse):**

{algorithm_rules}

{lot_rules}

**CONTEXTE DU LOT:**
Voici les articles qui composent ce lot:
{articles}

**ANALYSE MINUTIEUSE DES PHOTOS:**
1. Examine TOUTES les photos fournies ({image_count} photo(s)) representant PLUSIEURS articles
2. Identifie les points communs (theme, saison, taille, style)
3. Evalue l'etat general du lot
4. Cherche la coherence entre les articles

STYLE DE REDACTION OBLIGATOIRE: "{writing_style}"
- Applique CE STYLE exactement pour la description du lot
- Ne mentionne JAMAIS le style dans ta reponse

RETOURNE UN JSON AVEC CES CHAMPS:

INFORMATIONS PRODUIT:
- title: Titre SEO optimise pour LOT Vinted (max 60 car). Format: "Lot [nombre] articles [theme/type] [taille]" Ex: "Lot 5 vetements ete fille 8 ans" ou "Lot 3 robes femme taille M"
- description: 100-150 mots. Structure pour LOT: 1) Presentation du lot et sa valeur 2) Liste des articles avec points forts 3) Theme/coherence du lot 4) Etat general 5) Avantage prix lot. Utilise le style "{writing_style}".
- brand: "Lot multi-marques" ou marque principale si dominante
- category: La categorie principale du lot parmi: {categories}
- subcategory: Type de lot (lot enfant, lot ete, lot taille M, etc.)

ATTRIBUTS VINTED:
- color: Couleur dominante du lot parmi: {colors}
- material: Matiere principale parmi: {materials} (null si mixte)
- size: Taille commune si applicable (null si tailles variees)
- condition: Etat general du lot parmi: {conditions} (very_good si tous en bon etat, good sinon)

OPTIMISATION VENTE:
- season: Saison dominante du lot ({seasons})
- suggestedPeriod: Meilleure periode de vente pour ce lot
- estimatedPrice: null (non applicable pour lot)

SEO & MARKETING VINTED:
- seoKeywords: 8 mots-cles pour LOT (ex: ["lot vetements fille", "lot 8 ans", "lot ete enfant", "lot multi-marques", "lot pas cher", "lot occasion", "vetements lot", "bundle"])
- hashtags: 10 hashtags pour LOT (ex: ["#lot", "#bundle", "#lotvetements", "#enfant", "#8ans", "#ete", "#economie", "#secondemain", "#bonplan", "#vinted"])
- searchTerms: 5 termes de recherche lot (ex: ["lot vetements fille 8 ans", "lot ete enfant", "bundle vetements", "lot pas cher", "lot multi-marques"])

QUALITE:
- confidenceScore: Score de confiance 0-100 sur la coherence et qualite du lot

IMPORTANT: Cree une description de LOT qui met en valeur l'economie realisee et la coherence des articles."""

# Coach heuristics, worded as shown to sellers
COACH_RULES = (
    "1. ALGORITHME VINTED:\n"
    "   - Les articles avec 5+ photos ont 3x plus de vues\n"
    "   - La première photo doit être parfaite (c'est la miniature)\n"
    "   - Les titres avec marque + type + détail accrocheur performent mieux\n"
    "   - Les descriptions de 80-150 mots sont optimales\n"
    "   - Remplir TOUS les champs booste le référencement\n"
    "\n"
    "2. BONNES PRATIQUES TITRE (max 60 caractères):\n"
    "   - Format gagnant: \"[Marque] [Type] [Détail accrocheur]\"\n"
    "   - Inclure: marque, type, couleur ou détail distinctif\n"
    "   - Éviter: mots vagues, majuscules excessives, prix dans le titre\n"
    "\n"
    "3. BONNES PRATIQUES DESCRIPTION:\n"
    "   - Commencer par une accroche émotionnelle\n"
    "   - Mentionner: état, taille, matière, occasion d'achat\n"
    "   - Ajouter des mots-clés naturellement (style, saison, occasion)\n"
    "   - Terminer par un call-to-action subtil\n"
    "\n"
    "4. STRATÉGIE PRIX:\n"
    "   - Prix trop bas = méfiance, prix trop haut = pas de vues\n"
    "   - Prévoir marge pour négociation (-10 à -20%)\n"
    "   - Regarder les prix de vente récents (pas les annonces en cours)\n"
    "\n"
    "5. PHOTOS QUI VENDENT:\n"
    "   - Photo 1: article entier sur fond neutre\n"
    "   - Photo 2-3: détails (étiquettes, textures, finitions)\n"
    "   - Photo 4-5: article porté ou mise en situation\n"
    "   - Lumière naturelle, pas de flash"
)

COACH_PROMPT = """{intro}

**DONNÉES DE L'ANNONCE:**
- Titre: {title}
- Description: {description}
- Marque: {brand}
- Prix: {price}
- Taille: {size}
- État: {condition}
- Couleur: {color}
- Matière: {material}
- Catégorie: {category}
- Photos: {photo_count} photo(s){photo_note}

**TES CONNAISSANCES VINTED (utilise-les dans tes conseils):**

{coach_rules}

**TA MISSION:**
1. Donner un conseil général encourageant et personnalisé (en français, 60-100 mots)
2. Proposer des suggestions CONCRÈTES pour améliorer l'annonce

Pour chaque suggestion:
- field: le champ à améliorer ({fields})
- currentValue: la valeur actuelle
- suggestedValue: ta suggestion améliorée (PRÊTE À COPIER-COLLER)
- reason: pourquoi ce changement aidera à vendre (max 40 mots en français)

FORMAT DE RÉPONSE: un objet JSON, sans texte autour:
{{"generalAdvice": "...", "suggestions": [{{"field": "...", "currentValue": "...", "suggestedValue": "...", "reason": "..."}}]}}

IMPORTANT:
- Sois SÉLECTIVE: ne suggère que les changements à FORT IMPACT
- Les suggestions doivent être immédiatement applicables
- Utilise un ton chaleureux et motivant
- Réponds TOUJOURS en français"""

# Free-form coach answer, rendered as text by the client
LISTING_COACH_PROMPT = """You are an expert Vinted sales coach. Analyze this listing and provide actionable advice to improve it and sell faster.

**LISTING DATA:**
- Title: {title}
- Description: {description}
- Brand: {brand}
- Price: {price}
- Size: {size}
- Condition: {condition}
- Color: {color}
- Material: {material}
- Category: {category}
- Photos: {photo_count} photos{photo_note}

**YOUR TASK:**
Provide personalized, actionable advice to improve this listing. Focus on:

1. **Title Quality** - Is it descriptive and keyword-rich?
2. **Description** - Is it detailed, honest, and engaging?
3. **Pricing Strategy** - Is the price competitive?
4. **Photo Quality** - Are there enough high-quality photos?
5. **Missing Information** - What key details are missing?
6. **Quick Wins** - What 2-3 changes would have the biggest impact?

Format your response in French with clear sections using **bold headers** for readability. Be specific and encouraging."""
