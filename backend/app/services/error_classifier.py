"""
Classification of upstream AI errors into user-facing categories.

Each provider words its errors differently, so the substring rules live in one
classifier per provider, selected through `get_error_classifier`.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Sequence, Tuple

from app.config import ai_config


class ErrorCategory(str, Enum):
    QUOTA_EXHAUSTED = "quota_exhausted"
    INVALID_CREDENTIALS = "invalid_credentials"
    TRANSIENT = "transient"
    UNKNOWN = "unknown"


# quota -> 429, outage -> 503; credentials and unknown stay server errors
STATUS_BY_CATEGORY: Dict[ErrorCategory, int] = {
    ErrorCategory.QUOTA_EXHAUSTED: 429,
    ErrorCategory.TRANSIENT: 503,
    ErrorCategory.INVALID_CREDENTIALS: 500,
    ErrorCategory.UNKNOWN: 500,
}


@dataclass
class ClassifiedError:
    category: ErrorCategory
    message: str  # original error text


def status_code_for(category: ErrorCategory) -> int:
    return STATUS_BY_CATEGORY.get(category, 500)


class ErrorClassifier:
    """Base classifier: ordered (category, needles) rules matched case-insensitively."""

    provider = ""
    rules: Sequence[Tuple[ErrorCategory, Sequence[str]]] = ()

    @property
    def label(self) -> str:
        return ai_config.PROVIDER_LABELS.get(self.provider, self.provider)

    @property
    def api_key_env(self) -> str:
        return ai_config.API_KEY_ENV_VARS.get(self.provider, "API_KEY")

    def classify(self, error: BaseException) -> ClassifiedError:
        message = str(error) or error.__class__.__name__
        lowered = message.lower()
        for category, needles in self.rules:
            if any(needle.lower() in lowered for needle in needles):
                return ClassifiedError(category=category, message=message)
        return ClassifiedError(category=ErrorCategory.UNKNOWN, message=message)

    def user_message(self, classified: ClassifiedError) -> str:
        """French message shown to the seller."""
        if classified.category == ErrorCategory.QUOTA_EXHAUSTED:
            return f"Quota {self.label} depasse. Veuillez reessayer plus tard ou activer la facturation."
        if classified.category == ErrorCategory.INVALID_CREDENTIALS:
            return f"Cle API {self.label} invalide ou manquante. Verifiez {self.api_key_env} dans la configuration du serveur."
        if classified.category == ErrorCategory.TRANSIENT:
            return f"Le service {self.label} est temporairement indisponible. Veuillez reessayer dans quelques instants."
        return f"Erreur lors de l'analyse avec {self.label}: {classified.message}"

    def missing_key_message(self) -> str:
        return (
            f"La cle API {self.label} n'est pas configuree. "
            f"Veuillez configurer {self.api_key_env} dans les variables d'environnement du serveur."
        )


class GeminiErrorClassifier(ErrorClassifier):
    provider = "gemini"
    rules = (
        (ErrorCategory.QUOTA_EXHAUSTED, ("quota", "RESOURCE_EXHAUSTED")),
        (ErrorCategory.INVALID_CREDENTIALS, ("API key", "API_KEY_INVALID", "PERMISSION_DENIED")),
        (ErrorCategory.TRANSIENT, ("UNAVAILABLE", "DEADLINE_EXCEEDED", "timed out", "503 ")),
    )

    def user_message(self, classified: ClassifiedError) -> str:
        if classified.category == ErrorCategory.QUOTA_EXHAUSTED:
            return "Quota Gemini depasse. Veuillez reessayer plus tard ou activer la facturation sur Google Cloud."
        return super().user_message(classified)


class OpenAIErrorClassifier(ErrorClassifier):
    provider = "openai"
    rules = (
        (ErrorCategory.QUOTA_EXHAUSTED, ("insufficient_quota", "quota", "rate limit", "rate_limit")),
        (ErrorCategory.INVALID_CREDENTIALS, ("invalid_api_key", "API key")),
        (ErrorCategory.TRANSIENT, ("timed out", "timeout", "connection error", "overloaded", "502", "503")),
    )


_CLASSIFIERS = {
    "gemini": GeminiErrorClassifier,
    "openai": OpenAIErrorClassifier,
}


def get_error_classifier(provider: str) -> ErrorClassifier:
    try:
        return _CLASSIFIERS[provider]()
    except KeyError:
        raise ValueError(f"Unknown AI provider: {provider}") from None
