"""Translation adapters."""

from graded_reader.config import Settings

from .base import (
    TranslationRequest,
    TranslationResponse,
    Translator,
    detect_language,
    placeholder_translation,
)
from .glossary import GlossaryTranslator
from .kimi import KimiTranslator


def build_translator(settings: Settings) -> Translator:
    """Return the Kimi translator, which falls back to the glossary without a key."""
    return KimiTranslator(
        api_key=settings.kimi_api_key,
        base_url=settings.kimi_base_url,
        model=settings.kimi_model,
        timeout=settings.translation_timeout,
        cache_ttl=settings.translation_cache_ttl,
    )


__all__ = [
    "GlossaryTranslator",
    "KimiTranslator",
    "TranslationRequest",
    "TranslationResponse",
    "Translator",
    "build_translator",
    "detect_language",
    "placeholder_translation",
]
