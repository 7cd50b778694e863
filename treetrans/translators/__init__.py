"""
Translation modules.

Usage:
    from treetrans.translators import create_translator, TranslationContext

    translator = create_translator(config)
    text = translator.translate(source, TranslationContext("Dutch", "English"))
"""

from .base import Translator, TranslationContext
from .gemini import GeminiTranslator
from ..utils.config import Config


def create_translator(config: Config) -> GeminiTranslator:
    """Build the configured translator."""
    return GeminiTranslator(
        api_key=config.gemini_api_key,
        model=config.translation.model,
        temperature=config.translation.temperature,
    )


__all__ = [
    'Translator',
    'TranslationContext',
    'GeminiTranslator',
    'create_translator',
]
