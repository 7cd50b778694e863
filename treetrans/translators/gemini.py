"""
Google Gemini translation module.

Usage:
    from treetrans.translators.gemini import GeminiTranslator
    from treetrans.translators.base import TranslationContext

    translator = GeminiTranslator(api_key, model="gemini-2.0-flash")
    translator.check_connection()
    text = translator.translate(source, TranslationContext("Dutch", "English"))
"""
from __future__ import annotations

import re
from typing import Any, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from .base import TranslationContext
from .prompts import build_document_prompt, build_probe_prompt
from ..utils.config import GEMINI_MODEL, GEMINI_TEMPERATURE
from ..utils.exceptions import ConfigError, SetupError, TranslationError
from ..utils.logger import get_logger

logger = get_logger(__name__)

MAX_OUTPUT_TOKENS = 16000

_LEADING_WS = re.compile(r'^\s*')
_TRAILING_WS = re.compile(r'\s*$')


def split_whitespace(text: str) -> tuple:
    """Split text into (leading whitespace, content, trailing whitespace)."""
    content = text.strip()
    if not content:
        return text, "", ""
    leading = _LEADING_WS.match(text).group(0)
    trailing = _TRAILING_WS.search(text).group(0)
    return leading, content, trailing


class GeminiTranslator:
    """Translate whole documents with a Gemini model."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = GEMINI_MODEL,
        temperature: float = GEMINI_TEMPERATURE,
        client: Optional[Any] = None
    ):
        if client is None and not api_key:
            raise ConfigError(
                "GEMINI_API_KEY not set. Add it to the environment or .env file.",
                config_key="gemini_api_key"
            )
        self.model = model
        self.temperature = temperature
        self.client = client if client is not None else genai.Client(api_key=api_key)

    def _generate(self, prompt: str, max_output_tokens: int = MAX_OUTPUT_TOKENS) -> Optional[str]:
        response = self.client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                max_output_tokens=max_output_tokens,
                temperature=self.temperature
            )
        )
        return response.text

    def translate(self, text: str, context: TranslationContext) -> str:
        """
        Translate one document.

        Leading and trailing whitespace of the document is kept around the
        model output. Blank documents are returned as-is without a call.

        Raises:
            TranslationError: API failure, empty response, or a response
                identical to the source.
        """
        leading, content, trailing = split_whitespace(text)
        if not content:
            return text

        prompt = build_document_prompt(content, context.source_lang, context.target_lang)
        logger.debug(f"Gemini request: model={self.model}, chars={len(content)}, file={context.source_file}")

        try:
            translated = self._generate(prompt)
        except genai_errors.APIError as e:
            raise TranslationError(
                f"Gemini API error {e.code}: {e.message}",
                source_file=context.source_file, api=self.name, cause=e,
                details={"status_code": e.code}
            )
        except Exception as e:
            raise TranslationError(
                "Gemini request failed",
                source_file=context.source_file, api=self.name, cause=e
            )

        if not translated or not translated.strip():
            raise TranslationError(
                "Empty translation received",
                source_file=context.source_file, api=self.name
            )

        result = leading + translated.strip() + trailing
        if result == text:
            raise TranslationError(
                "Translation is identical to the source",
                source_file=context.source_file, api=self.name
            )
        return result

    def check_connection(self, context: Optional[TranslationContext] = None) -> None:
        """
        Send a one-line probe in the run's language pair.

        Raises:
            SetupError: Provider unreachable or returned nothing.
        """
        context = context or TranslationContext("Dutch", "English")
        prompt = build_probe_prompt(context.source_lang, context.target_lang)
        try:
            answer = self._generate(prompt, max_output_tokens=256)
        except Exception as e:
            raise SetupError(
                f"Gemini API check failed for model {self.model}",
                cause=e, details={"api": self.name}
            )
        if not answer or not answer.strip():
            raise SetupError(
                f"Gemini API check returned an empty answer for model {self.model}",
                details={"api": self.name}
            )
        logger.info(f"Gemini API reachable ({self.model}): {answer.strip()[:60]}")
