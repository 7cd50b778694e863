"""
Translator contract used by the sync engine.

The engine only needs ``translate(text, context) -> text`` that fails with
TranslationError, plus a startup probe. Anything with these two methods can
be passed to the pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class TranslationContext:
    """Language pair for one call, plus the file it belongs to (for errors)."""
    source_lang: str
    target_lang: str
    source_file: Optional[str] = None


class Translator(Protocol):

    name: str

    def translate(self, text: str, context: TranslationContext) -> str:
        """Return translated text or raise TranslationError."""
        ...

    def check_connection(self, context: Optional[TranslationContext] = None) -> None:
        """Raise SetupError when the provider cannot be reached."""
        ...
