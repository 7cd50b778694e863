"""
Prompt builders for document translation.

Contains:
- Full-document prompt (markup and placeholders preserved)
- One-line probe prompt used by the startup connection check
"""

from __future__ import annotations


def build_document_prompt(content: str, source_lang: str, target_lang: str) -> str:
    """
    Build the prompt for translating one document.

    The content is expected to be stripped; surrounding whitespace is
    restored by the caller.
    """
    return f"""Translate the following text from {source_lang} to {target_lang}.
Rules:
1. Keep all Markdown/reStructuredText markup exactly as in the source
2. Keep every variable in curly braces {{}} exactly as in the source
3. Keep all special characters, directives, links and code unchanged
4. Translate only the {source_lang} text
5. Return only the translated text, without explanations or comments

Text to translate:
{content}"""


def build_probe_prompt(source_lang: str, target_lang: str) -> str:
    """Build the minimal prompt sent by the connection check."""
    return f"Translate this {source_lang} text to {target_lang}: 'This is a test.'"
