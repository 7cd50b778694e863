"""
Unresolved-term collector.

Flags words that appear unchanged in both a source document and its
translation, a hint that the model left them untranslated. Report file
``<target>/unresolved_terms.txt`` accumulates across runs: one lowercase
token per line, sorted, or a single sentinel line when empty.

Quality signal only; nothing here may fail a run.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Set

from ..utils.exceptions import FileOperationError
from ..utils.fileio import atomic_write_text
from ..utils.logger import get_logger

logger = get_logger(__name__)

REPORT_FILENAME = "unresolved_terms.txt"
NO_TERMS_SENTINEL = "No unresolved terms found"

WORD_RE = re.compile(r'\b\w+\b')
PLACEHOLDER_RE = re.compile(r'\{(\w+)\}')
CONSTANT_RE = re.compile(r'^[A-Z_]+$')


def find_unresolved_terms(source_text: str, translated_text: str) -> Set[str]:
    """
    Lowercase tokens present in both texts.

    Exempt: tokens written as ``{placeholder}`` anywhere in the source,
    ALL_CAPS/underscore literals, and numbers.
    """
    translated_tokens = {token.lower() for token in WORD_RE.findall(translated_text)}
    guarded = {name.lower() for name in PLACEHOLDER_RE.findall(source_text)}

    unresolved = set()
    for token in WORD_RE.findall(source_text):
        lowered = token.lower()
        if lowered not in translated_tokens or lowered in guarded:
            continue
        if CONSTANT_RE.match(token) or lowered.isdigit():
            continue
        unresolved.add(lowered)
    return unresolved


class UnresolvedTermCollector:

    def __init__(self, report_path: Path):
        self.report_path = Path(report_path)
        self.terms: Set[str] = set()

    def observe(self, source_text: str, translated_text: str) -> Set[str]:
        found = find_unresolved_terms(source_text, translated_text)
        self.terms.update(found)
        return found

    def read_report(self) -> Set[str]:
        try:
            content = self.report_path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return set()
        terms = set()
        for line in content.splitlines():
            line = line.strip()
            if line and line != NO_TERMS_SENTINEL:
                terms.add(line)
        return terms

    def flush(self) -> int:
        """Merge in-memory terms into the report, write it, clear memory.

        Returns the number of unique terms in the report, or -1 when the
        report could not be written (in-memory terms are kept then).
        """
        try:
            merged = self.read_report() | self.terms
            report = "\n".join(sorted(merged)) if merged else NO_TERMS_SENTINEL
            atomic_write_text(report + "\n", self.report_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to write unresolved-term report {self.report_path}: {e}")
            return -1

        logger.info(f"Unresolved-term report written: {len(merged)} unique terms ({len(self.terms)} from this run)")
        self.terms.clear()
        return len(merged)

    def reset(self) -> None:
        self.terms.clear()
        try:
            self.report_path.unlink()
            logger.info(f"Unresolved-term report removed: {self.report_path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            raise FileOperationError(
                "Failed to remove unresolved-term report",
                file_path=str(self.report_path), operation="delete", cause=e
            )
