"""
Per-file processing shared by the tree walker and the reconciler.

A successful operation is committed immediately: checkpoint entry, lifetime
counter, checkpoint written to disk. A failed one leaves no trace in the
checkpoint so the next run retries it.
"""
from __future__ import annotations

import dataclasses
import time
from typing import Callable, Optional

from .context import RunContext
from .records import Action, FileRecord
from ..translators.base import Translator
from ..utils.exceptions import FileOperationError, TranslationError
from ..utils.fileio import atomic_copy, atomic_write_text
from ..utils.logger import get_logger

logger = get_logger(__name__)


class FileProcessor:

    def __init__(
        self,
        ctx: RunContext,
        translator: Translator,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.ctx = ctx
        self.translator = translator
        self.sleep = sleep
        self.calls = 0

    def process(self, record: FileRecord, action: Action) -> bool:
        """
        Translate or copy one file and commit it to the checkpoint.

        Returns False when the file failed; the error is logged, never raised.
        """
        try:
            if action is Action.TRANSLATE:
                processed_at = self._translate(record)
                self.ctx.stats.translated += 1
                logger.info(f"Translated: {record.rel_path}")
            elif action is Action.COPY:
                processed_at = self._copy(record)
                self.ctx.stats.copied += 1
                logger.info(f"Copied: {record.rel_path}")
            else:
                raise ValueError(f"Nothing to do for action {action}")
        except (TranslationError, FileOperationError) as e:
            self.ctx.stats.failed += 1
            logger.error(f"Failed to {action.value} {record.rel_path}: {e}")
            return False

        self._commit(record, processed_at)
        return True

    def _throttle(self) -> None:
        """Fixed pause between consecutive translator calls."""
        if self.calls and self.ctx.interval_ms > 0:
            delay = self.ctx.interval_ms / 1000
            logger.debug(f"Waiting {delay:.1f}s before next translation call")
            self.sleep(delay)

    def _source_mtime(self, record: FileRecord) -> int:
        try:
            return record.source_mtime()
        except OSError as e:
            raise FileOperationError(
                "Cannot stat source", file_path=str(record.source), operation="stat", cause=e
            )

    def _ensure_parent(self, record: FileRecord) -> None:
        try:
            record.target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FileOperationError(
                "Cannot create target directory",
                file_path=str(record.target.parent), operation="mkdir", cause=e
            )

    def _translate(self, record: FileRecord) -> Optional[int]:
        processed_at = self._source_mtime(record)
        try:
            text = record.source.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise FileOperationError(
                "Cannot read source", file_path=str(record.source), operation="read", cause=e
            )
        logger.debug(f"Read {record.rel_path} ({len(text)} characters)")

        self._throttle()
        context = dataclasses.replace(self.ctx.languages, source_file=record.rel_path)
        try:
            translated = self.translator.translate(text, context)
        finally:
            self.calls += 1

        self._ensure_parent(record)
        try:
            atomic_write_text(translated, record.target)
        except OSError as e:
            raise FileOperationError(
                "Cannot write target", file_path=str(record.target), operation="write", cause=e
            )

        self.ctx.terms.observe(text, translated)
        return processed_at

    def _copy(self, record: FileRecord) -> Optional[int]:
        processed_at = self._source_mtime(record)
        self._ensure_parent(record)
        try:
            atomic_copy(record.source, record.target)
        except OSError as e:
            raise FileOperationError(
                "Cannot copy file", file_path=str(record.source), operation="copy", cause=e
            )
        return processed_at

    def _commit(self, record: FileRecord, processed_at: Optional[int]) -> None:
        self.ctx.checkpoint.record(record.rel_path, processed_at)
        try:
            self.ctx.store.save(self.ctx.checkpoint)
        except FileOperationError as e:
            # Kept in memory; written again after the next file or at run end.
            logger.error(f"Checkpoint not saved after {record.rel_path}: {e}")
