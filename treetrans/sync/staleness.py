"""
Staleness classification: decide per source file whether to translate,
copy or skip.

Rules:
- Non-translatable files are copied unless the target exists and is at
  least as new as the source.
- Translatable files are translated unless the target exists and the
  checkpoint records a timestamp at least as new as the source mtime.
  Entries without a timestamp fall back to comparing target mtime.
- Any stat failure leads to redoing the work, never to a skip.
"""
from __future__ import annotations

from typing import Iterable

from .checkpoint import Checkpoint
from .records import Action, FileRecord, has_extension
from ..utils.logger import get_logger

logger = get_logger(__name__)


class StalenessClassifier:

    def __init__(self, checkpoint: Checkpoint, extensions: Iterable[str]):
        self.checkpoint = checkpoint
        self.extensions = tuple(extensions)

    def is_translatable(self, record: FileRecord) -> bool:
        return has_extension(record.source, self.extensions)

    def route(self, record: FileRecord) -> Action:
        """Action for a file known to need processing."""
        return Action.TRANSLATE if self.is_translatable(record) else Action.COPY

    def classify(self, record: FileRecord) -> Action:
        if self.is_translatable(record):
            return self._classify_translatable(record)
        return self._classify_copy(record)

    def _classify_copy(self, record: FileRecord) -> Action:
        try:
            target_mtime = record.target_mtime()
        except FileNotFoundError:
            return Action.COPY
        except OSError as e:
            logger.warning(f"Cannot stat target {record.target}, copying again: {e}")
            return Action.COPY

        try:
            source_mtime = record.source_mtime()
        except OSError as e:
            logger.warning(f"Cannot stat source {record.source}, copying again: {e}")
            return Action.COPY

        return Action.SKIP if target_mtime >= source_mtime else Action.COPY

    def _classify_translatable(self, record: FileRecord) -> Action:
        try:
            target_mtime = record.target_mtime()
        except FileNotFoundError:
            return Action.TRANSLATE
        except OSError as e:
            logger.warning(f"Cannot stat target {record.target}, translating again: {e}")
            return Action.TRANSLATE

        if record.rel_path not in self.checkpoint:
            return Action.TRANSLATE

        try:
            source_mtime = record.source_mtime()
        except OSError as e:
            logger.warning(f"Cannot stat source {record.source}, translating again: {e}")
            return Action.TRANSLATE

        processed_at = self.checkpoint.last_processed(record.rel_path)
        if processed_at is None:
            processed_at = target_mtime

        if source_mtime <= processed_at:
            return Action.SKIP

        logger.debug(f"Source changed since last translation: {record.rel_path}")
        return Action.TRANSLATE
