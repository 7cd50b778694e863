"""Per-run state shared by walker, processor and reconciler."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Tuple

from .checkpoint import Checkpoint, CheckpointStore
from .governor import BatchGovernor
from .records import FileRecord, is_excluded
from .terms import UnresolvedTermCollector
from ..translators.base import TranslationContext


@dataclass
class RunStats:
    """Counters for the current run only."""
    translated: int = 0
    copied: int = 0
    skipped: int = 0
    failed: int = 0
    reconciled: int = 0

    @property
    def processed(self) -> int:
        return self.translated + self.copied


@dataclass
class RunContext:
    """
    Everything one run mutates: checkpoint, batch counter, term set, stats.

    Owned by the run and passed explicitly; nothing is process-global.
    """
    source_root: Path
    target_root: Path
    languages: TranslationContext
    store: CheckpointStore
    checkpoint: Checkpoint
    governor: BatchGovernor
    terms: UnresolvedTermCollector
    extensions: Tuple[str, ...] = (".rst",)
    exclude: Tuple[str, ...] = ()
    interval_ms: int = 0
    stats: RunStats = field(default_factory=RunStats)

    def record_for(self, rel_path: str) -> FileRecord:
        return FileRecord.from_relative(self.source_root, self.target_root, rel_path)

    def is_excluded(self, name: str) -> bool:
        return is_excluded(name, self.exclude)
