"""
Reconciler: after a complete pass, diff the full file listings of source
and target and process every source file whose target is missing.

Does not consult the checkpoint and is not subject to the batch cap; a
missing output means an earlier run left the trees inconsistent.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Set

from .context import RunContext
from .processor import FileProcessor
from .records import is_excluded, join_rel
from .staleness import StalenessClassifier
from ..utils.logger import get_logger

logger = get_logger(__name__)


def list_files(root: Path, exclude: Iterable[str] = ()) -> Set[str]:
    """All files under root as relative POSIX paths (directory symlinks not followed)."""
    exclude = tuple(exclude)
    files = set()
    stack = [""]
    while stack:
        rel_dir = stack.pop()
        try:
            with os.scandir(root / rel_dir if rel_dir else root) as it:
                entries = list(it)
        except OSError as e:
            logger.warning(f"Cannot list {root / rel_dir}: {e}")
            continue

        for entry in entries:
            if is_excluded(entry.name, exclude):
                continue
            rel_path = join_rel(rel_dir, entry.name)
            try:
                if entry.is_dir(follow_symlinks=False):
                    stack.append(rel_path)
                elif entry.is_file():
                    files.add(rel_path)
            except OSError as e:
                logger.warning(f"Cannot inspect {entry.path}: {e}")
    return files


class Reconciler:

    def __init__(self, ctx: RunContext, processor: FileProcessor, classifier: StalenessClassifier):
        self.ctx = ctx
        self.processor = processor
        self.classifier = classifier

    def find_missing(self) -> List[str]:
        source_files = list_files(self.ctx.source_root, self.ctx.exclude)
        target_files = list_files(self.ctx.target_root)
        logger.info(f"Files in source: {len(source_files)}, in target: {len(target_files)}")
        return sorted(source_files - target_files)

    def reconcile(self) -> int:
        """Process every missing file. Returns the number healed."""
        logger.info("Checking for missing files")
        missing = self.find_missing()
        if not missing:
            logger.info("No missing files found")
            return 0

        logger.warning(f"Found {len(missing)} missing files")
        for rel_path in missing:
            logger.warning(f"- {rel_path}")

        healed = 0
        for rel_path in missing:
            record = self.ctx.record_for(rel_path)
            if self.processor.process(record, self.classifier.route(record)):
                healed += 1
                self.ctx.stats.reconciled += 1

        logger.info(f"Reconciled {healed}/{len(missing)} missing files")
        return healed
