"""
Tree walker: mirror the source tree into the target tree.

Traversal is depth-first over an explicit stack. Inside each directory the
entries are sorted by name and files are handled before subdirectories,
so every run visits files in the same order. Directory symlinks are not
followed.

Two strategies:
- ``walk``: classify and process each file as it is reached.
- ``prescan``: classify the whole tree first, then process the flat list
  of pending files. Both stop at the batch cap.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List, Tuple

from .context import RunContext
from .governor import BatchLimitReached
from .processor import FileProcessor
from .records import Action, FileRecord, join_rel
from .staleness import StalenessClassifier
from ..utils.logger import get_logger

logger = get_logger(__name__)


class TreeWalker:

    def __init__(self, ctx: RunContext, processor: FileProcessor, classifier: StalenessClassifier):
        self.ctx = ctx
        self.processor = processor
        self.classifier = classifier

    def run(self, strategy: str = "walk") -> None:
        """
        Process the tree with the given strategy.

        Raises:
            BatchLimitReached: The cap refused a further operation.
        """
        if strategy == "walk":
            self.walk()
        elif strategy == "prescan":
            plan = self.prescan()
            logger.info(f"Pre-scan found {len(plan)} files to process")
            self.mirror_directories()
            self.process_plan(plan)
        else:
            raise ValueError(f"Unknown traversal strategy: {strategy}")

    def walk(self) -> None:
        for record in self.iter_files():
            self._handle(record, self.classifier.classify(record))

    def prescan(self) -> List[Tuple[FileRecord, Action]]:
        """Classify the whole tree without touching the target."""
        plan = []
        for record in self.iter_files(create_dirs=False):
            action = self.classifier.classify(record)
            if action is Action.SKIP:
                self._skip(record)
            else:
                plan.append((record, action))
        return plan

    def mirror_directories(self) -> None:
        """Create every target directory, empty ones included."""
        for _ in self.iter_files():
            pass

    def process_plan(self, plan: List[Tuple[FileRecord, Action]]) -> None:
        for record, action in plan:
            self._handle(record, action)

    def _skip(self, record: FileRecord) -> None:
        self.ctx.stats.skipped += 1
        logger.debug(f"Up to date: {record.rel_path}")

    def _handle(self, record: FileRecord, action: Action) -> None:
        if action is Action.SKIP:
            self._skip(record)
            return

        governor = self.ctx.governor
        if not governor.try_admit():
            logger.info(f"Batch limit reached ({governor.count}/{governor.cap} files)")
            raise BatchLimitReached(governor.cap)

        if not self.processor.process(record, action):
            governor.release()

    def iter_files(self, create_dirs: bool = True) -> Iterator[FileRecord]:
        """Yield source files in traversal order, creating target directories on the way unless disabled."""
        stack = [""]
        while stack:
            rel_dir = stack.pop()
            source_dir = self.ctx.source_root / rel_dir if rel_dir else self.ctx.source_root
            target_dir = self.ctx.target_root / rel_dir if rel_dir else self.ctx.target_root

            if create_dirs and not self._ensure_dir(target_dir):
                continue

            try:
                with os.scandir(source_dir) as it:
                    entries = sorted(it, key=lambda entry: entry.name)
            except OSError as e:
                logger.error(f"Cannot list directory {source_dir}: {e}")
                continue

            subdirs = []
            for entry in entries:
                if self.ctx.is_excluded(entry.name):
                    logger.debug(f"Excluded: {join_rel(rel_dir, entry.name)}")
                    continue
                rel_path = join_rel(rel_dir, entry.name)
                try:
                    if entry.is_dir(follow_symlinks=False):
                        subdirs.append(rel_path)
                    elif entry.is_file():
                        yield self.ctx.record_for(rel_path)
                except OSError as e:
                    logger.error(f"Cannot inspect {entry.path}: {e}")

            stack.extend(reversed(subdirs))

    def _ensure_dir(self, target_dir: Path) -> bool:
        if target_dir.is_dir():
            return True
        try:
            target_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create target directory {target_dir}: {e}")
            return False
        logger.info(f"Target directory created: {target_dir}")
        return True
