"""
Run orchestration.

One run: setup checks, optional reset, load checkpoint, walk the tree until
done or the batch cap stops it, reconcile missing outputs (complete passes
only), save checkpoint, flush the unresolved-term report.

Exit codes:
    0   finished, or paused at the batch cap (run again to continue)
    1   setup failure, nothing was processed
    130 interrupted by the operator, progress saved
"""
from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, Tuple

from .sync import (
    BatchGovernor,
    BatchLimitReached,
    CheckpointStore,
    FileProcessor,
    Reconciler,
    RunContext,
    RunLock,
    RunStats,
    StalenessClassifier,
    TreeWalker,
    UnresolvedTermCollector,
    REPORT_FILENAME,
)
from .translators import Translator, TranslationContext, create_translator
from .utils.config import Config
from .utils.exceptions import FileOperationError, SetupError
from .utils.logger import get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_SETUP_ERROR = 1
EXIT_INTERRUPTED = 130


@dataclass
class RunResult:
    exit_code: int
    stats: RunStats = field(default_factory=RunStats)
    stopped_by_cap: bool = False
    total_processed: int = 0
    error: Optional[str] = None


def check_roots(source_dir: str, target_dir: str) -> Tuple[Path, Path]:
    """
    Resolve and check both roots. The target root is created if missing.

    Raises:
        SetupError: Source unreadable, target unusable, or target inside source.
    """
    source = Path(source_dir).expanduser().resolve()
    target = Path(target_dir).expanduser().resolve()

    if not source.is_dir():
        raise SetupError(f"Source directory not accessible: {source}")
    if not os.access(source, os.R_OK | os.X_OK):
        raise SetupError(f"Source directory not readable: {source}")
    logger.info(f"Source directory accessible: {source}")

    if target == source or source in target.parents:
        raise SetupError(
            f"Target directory {target} must not be inside the source directory {source}"
        )

    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SetupError(f"Cannot create target directory: {target}", cause=e)
    if not os.access(target, os.W_OK | os.X_OK):
        raise SetupError(f"Target directory not writable: {target}")
    logger.info(f"Target directory accessible: {target}")

    return source, target


def run_pipeline(
    config: Config,
    translator: Optional[Translator] = None,
    check_connection: bool = True,
    sleep: Callable[[float], None] = time.sleep
) -> RunResult:
    """Run one bounded batch. Never raises for per-file problems."""
    logger.info("=== START ===")
    try:
        config.validate()
        logger.info(f"Config: {config.describe()}")
        source_root, target_root = check_roots(config.paths.source_dir, config.paths.target_dir)

        languages = TranslationContext(config.translation.source_lang, config.translation.target_lang)
        if translator is None:
            translator = create_translator(config)
        if check_connection:
            translator.check_connection(languages)

        lock = RunLock(target_root)
        lock.acquire()
    except SetupError as e:
        logger.error(f"Setup failed: {e}")
        return RunResult(exit_code=EXIT_SETUP_ERROR, error=str(e))

    try:
        return _run_locked(config, translator, languages, source_root, target_root, sleep)
    finally:
        lock.release()


def _run_locked(
    config: Config,
    translator: Translator,
    languages: TranslationContext,
    source_root: Path,
    target_root: Path,
    sleep: Callable[[float], None]
) -> RunResult:
    store = CheckpointStore(target_root)
    terms = UnresolvedTermCollector(target_root / REPORT_FILENAME)

    if config.reset:
        logger.info("Resetting progress")
        try:
            store.reset()
            terms.reset()
        except FileOperationError as e:
            logger.error(f"Reset failed: {e}")
            return RunResult(exit_code=EXIT_SETUP_ERROR, error=str(e))

    checkpoint = store.load()
    ctx = RunContext(
        source_root=source_root,
        target_root=target_root,
        languages=languages,
        store=store,
        checkpoint=checkpoint,
        governor=BatchGovernor(config.batch.size),
        terms=terms,
        extensions=tuple(config.translation.extensions),
        exclude=tuple(config.paths.exclude),
        interval_ms=config.batch.interval_ms,
    )
    classifier = StalenessClassifier(checkpoint, ctx.extensions)
    processor = FileProcessor(ctx, translator, sleep=sleep)
    walker = TreeWalker(ctx, processor, classifier)

    result = RunResult(exit_code=EXIT_OK, stats=ctx.stats)
    try:
        walker.run(config.batch.strategy)
        Reconciler(ctx, processor, classifier).reconcile()
    except BatchLimitReached as e:
        # Raised by the walk only, so reconciliation is skipped on capped runs
        result.stopped_by_cap = True
        logger.info(f"{e}; progress saved, run again to continue")
    except KeyboardInterrupt:
        logger.warning("Interrupted, saving progress")
        result.exit_code = EXIT_INTERRUPTED

    _finish(ctx)
    result.total_processed = checkpoint.total_processed
    _log_summary(result)
    return result


def _finish(ctx: RunContext) -> None:
    try:
        ctx.store.save(ctx.checkpoint)
    except FileOperationError as e:
        logger.error(f"Final checkpoint save failed: {e}")
    ctx.terms.flush()


def _log_summary(result: RunResult) -> None:
    stats = result.stats
    logger.info("=== SUMMARY ===")
    logger.info(
        f"This run: {stats.translated} translated, {stats.copied} copied, "
        f"{stats.skipped} up to date, {stats.failed} failed, {stats.reconciled} reconciled"
    )
    logger.info(f"Lifetime processed: {result.total_processed}")
    if result.stopped_by_cap:
        logger.info("Stopped at batch limit")
    elif result.exit_code == EXIT_OK:
        logger.info("Pass complete, all files up to date")
