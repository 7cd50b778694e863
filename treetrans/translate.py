#!/usr/bin/env python3
"""
Translate a documentation tree, resuming where the previous run stopped.

Usage:
    python -m treetrans.translate ./docs/nl ./docs/en
    python -m treetrans.translate --config treetrans.yaml --batch-size 50
    python -m treetrans.translate --reset              # start over
    treetrans ./docs/nl ./docs/en --strategy prescan

Paths and settings can also come from the environment or a .env file
(SOURCE_DIR, TARGET_DIR, BATCH_SIZE, INTERVAL_TIME, GEMINI_API_KEY, ...).
Run it repeatedly (e.g. from cron) until it reports all files processed.
"""

import sys
import argparse
from typing import List, Optional

from .pipeline import EXIT_SETUP_ERROR, run_pipeline
from .utils.config import Config, STRATEGIES
from .utils.exceptions import ConfigError
from .utils.logger import setup_logging, get_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Incremental document-tree translator (Gemini)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit codes:
  0    done, or batch limit reached (run again to continue)
  1    setup failure
  130  interrupted
        """
    )
    parser.add_argument("source_dir", nargs="?", help="Source directory (SOURCE_DIR)")
    parser.add_argument("target_dir", nargs="?", help="Target directory (TARGET_DIR)")
    parser.add_argument("--config", help="YAML config file")
    parser.add_argument("--batch-size", type=int, help="Max files per run (BATCH_SIZE)")
    parser.add_argument("--interval-ms", type=int, help="Pause between API calls in ms (INTERVAL_TIME)")
    parser.add_argument("--strategy", choices=STRATEGIES, help="Traversal strategy")
    parser.add_argument("--source-lang", help="Source language label")
    parser.add_argument("--target-lang", help="Target language label")
    parser.add_argument("--reset", action="store_true", help="Delete progress and term report first")
    parser.add_argument("--skip-check", action="store_true", help="Skip the API connection check")
    parser.add_argument("--debug", action="store_true", default=None, help="Debug logging")
    parser.add_argument("--log-file", help="Also log to this file")
    parser.add_argument("--json-log", action="store_true", help="JSON lines in the log file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(level="DEBUG" if args.debug else "INFO")
    logger = get_logger(__name__)

    try:
        config = Config.load(args.config)
        config.apply_overrides(
            source_dir=args.source_dir,
            target_dir=args.target_dir,
            batch_size=args.batch_size,
            interval_ms=args.interval_ms,
            strategy=args.strategy,
            source_lang=args.source_lang,
            target_lang=args.target_lang,
            debug=args.debug,
            log_file=args.log_file,
            reset=args.reset or None,
        )
    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_SETUP_ERROR

    setup_logging(
        level="DEBUG" if config.logging.debug else "INFO",
        log_file=config.logging.file,
        json_format=args.json_log,
    )

    result = run_pipeline(config, check_connection=not args.skip_check)
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
