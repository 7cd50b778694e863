"""
Incremental tree synchronization engine.

Usage:
    from treetrans.sync import CheckpointStore, StalenessClassifier, TreeWalker
"""

from .checkpoint import Checkpoint, CheckpointStore, PROGRESS_FILENAME
from .context import RunContext, RunStats
from .governor import BatchGovernor, BatchLimitReached
from .lock import RunLock, LOCK_FILENAME
from .processor import FileProcessor
from .reconcile import Reconciler, list_files
from .records import Action, FileRecord
from .staleness import StalenessClassifier
from .terms import UnresolvedTermCollector, find_unresolved_terms, REPORT_FILENAME, NO_TERMS_SENTINEL
from .walker import TreeWalker

__all__ = [
    'Action',
    'FileRecord',
    'Checkpoint',
    'CheckpointStore',
    'PROGRESS_FILENAME',
    'StalenessClassifier',
    'BatchGovernor',
    'BatchLimitReached',
    'UnresolvedTermCollector',
    'find_unresolved_terms',
    'REPORT_FILENAME',
    'NO_TERMS_SENTINEL',
    'RunContext',
    'RunStats',
    'FileProcessor',
    'TreeWalker',
    'Reconciler',
    'list_files',
    'RunLock',
    'LOCK_FILENAME',
]
