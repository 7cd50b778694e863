"""
Checkpoint store: the only durable state of the pipeline.

Document layout (``<target>/.progress.json``)::

    {
      "processedFiles": [["guide/intro.rst", 1718000000000], ...],
      "totalProcessed": 42,
      "timestamp": "2024-06-10T08:13:20.000000+00:00"
    }

Timestamps are the source mtime in milliseconds observed when the file was
read. The older plain list encoding (``"processedFiles": ["a.rst", ...]``) is
accepted on load; such entries carry no timestamp.

One writer per target tree; see ``treetrans.sync.lock``.
"""
from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from ..utils.exceptions import CheckpointError, FileOperationError
from ..utils.fileio import atomic_write_text
from ..utils.logger import get_logger

logger = get_logger(__name__)

PROGRESS_FILENAME = ".progress.json"


@dataclass
class Checkpoint:
    """Processed files (relative path -> timestamp) plus a lifetime counter."""
    processed: Dict[str, Optional[int]] = field(default_factory=dict)
    total_processed: int = 0
    saved_at: Optional[str] = None

    def __contains__(self, rel_path: str) -> bool:
        return rel_path in self.processed

    def __len__(self) -> int:
        return len(self.processed)

    def last_processed(self, rel_path: str) -> Optional[int]:
        return self.processed.get(rel_path)

    def record(self, rel_path: str, timestamp: Optional[int]) -> None:
        self.processed[rel_path] = timestamp
        self.total_processed += 1

    def to_document(self) -> Dict[str, Any]:
        return {
            "processedFiles": [[path, ts] for path, ts in sorted(self.processed.items())],
            "totalProcessed": self.total_processed,
            "timestamp": self.saved_at,
        }

    @classmethod
    def from_document(cls, data: Any) -> "Checkpoint":
        """
        Parse a checkpoint document.

        Raises:
            CheckpointError: Document has the wrong shape or types.
        """
        if not isinstance(data, dict):
            raise CheckpointError("Checkpoint document is not an object")

        entries = data.get("processedFiles", [])
        if not isinstance(entries, list):
            raise CheckpointError("processedFiles is not a list")

        processed: Dict[str, Optional[int]] = {}
        for entry in entries:
            if isinstance(entry, str):
                processed[entry] = None
            elif isinstance(entry, list) and len(entry) == 2 and isinstance(entry[0], str):
                processed[entry[0]] = _parse_timestamp(entry[1])
            else:
                raise CheckpointError("Malformed processedFiles entry", details={"entry": repr(entry)[:80]})

        total = data.get("totalProcessed", len(processed))
        if isinstance(total, bool) or not isinstance(total, int) or total < 0:
            raise CheckpointError("totalProcessed is not a non-negative integer", details={"value": total})

        saved_at = data.get("timestamp")
        if saved_at is not None and not isinstance(saved_at, str):
            raise CheckpointError("timestamp is not a string")

        return cls(processed=processed, total_processed=total, saved_at=saved_at)


def _parse_timestamp(value: Any) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CheckpointError("Timestamp is not a number", details={"value": repr(value)[:40]})
    if not math.isfinite(value):
        raise CheckpointError("Timestamp is not finite", details={"value": repr(value)})
    return int(value)


class CheckpointStore:
    """Load, save and reset the checkpoint document of one target tree."""

    def __init__(self, target_root: Path, filename: str = PROGRESS_FILENAME):
        self.path = Path(target_root) / filename

    def load(self) -> Checkpoint:
        """
        Restore the persisted checkpoint.

        Missing, unreadable or malformed documents yield an empty checkpoint;
        this never raises.
        """
        if not self.path.exists():
            logger.info("No checkpoint found, starting fresh")
            return Checkpoint()

        try:
            raw = self.path.read_text(encoding='utf-8')
            checkpoint = Checkpoint.from_document(json.loads(raw))
        except (OSError, ValueError, OverflowError, RecursionError) as e:
            logger.warning(f"Checkpoint {self.path} unreadable, starting from empty state: {e}")
            return Checkpoint()
        except CheckpointError as e:
            logger.warning(f"Checkpoint {self.path} is corrupt, starting from empty state: {e}")
            return Checkpoint()

        logger.info(
            f"Checkpoint loaded: {len(checkpoint)} files processed earlier "
            f"({checkpoint.total_processed} lifetime)"
        )
        return checkpoint

    def save(self, checkpoint: Checkpoint) -> None:
        """
        Persist the checkpoint atomically.

        Raises:
            FileOperationError: Document could not be written.
        """
        checkpoint.saved_at = datetime.now(timezone.utc).isoformat()
        payload = json.dumps(checkpoint.to_document(), indent=2, ensure_ascii=False)
        try:
            atomic_write_text(payload, self.path)
        except OSError as e:
            raise FileOperationError(
                "Failed to save checkpoint", file_path=str(self.path), operation="write", cause=e
            )
        logger.debug(f"Checkpoint saved: {len(checkpoint)} entries, {checkpoint.total_processed} lifetime")

    def reset(self) -> Checkpoint:
        """Delete the persisted document and return an empty checkpoint."""
        try:
            self.path.unlink()
            logger.info(f"Checkpoint removed: {self.path}")
        except FileNotFoundError:
            pass
        except OSError as e:
            raise FileOperationError(
                "Failed to remove checkpoint", file_path=str(self.path), operation="delete", cause=e
            )
        return Checkpoint()
