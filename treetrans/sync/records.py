"""File records and helpers shared by the sync components."""
from __future__ import annotations

import fnmatch
from dataclasses import dataclass
from enum import Enum
from pathlib import Path, PurePosixPath
from typing import Iterable


class Action(Enum):
    TRANSLATE = "translate"
    COPY = "copy"
    SKIP = "skip"


@dataclass(frozen=True)
class FileRecord:
    """One source file and its mirrored target, keyed by relative POSIX path."""
    rel_path: str
    source: Path
    target: Path

    @classmethod
    def from_relative(cls, source_root: Path, target_root: Path, rel_path: str) -> "FileRecord":
        parts = PurePosixPath(rel_path).parts
        return cls(
            rel_path=rel_path,
            source=source_root.joinpath(*parts),
            target=target_root.joinpath(*parts),
        )

    def source_mtime(self) -> int:
        return mtime_ms(self.source)

    def target_mtime(self) -> int:
        return mtime_ms(self.target)


def mtime_ms(path: Path) -> int:
    """Modification time in integer milliseconds (raises OSError)."""
    return path.stat().st_mtime_ns // 1_000_000


def join_rel(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name


def is_excluded(name: str, patterns: Iterable[str]) -> bool:
    return any(fnmatch.fnmatch(name, pattern) for pattern in patterns)


def has_extension(path: Path, extensions: Iterable[str]) -> bool:
    return path.suffix.lower() in extensions
