"""Atomic file writes (write to a sibling temp file, fsync, rename)."""
import os
import shutil
from pathlib import Path


def _temp_sibling(output: Path) -> Path:
    return output.with_name(output.name + ".tmp")


def atomic_write_bytes(data: bytes, output: Path) -> None:
    temp_path = _temp_sibling(output)
    try:
        with temp_path.open("wb") as fp:
            fp.write(data)
            fp.flush()
            os.fsync(fp.fileno())
        os.replace(temp_path, output)
    finally:
        if temp_path.exists():
            temp_path.unlink()


def atomic_write_text(text: str, output: Path, encoding: str = "utf-8") -> None:
    atomic_write_bytes(text.encode(encoding), output)


def atomic_copy(source: Path, output: Path) -> None:
    """Copy with metadata (mtime included); a failed copy leaves output untouched."""
    temp_path = _temp_sibling(output)
    try:
        shutil.copy2(source, temp_path)
        os.replace(temp_path, output)
    finally:
        if temp_path.exists():
            temp_path.unlink()
