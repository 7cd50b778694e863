"""
Single-writer lock on a target tree.

Two runs against the same target would race on the checkpoint, so a second
run refuses to start while ``<target>/.treetrans.lock`` names a live
process. A lock left by a process that no longer exists (killed, crashed,
machine rebooted) is taken over.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from ..utils.exceptions import SetupError
from ..utils.logger import get_logger

logger = get_logger(__name__)

LOCK_FILENAME = ".treetrans.lock"


def pid_alive(pid: int) -> bool:
    """True if a process with this PID exists (signal 0 probe)."""
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists, owned by another user
        return True
    except OSError:
        return False
    return True


class RunLock:

    def __init__(self, target_root: Path):
        self.path = Path(target_root) / LOCK_FILENAME
        self.held = False

    def acquire(self) -> None:
        """
        Create the lock file, taking over a stale one once.

        Raises:
            SetupError: A live process holds the lock, or it cannot be created.
        """
        try:
            self._create()
        except FileExistsError:
            owner = self._read_owner()
            if owner is not None and pid_alive(owner):
                raise SetupError(
                    f"Another run (PID {owner}) holds the lock {self.path}",
                    details={"lock": str(self.path), "pid": owner}
                )
            logger.warning(f"Removing stale lock {self.path} (owner {owner if owner is not None else 'unknown'} is gone)")
            try:
                self.path.unlink()
            except FileNotFoundError:
                pass
            except OSError as e:
                raise SetupError(f"Cannot remove stale lock {self.path}", cause=e)
            try:
                self._create()
            except FileExistsError:
                raise SetupError(
                    f"Another run took the lock {self.path} first",
                    details={"lock": str(self.path)}
                )

        self.held = True
        logger.debug(f"Lock acquired: {self.path}")

    def _create(self) -> None:
        try:
            fd = os.open(self.path, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
        except FileExistsError:
            raise
        except OSError as e:
            raise SetupError(f"Cannot create lock {self.path}", cause=e)
        with os.fdopen(fd, "w") as f:
            f.write(str(os.getpid()))

    def _read_owner(self) -> Optional[int]:
        try:
            return int(self.path.read_text(encoding='utf-8').strip())
        except (OSError, ValueError):
            return None

    def release(self) -> None:
        if not self.held:
            return
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        self.held = False
        logger.debug(f"Lock released: {self.path}")

    def __enter__(self) -> "RunLock":
        self.acquire()
        return self

    def __exit__(self, *args) -> None:
        self.release()
