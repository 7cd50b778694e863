"""Per-run batch cap on translate/copy operations."""
from __future__ import annotations


class BatchLimitReached(Exception):
    """Raised by the walker when no further operation may start this run.

    Expected stop, not a failure: the pipeline saves progress and exits 0.
    """

    def __init__(self, cap: int):
        super().__init__(f"Batch limit reached ({cap}/{cap} files)")
        self.cap = cap


class BatchGovernor:
    """
    Counts operations started in the current run against a fixed cap.

    ``try_admit`` reserves a slot; ``release`` hands it back when the
    operation failed, so only successful operations consume the batch.
    """

    def __init__(self, cap: int):
        if isinstance(cap, bool) or not isinstance(cap, int) or cap < 1:
            raise ValueError(f"Batch cap must be a positive integer, got {cap!r}")
        self.cap = cap
        self.count = 0

    @property
    def remaining(self) -> int:
        return self.cap - self.count

    @property
    def exhausted(self) -> bool:
        return self.count >= self.cap

    def try_admit(self) -> bool:
        if self.exhausted:
            return False
        self.count += 1
        return True

    def release(self) -> None:
        if self.count > 0:
            self.count -= 1
