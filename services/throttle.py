"""
Per-worker adaptive concurrency limiter.

Additive increase / additive decrease: every failure bumps a consecutive-error
counter; once it passes the threshold the budget shrinks by one and the counter
resets. A success with a clean counter grows the budget by one, up to the ceiling.
"""
from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional


logger = logging.getLogger(__name__)


class _Slot:
    def __init__(self) -> None:
        self.success = True

    def failed(self) -> None:
        self.success = False


class AdaptiveThrottle:
    def __init__(self, ceiling: int, error_threshold: int = 5, name: Optional[str] = None) -> None:
        if ceiling < 1:
            raise ValueError("ceiling must be at least 1")
        self.ceiling = ceiling
        self.error_threshold = error_threshold
        self.name = name or "throttle"
        self._budget = ceiling
        self._errors = 0
        self._admitted = 0
        self._cond = threading.Condition()

    @property
    def budget(self) -> int:
        return self._budget

    @property
    def consecutive_errors(self) -> int:
        return self._errors

    @property
    def admitted(self) -> int:
        return self._admitted

    def acquire(self) -> None:
        """Block until fewer than `budget` calls are admitted, then admit one."""
        with self._cond:
            while self._admitted >= self._budget:
                self._cond.wait()
            self._admitted += 1

    def release(self, success: bool) -> None:
        with self._cond:
            if self._admitted > 0:
                self._admitted -= 1
            if success:
                if self._errors == 0 and self._budget < self.ceiling:
                    self._budget += 1
                    logger.info(
                        "Increased concurrency budget to %s", self._budget,
                        extra={"step": self.name, "status": "grow"},
                    )
            else:
                self._errors += 1
                if self._errors > self.error_threshold and self._budget > 1:
                    self._budget -= 1
                    self._errors = 0
                    logger.info(
                        "Reduced concurrency budget to %s", self._budget,
                        extra={"step": self.name, "status": "shrink"},
                    )
            self._cond.notify_all()

    @contextmanager
    def slot(self) -> Iterator[_Slot]:
        """Admit one call; reports failure if the body raises or calls `failed()`."""
        self.acquire()
        slot = _Slot()
        try:
            yield slot
        except BaseException:
            slot.success = False
            raise
        finally:
            self.release(slot.success)
