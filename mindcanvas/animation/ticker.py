"""
Frame scheduling. One tick source drives rendering and animation; frames
requested while a frame is running are deferred to the next frame.
"""
from __future__ import annotations

import itertools
import logging
import time
from abc import ABC, abstractmethod
from typing import Callable

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class TickSource(ABC):
    def __init__(self) -> None:
        self._pending: dict[int, FrameCallback] = {}
        self._ids = itertools.count(1)

    @abstractmethod
    def now(self) -> float:
        """Current time in milliseconds."""

    def request_frame(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def run_frame(self) -> int:
        """Run every callback requested before this frame; returns how many ran."""
        callbacks = list(self._pending.values())
        self._pending.clear()
        ts = self.now()
        for cb in callbacks:
            cb(ts)
        return len(callbacks)


class ManualTickSource(TickSource):
    """Synthetic clock for tests and headless rendering."""

    def __init__(self, start: float = 0.0) -> None:
        super().__init__()
        self._time = start

    def now(self) -> float:
        return self._time

    def advance(self, ms: float) -> int:
        """Move the clock forward by ms, then run one frame."""
        self._time += ms
        return self.run_frame()

    def run_until_idle(self, step: float = 16.0, max_frames: int = 10_000) -> int:
        frames = 0
        while self.pending and frames < max_frames:
            self.advance(step)
            frames += 1
        return frames


class RealtimeTickSource(TickSource):
    """Monotonic wall clock, frames paced at fps."""

    def __init__(self, fps: float = 60.0) -> None:
        super().__init__()
        self.interval = 1.0 / fps

    def now(self) -> float:
        return time.monotonic() * 1000.0

    def run_until_idle(self, timeout: float | None = None) -> int:
        """Block, running frames until nothing is pending (or timeout seconds pass)."""
        deadline = None if timeout is None else time.monotonic() + timeout
        frames = 0
        while self.pending:
            if deadline is not None and time.monotonic() >= deadline:
                logger.warning("Tick source still busy after %.2fs", timeout)
                break
            time.sleep(self.interval)
            self.run_frame()
            frames += 1
        return frames
