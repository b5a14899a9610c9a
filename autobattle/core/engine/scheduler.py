"""Frame scheduling for the simulation driver.

The driver never loops on its own. It asks a FrameScheduler to call it back
on the next frame and keeps the returned handle so it can cancel the
callback when the battle leaves the running state.

Core Concepts:
- Timestamps are monotonic milliseconds
- Each requested callback runs at most once, on the next frame
- Callbacks requested during a frame run on the following frame
"""

from __future__ import annotations

import itertools
import time
from abc import ABC, abstractmethod
from typing import Callable

FrameCallback = Callable[[float], None]


class FrameScheduler(ABC):
    """Host primitive for "run this on the next frame"."""

    def __init__(self):
        self._pending: dict[int, FrameCallback] = {}
        self._handles = itertools.count(1)

    @abstractmethod
    def now(self) -> float:
        """Current monotonic time in milliseconds."""

    def request_frame(self, callback: FrameCallback) -> int:
        """Schedule a callback for the next frame.

        Returns:
            Handle that can be passed to cancel_frame()
        """
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel_frame(self, handle: int) -> bool:
        """Cancel a pending callback.

        Returns:
            True if the callback was still pending
        """
        return self._pending.pop(handle, None) is not None

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def run_frame(self, timestamp_ms: float) -> int:
        """Run every callback that was pending when the frame began.

        Returns:
            Number of callbacks run
        """
        due = self._pending
        self._pending = {}
        for callback in due.values():
            callback(timestamp_ms)
        return len(due)


class ManualFrameScheduler(FrameScheduler):
    """Scheduler driven by an explicit virtual clock.

    Used for headless simulation and tests, where frame deltas must be
    reproducible.
    """

    def __init__(self, start_ms: float = 0.0):
        super().__init__()
        self._clock_ms = start_ms

    def now(self) -> float:
        return self._clock_ms

    def advance(self, delta_ms: float) -> int:
        """Move the clock forward and run one frame.

        Returns:
            Number of callbacks run
        """
        if delta_ms < 0:
            raise ValueError("Clock cannot move backwards")
        self._clock_ms += delta_ms
        return self.run_frame(self._clock_ms)

    def run_until_idle(self, frame_ms: float, max_frames: int = 100_000) -> int:
        """Advance fixed-size frames until no callback is pending.

        Returns:
            Number of frames advanced
        """
        frames = 0
        while self.has_pending and frames < max_frames:
            self.advance(frame_ms)
            frames += 1
        return frames


class RealtimeFrameScheduler(FrameScheduler):
    """Scheduler paced by the wall clock at a target frame rate."""

    def __init__(self, target_fps: int = 60):
        super().__init__()
        if target_fps <= 0:
            raise ValueError(f"Target fps must be positive, got {target_fps}")
        self.target_fps = target_fps
        self.frame_time_ms = 1000.0 / target_fps

    def now(self) -> float:
        return time.perf_counter() * 1000.0

    def run(self) -> int:
        """Run frames until nothing is pending.

        Returns:
            Number of frames run
        """
        frames = 0
        last_frame = self.now()

        while self.has_pending:
            current_time = self.now()
            if current_time - last_frame >= self.frame_time_ms:
                self.run_frame(current_time)
                last_frame = current_time
                frames += 1
            else:
                time.sleep(0.001)

        return frames
