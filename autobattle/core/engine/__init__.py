"""Core engine components.

This package contains the frame timing the simulation driver runs on:
- scheduler.py: Cancellable next-frame scheduling with manual and realtime clocks
"""

from .scheduler import (
    FrameCallback,
    FrameScheduler,
    ManualFrameScheduler,
    RealtimeFrameScheduler,
)

__all__ = [
    "FrameCallback",
    "FrameScheduler",
    "ManualFrameScheduler",
    "RealtimeFrameScheduler",
]
