"""
Client-side write timestamp control.

The driver stamps every request (protocol v3+) with the value returned by
`Cluster.timestamp_generator`. Pinning that generator is how the harness applies
an execution-time timestamp to a single statement or a whole batch.
"""

from __future__ import annotations

from typing import Callable, Optional

from cassandra.timestamps import MonotonicTimestampGenerator


class PinnedTimestampGenerator:
    """
    Timestamp generator that returns a pinned value while one is set and falls
    back to the driver's monotonic generator otherwise.

    Not thread-safe: the harness issues requests sequentially from one thread.
    """

    def __init__(self, fallback: Optional[Callable[[], int]] = None) -> None:
        self._fallback = fallback if fallback is not None else MonotonicTimestampGenerator()
        self._pinned: Optional[int] = None

    @property
    def pinned(self) -> Optional[int]:
        return self._pinned

    def pin(self, timestamp: int) -> None:
        if timestamp is None:
            raise ValueError("timestamp must be an integer, not None")
        self._pinned = int(timestamp)

    def unpin(self) -> None:
        self._pinned = None

    def __call__(self) -> int:
        if self._pinned is not None:
            return self._pinned
        return self._fallback()


__all__ = ["PinnedTimestampGenerator"]
