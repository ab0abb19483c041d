"""Bounded-drift progress barrier for partitions scanning time windows.

Architecture:
    Each partition scans successive, disjoint time windows. Before starting
    its next window it checks in with the barrier, which keeps one completed
    window counter per partition and only lets trailing partitions advance.
    No partition can therefore be more than one window ahead of the slowest
    one, which keeps checkpoints consistent across partitions.

Design Decisions:
    - Slack of one, not lock-step: all partitions tied for last may proceed
    - ``checkin`` never waits: a ``False`` result means "poll again later"
    - Counters are guarded by a threading.Lock so partitions may live in
      different threads as well as different tasks of one event loop
"""

from __future__ import annotations

import asyncio
import logging
import threading
import time

from ..core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ProgressBarrier:
    """Bounds how far any partition's window count may exceed the slowest one."""

    def __init__(self, num_partitions: int) -> None:
        """Initialize barrier.

        Args:
            num_partitions: Number of partitions, ids are ``0..num_partitions-1``

        Raises:
            ConfigurationError: If num_partitions is less than 1
        """
        if num_partitions < 1:
            raise ConfigurationError(f"num_partitions must be >= 1, got {num_partitions}")
        self._windows = [0] * num_partitions
        self._lock = threading.Lock()

    @property
    def num_partitions(self) -> int:
        return len(self._windows)

    @property
    def rounds_completed(self) -> int:
        """Number of windows every partition has been granted."""
        with self._lock:
            return min(self._windows)

    @property
    def drift(self) -> int:
        """Difference between the leading and trailing window counts (0 or 1)."""
        with self._lock:
            return max(self._windows) - min(self._windows)

    def checkin(self, partition_id: int) -> bool:
        """Ask permission for ``partition_id`` to start its next window.

        Args:
            partition_id: Id of the partition that finished its current window

        Returns:
            True if the partition may proceed (its counter is advanced),
            False if it must hold and check in again later

        Raises:
            ValueError: If the partition id is unknown
        """
        self._validate_id(partition_id)

        with self._lock:
            trailing = min(self._windows)
            current = self._windows[partition_id]

            if current > trailing:
                logger.debug(
                    "barrier_hold",
                    extra={
                        "partition_id": partition_id,
                        "completed_windows": current,
                        "trailing_windows": trailing,
                    },
                )
                return False

            self._windows[partition_id] = current + 1
            if min(self._windows) > trailing:
                logger.info(
                    "barrier_round_complete",
                    extra={
                        "rounds_completed": trailing + 1,
                        "num_partitions": len(self._windows),
                    },
                )
            return True

    def completed_windows(self, partition_id: int) -> int:
        """Return the number of windows granted to ``partition_id``."""
        self._validate_id(partition_id)
        with self._lock:
            return self._windows[partition_id]

    def snapshot(self) -> dict[int, int]:
        """Return a copy of the per-partition window counts."""
        with self._lock:
            return dict(enumerate(self._windows))

    def _validate_id(self, partition_id: int) -> None:
        if not 0 <= partition_id < len(self._windows):
            raise ValueError(
                f"Unknown partition id {partition_id}, "
                f"expected 0..{len(self._windows) - 1}"
            )


async def wait_for_window(
    barrier: ProgressBarrier,
    partition_id: int,
    *,
    poll_interval: float = 0.1,
    timeout: float | None = None,
) -> None:
    """Poll ``barrier.checkin`` until the partition may start its next window.

    Cancel the awaiting task to stop polling.

    Args:
        barrier: Barrier shared by all partitions
        partition_id: Id of the polling partition
        poll_interval: Seconds to sleep between check-ins
        timeout: Give up after this many seconds (None = poll forever)

    Raises:
        TimeoutError: If the partition is still held after ``timeout`` seconds
    """
    deadline = None if timeout is None else time.monotonic() + timeout
    while not barrier.checkin(partition_id):
        if deadline is not None and time.monotonic() >= deadline:
            raise TimeoutError(
                f"Partition {partition_id} still held by the progress barrier after {timeout}s"
            )
        await asyncio.sleep(poll_interval)
