"""Host-driven interval scheduler.

Scripts register their main loop with ``setInterval(loop, ms)``. Nothing
runs in the background: the host advances simulated time with advance()
and the controller invokes whatever fell due.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from mcusim.utils.consts import MAX_INTERVAL_CATCHUP, as_int


@dataclass
class _Interval:
    handle: int
    callback: Callable[[], Any]
    period: int
    due: int


class IntervalScheduler:
    """Periodic callbacks keyed by integer handle."""

    def __init__(self, max_catchup: int = MAX_INTERVAL_CATCHUP):
        self._max_catchup = max_catchup
        self._now = 0
        self._next_handle = 1
        self._intervals: dict[int, _Interval] = {}

    @property
    def now(self) -> int:
        """Simulated milliseconds elapsed since the scheduler was created."""
        return self._now

    @property
    def active(self) -> list[int]:
        return list(self._intervals)

    def set_interval(self, callback: Callable[[], Any], period_ms: object = 1) -> int:
        if not callable(callback):
            raise TypeError("setInterval() callback must be callable")
        period = max(1, as_int(period_ms) or 1)
        handle = self._next_handle
        self._next_handle += 1
        self._intervals[handle] = _Interval(handle, callback, period, self._now + period)
        return handle

    def clear_interval(self, handle: object) -> bool:
        key = as_int(handle)
        if key is None:
            return False
        return self._intervals.pop(key, None) is not None

    def cancel_all(self) -> None:
        self._intervals.clear()

    def get(self, handle: int) -> Optional[Callable[[], Any]]:
        """Return the callback for a live handle, or None once cleared."""
        interval = self._intervals.get(handle)
        return interval.callback if interval is not None else None

    def advance(self, elapsed_ms: int) -> list[int]:
        """Move time forward and return the handles that fell due.

        Handles are ordered by due time, ties broken by registration
        order. Each interval fires at most ``max_catchup`` times per call;
        any remaining backlog is dropped.
        """
        if elapsed_ms < 0:
            raise ValueError("elapsed_ms must be >= 0")
        self._now += elapsed_ms

        firings: list[tuple[int, int]] = []
        for interval in self._intervals.values():
            fired = 0
            while interval.due <= self._now and fired < self._max_catchup:
                firings.append((interval.due, interval.handle))
                interval.due += interval.period
                fired += 1
            if interval.due <= self._now:
                interval.due = self._now + interval.period

        firings.sort()
        return [handle for _, handle in firings]
