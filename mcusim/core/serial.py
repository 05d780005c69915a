"""UART log: an append-only record of serial traffic."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Iterator

from mcusim.core.enums import SerialDirection


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class SerialEntry:
    timestamp: int
    direction: SerialDirection
    data: str

    def to_dict(self) -> dict:
        return {"timestamp": self.timestamp, "direction": self.direction.value, "data": self.data}


class SerialLog:
    """Unbounded, ordered serial log.

    Entries are immutable and never removed; only a full model reset starts
    a new log. Consumers window the log themselves (see tail()).
    """

    def __init__(self, clock: Callable[[], int] = _now_ms):
        self._entries: list[SerialEntry] = []
        self._clock = clock

    def write(self, data: object, direction: SerialDirection = SerialDirection.TX) -> SerialEntry:
        entry = SerialEntry(timestamp=self._clock(), direction=direction, data=str(data))
        self._entries.append(entry)
        return entry

    def tail(self, count: int) -> tuple[SerialEntry, ...]:
        """Return the most recent count entries, oldest first."""
        if count <= 0:
            return ()
        return tuple(self._entries[-count:])

    def snapshot(self) -> tuple[SerialEntry, ...]:
        return tuple(self._entries)

    def __iter__(self) -> Iterator[SerialEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)
