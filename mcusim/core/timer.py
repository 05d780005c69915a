"""Hardware timer records.

Timers are held in the model for display and for register-level programs,
but nothing advances them: there is no internal clock.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class TimerSnapshot:
    id: int
    enabled: bool
    counter: int
    period: int
    prescaler: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "enabled": self.enabled,
            "counter": self.counter,
            "period": self.period,
            "prescaler": self.prescaler,
        }


@dataclass
class Timer:
    id: int
    enabled: bool = False
    counter: int = 0
    period: int = 1000
    prescaler: int = 1

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(self.id, self.enabled, self.counter, self.period, self.prescaler)
