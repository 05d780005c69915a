"""Simulated analog temperature sensor."""

from __future__ import annotations

from mcusim.utils.consts import clamp


class TemperatureSensor:
    """Temperature source in degrees Celsius, clamped to its rated range."""

    def __init__(self, initial: float = 25.0, minimum: float = -40.0, maximum: float = 125.0):
        self.minimum = minimum
        self.maximum = maximum
        self._value = clamp(float(initial), minimum, maximum)

    @property
    def value(self) -> float:
        return self._value

    def read(self) -> float:
        return self._value

    def adjust(self, delta: float) -> float:
        """Apply an additive drift and return the clamped result."""
        self._value = clamp(self._value + float(delta), self.minimum, self.maximum)
        return self._value
