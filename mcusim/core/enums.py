"""Enumerations shared by the peripheral model."""

from enum import Enum
from typing import Optional, TypeVar

_E = TypeVar("_E", bound="_StrEnum")


class _StrEnum(str, Enum):
    """String-valued enum that compares equal to its wire value."""

    @classmethod
    def coerce(cls: type[_E], value: object) -> Optional[_E]:
        """Return the member for value, or None when value is not a member."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (TypeError, ValueError):
            return None

    def __str__(self) -> str:
        return str(self.value)


class PinMode(_StrEnum):
    """GPIO pin mode."""

    INPUT = "input"
    """Pin samples an external level; script writes are ignored."""

    OUTPUT = "output"
    """Pin is driven by software."""


class SerialDirection(_StrEnum):
    """Direction of a UART log entry, seen from the MCU."""

    TX = "tx"
    RX = "rx"


class MotorDirection(_StrEnum):
    """H-bridge drive direction."""

    CW = "cw"
    CCW = "ccw"
    STOP = "stop"


class SimulationState(_StrEnum):
    """Controller lifecycle state."""

    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"
